"""Database operations for stored briefs."""

from typing import Any
from uuid import UUID

from brief_engine.core.field_quality import is_brief_complete, list_poor_fields
from brief_engine.core.logging import get_logger
from brief_engine.core.schemas_brief import generate_brief_title
from brief_engine.db.supabase_client import get_supabase

logger = get_logger(__name__)

TABLE = "briefs"


def save_brief(document: dict[str, Any], metadata: dict[str, Any] | None = None) -> UUID:
    """
    Persist a brief document.

    Args:
        document: Brief document
        metadata: Free-form metadata (source, session id, ...)

    Returns:
        UUID of the stored brief
    """
    supabase = get_supabase()

    row = {
        "title": generate_brief_title(document),
        "brief": document,
        "metadata": metadata or {},
        "is_complete": is_brief_complete(document),
        "poor_fields": list_poor_fields(document),
    }

    try:
        response = supabase.table(TABLE).insert(row).execute()

        if not response.data:
            raise ValueError("No data returned from insert")

        brief_id = UUID(response.data[0]["id"])
        logger.info(
            f"Saved brief {brief_id}",
            extra={"brief_id": str(brief_id), "is_complete": row["is_complete"]},
        )
        return brief_id

    except Exception as e:
        logger.error(f"Failed to save brief: {e}")
        raise


def load_brief(brief_id: UUID) -> dict[str, Any] | None:
    """
    Get a stored brief by id.

    Args:
        brief_id: Brief UUID

    Returns:
        Brief row dict or None if not found
    """
    supabase = get_supabase()

    try:
        response = supabase.table(TABLE).select("*").eq("id", str(brief_id)).execute()

        if response.data and len(response.data) > 0:
            return response.data[0]
        return None

    except Exception as e:
        logger.error(f"Failed to load brief {brief_id}: {e}")
        raise


def list_briefs(limit: int = 20) -> list[dict[str, Any]]:
    """
    List the most recently created briefs.

    Args:
        limit: Maximum number of rows

    Returns:
        Brief rows, newest first
    """
    supabase = get_supabase()

    try:
        response = (
            supabase.table(TABLE)
            .select("id, title, is_complete, metadata, created_at, updated_at")
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return response.data or []

    except Exception as e:
        logger.error(f"Failed to list briefs: {e}")
        raise
