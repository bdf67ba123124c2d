"""API router for v1 endpoints."""

from fastapi import APIRouter

from brief_engine.api import briefs, refinement

router = APIRouter()

# Brief analysis, merge and storage routes
router.include_router(briefs.router, tags=["briefs"])

# Conversational refinement routes
router.include_router(refinement.router, tags=["refinement"])
