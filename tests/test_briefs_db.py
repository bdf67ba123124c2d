"""Tests for brief storage (mocked Supabase)."""

from unittest.mock import MagicMock, patch

import pytest

from brief_engine.db.briefs import list_briefs, load_brief, save_brief
from tests.fixtures_briefs import BRIEF_ID, RICH_BRIEF


def _mock_supabase(data=None):
    """Supabase mock with chained query builder."""
    sb = MagicMock()
    chain = MagicMock()
    chain.execute.return_value = MagicMock(data=data if data is not None else [])
    chain.select.return_value = chain
    chain.insert.return_value = chain
    chain.eq.return_value = chain
    chain.order.return_value = chain
    chain.limit.return_value = chain
    sb.table.return_value = chain
    return sb, chain


class TestSaveBrief:
    def test_save_returns_id_and_stores_derived_fields(self):
        sb, chain = _mock_supabase([{"id": str(BRIEF_ID)}])

        with patch("brief_engine.db.briefs.get_supabase", return_value=sb):
            brief_id = save_brief(RICH_BRIEF, {"source": "refinement"})

        assert brief_id == BRIEF_ID
        sb.table.assert_called_with("briefs")
        row = chain.insert.call_args.args[0]
        assert row["title"] == RICH_BRIEF["title"]
        assert row["is_complete"] is True
        assert row["poor_fields"] == []
        assert row["metadata"] == {"source": "refinement"}

    def test_save_without_returned_row_raises(self):
        sb, _ = _mock_supabase([])

        with patch("brief_engine.db.briefs.get_supabase", return_value=sb):
            with pytest.raises(ValueError):
                save_brief({"title": "AB"})


class TestLoadBrief:
    def test_found(self):
        row = {"id": str(BRIEF_ID), "title": "T", "brief": {}}
        sb, chain = _mock_supabase([row])

        with patch("brief_engine.db.briefs.get_supabase", return_value=sb):
            assert load_brief(BRIEF_ID) == row

        chain.eq.assert_called_with("id", str(BRIEF_ID))

    def test_not_found(self):
        sb, _ = _mock_supabase([])

        with patch("brief_engine.db.briefs.get_supabase", return_value=sb):
            assert load_brief(BRIEF_ID) is None


def test_list_briefs_newest_first():
    sb, chain = _mock_supabase([{"id": str(BRIEF_ID)}])

    with patch("brief_engine.db.briefs.get_supabase", return_value=sb):
        rows = list_briefs(limit=5)

    assert rows == [{"id": str(BRIEF_ID)}]
    chain.order.assert_called_with("created_at", desc=True)
    chain.limit.assert_called_with(5)
