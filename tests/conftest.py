"""Pytest configuration and fixtures."""

import os

import pytest


@pytest.fixture(scope="session", autouse=True)
def setup_test_env():
    """Set up test environment variables."""
    os.environ["SUPABASE_URL"] = "https://test.supabase.co"
    os.environ["SUPABASE_SERVICE_ROLE_KEY"] = "test-key"
    os.environ["OPENAI_API_KEY"] = "test-openai-key"
    os.environ["BRIEF_ENGINE_ENV"] = "test"
    os.environ["COLLABORATOR_RETRY_DELAY_SECONDS"] = "0"


@pytest.fixture(autouse=True)
def clear_cached_singletons():
    """Drop cached settings, clients and registries between tests."""
    from brief_engine.api.briefs import get_rule_engine
    from brief_engine.core.config import get_settings
    from brief_engine.core.refinement_session import get_session_registry
    from brief_engine.db.supabase_client import get_supabase

    for cached in (get_settings, get_rule_engine, get_session_registry, get_supabase):
        cached.cache_clear()
    yield
