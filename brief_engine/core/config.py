"""Configuration management for the Brief Refinement Engine."""

from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file (only if accessible)
try:
    load_dotenv()
except (PermissionError, OSError):
    # In sandboxed environments, .env might not be accessible
    pass


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    # Supabase configuration (required)
    SUPABASE_URL: str = Field(..., description="Supabase project URL")
    SUPABASE_SERVICE_ROLE_KEY: str = Field(..., description="Supabase service role key")

    # OpenAI configuration (required)
    OPENAI_API_KEY: str = Field(..., description="OpenAI API key")

    # Environment
    BRIEF_ENGINE_ENV: str = Field(default="dev", description="Environment: dev, staging, prod")

    # Refinement collaborator
    REFINEMENT_MODEL: str = Field(default="gpt-4o-mini", description="Model proposing brief updates")
    REFINEMENT_TEMPERATURE: float = Field(default=0.2, description="Temperature for brief updates")
    REFINEMENT_MAX_TOKENS: int = Field(default=4000, description="Max output tokens per update")
    REFINEMENT_MAX_ROUNDS: int = Field(
        default=10, description="Max question/answer rounds per refinement session"
    )
    REFINEMENT_SESSION_TTL_SECONDS: float = Field(
        default=3600.0, description="Idle time after which a live session is evicted"
    )
    REFINEMENT_COMPLETED_SESSION_TTL_SECONDS: float = Field(
        default=300.0, description="Idle time after which a finished session is evicted"
    )
    REFINEMENT_MAX_SESSIONS: int = Field(
        default=1000, description="Max sessions held in memory per process"
    )

    # Brief generation collaborator
    GENERATION_MODEL: str = Field(default="gpt-4o", description="Model generating briefs from transcripts")
    GENERATION_TEMPERATURE: float = Field(default=0.2, description="Temperature for brief generation")
    GENERATION_MAX_TOKENS: int = Field(default=2500, description="Max output tokens for a generated brief")

    # Analysis enrichment collaborator
    ANALYSIS_MODEL: str = Field(default="gpt-4o-mini", description="Model for AI brief analysis")
    ANALYSIS_MAX_TOKENS: int = Field(default=2000, description="Max output tokens for analysis")

    # Collaborator transport
    COLLABORATOR_MAX_RETRIES: int = Field(
        default=2, description="Retries on transient collaborator failures"
    )
    COLLABORATOR_TIMEOUT_SECONDS: float = Field(
        default=60.0, description="Timeout per collaborator request"
    )
    COLLABORATOR_RETRY_DELAY_SECONDS: float = Field(
        default=1.0, description="Initial backoff delay between retries"
    )

    # Scoring
    POINTS_PER_CHECK: int = Field(default=25, description="Points awarded per passing criteria check")


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings instance

    Raises:
        ValidationError: If required environment variables are missing
    """
    return Settings()
