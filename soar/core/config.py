"""
Configuration management via environment variables.

This module loads configuration from .env file using python-dotenv.
All configuration values are accessed through the Settings class.

API credentials have no default value: the memory store key and the
LLM key must come from the environment (or a secret store that
populates it) at startup.
"""
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


# Load .env file from project root
# This must happen before accessing os.environ
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(env_path)


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    frozen=True makes the dataclass immutable, preventing accidental
    modification of settings at runtime.

    Attributes:
        app_name: Application identifier for logging and memory metadata
        app_env: Environment name (development, staging, production)
        log_level: Logging verbosity (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory for daily log files (None = <project>/logs)
        database_url: SQLAlchemy URL of the sync ledger database
        memory_api_key: Token for the remote memory store
        memory_base_url: Base URL of the memory store API (.../v1)
        openai_api_key: Bearer key for the chat-completion API
        llm_base_url: Base URL of the chat-completion API (.../v1)
        llm_model_classifier: Small model used for message classification
        llm_model_chat: Model used for replies, acknowledgments, reformatting
        llm_model_search: Search-augmented model used for web questions
        http_timeout_seconds: Timeout applied to every remote HTTP call
        sync_max_workers: Fan-out width when syncing trips/bookings
        background_max_workers: Workers for fire-and-forget memory writes
    """
    # Application settings
    app_name: str
    app_env: str
    log_level: str
    log_dir: Optional[str]

    # Sync ledger
    database_url: str

    # Memory store
    memory_api_key: str
    memory_base_url: str

    # LLM settings
    openai_api_key: str
    llm_base_url: str
    llm_model_classifier: str
    llm_model_chat: str
    llm_model_search: str

    # Network / concurrency
    http_timeout_seconds: float
    sync_max_workers: int
    background_max_workers: int

    # Safety settings
    rate_limit_per_minute: int
    enable_audit_logging: bool

    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.app_env.lower() == "development"


def _get_env(key: str, default: Optional[str] = None) -> str:
    """
    Get environment variable with optional default.

    Args:
        key: Environment variable name
        default: Default value if not set

    Returns:
        Environment variable value

    Raises:
        ValueError: If required variable is not set and no default provided
    """
    value = os.environ.get(key, default)
    if value is None or value == "":
        if default is not None:
            return default
        raise ValueError(
            f"Required environment variable '{key}' is not set. "
            f"Please check your .env file."
        )
    return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Settings are read once; call get_settings.cache_clear() after
    changing the environment (tests do this).

    Returns:
        Settings instance with all configuration values

    Raises:
        ValueError: If required environment variables are missing
    """
    database_url = _get_env("DATABASE_URL", "sqlite:///./soar_ledger.db")

    # Heroku-style URLs use the old dialect name
    if database_url.startswith("postgres://"):
        database_url = database_url.replace("postgres://", "postgresql://", 1)
    if database_url.startswith("mysql://"):
        database_url = database_url.replace("mysql://", "mysql+pymysql://", 1)

    return Settings(
        # Application
        app_name=_get_env("APP_NAME", "soar"),
        app_env=_get_env("APP_ENV", "development"),
        log_level=_get_env("LOG_LEVEL", "INFO"),
        log_dir=os.environ.get("LOG_DIR") or None,

        # Ledger
        database_url=database_url,

        # Memory store
        memory_api_key=_get_env("MEMORY_API_KEY"),
        memory_base_url=_get_env("MEMORY_BASE_URL", "https://api.mem0.ai/v1").rstrip("/"),

        # LLM
        openai_api_key=_get_env("OPENAI_API_KEY"),
        llm_base_url=_get_env("LLM_BASE_URL", "https://api.openai.com/v1").rstrip("/"),
        llm_model_classifier=_get_env("LLM_MODEL_CLASSIFIER", "gpt-3.5-turbo"),
        llm_model_chat=_get_env("LLM_MODEL_CHAT", "gpt-4o"),
        llm_model_search=_get_env("LLM_MODEL_SEARCH", "gpt-4o-search-preview"),

        # Network / concurrency
        http_timeout_seconds=float(_get_env("HTTP_TIMEOUT_SECONDS", "30")),
        sync_max_workers=int(_get_env("SYNC_MAX_WORKERS", "8")),
        background_max_workers=int(_get_env("BACKGROUND_MAX_WORKERS", "4")),

        # Safety
        rate_limit_per_minute=int(_get_env("RATE_LIMIT_PER_MINUTE", "30")),
        enable_audit_logging=_get_env("ENABLE_AUDIT_LOGGING", "true").lower() == "true",
    )
