"""
NoteCache: Application Configuration
====================================

What:  Centralized configuration management using Pydantic Settings.
How:   Values come from keyword arguments (the CLI), environment variables
       prefixed with NOTECACHE_, or a .env file. Validation runs on construction,
       so a missing host, port or cache directory stops the process before
       any request is served.
Who:   Built by the CLI and by create_app(); tests pass explicit instances.

Example environment:
    NOTECACHE_HOST=127.0.0.1
    NOTECACHE_PORT=3000
    NOTECACHE_CACHE_DIR=./cache
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
VALID_BACKENDS = {"filesystem", "memory"}


class Settings(BaseSettings):
    """
    Application settings.

    host, port and cache_dir have no defaults: all three are required and
    must be non-empty.
    """

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(min_length=1, description="Interface the server binds to")
    port: int = Field(ge=1, le=65535, description="TCP port the server listens on")

    # ── Storage ───────────────────────────────────────────────────────────
    # Every note is a direct child file of this directory
    cache_dir: str = Field(min_length=1, description="Directory that holds note files")

    # filesystem: FileNoteRepository rooted at cache_dir
    # memory:     InMemoryNoteRepository (nothing touches disk)
    storage_backend: str = Field(default="filesystem")

    # Off by default: note names are joined onto cache_dir verbatim.
    # When on, names that would resolve outside cache_dir are rejected with 400.
    confine_names: bool = Field(default=False)

    # ── Logging ───────────────────────────────────────────────────────────
    log_level: str = Field(default="INFO")

    model_config = SettingsConfigDict(
        env_prefix="NOTECACHE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("host", "cache_dir")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Rejects values made only of whitespace."""
        if not v.strip():
            raise ValueError("must not be blank")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        upper = v.upper()
        if upper not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {VALID_LOG_LEVELS}")
        return upper

    @field_validator("storage_backend")
    @classmethod
    def validate_storage_backend(cls, v: str) -> str:
        lower = v.lower()
        if lower not in VALID_BACKENDS:
            raise ValueError(f"Invalid storage_backend '{v}'. Must be one of: {VALID_BACKENDS}")
        return lower


@lru_cache
def get_settings() -> Settings:
    """
    Build the process-wide Settings from the environment.

    Raises pydantic.ValidationError when host, port or cache_dir is missing.
    """
    return Settings()
