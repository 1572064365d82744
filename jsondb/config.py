"""
Configuration for JsonDB collection metadata.

Uses pydantic-settings for environment variable loading. All settings
are read from variables prefixed with ``JSONDB_``.

Invariants:
    - All settings have defaults suitable for local development
    - The schema comparator must stay the same for the registry's lifetime

How to change safely:
    - Add new settings with defaults that keep current behaviour
"""

from __future__ import annotations

import threading
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings

from .schema.versions import SchemaComparator, get_comparator

_settings: Optional[Settings] = None
_settings_lock = threading.Lock()


class Settings(BaseSettings):
    """JsonDB settings loaded from environment."""

    schema_comparator: str = Field(
        default="default",
        description="Schema version comparator: default, exact or major",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="text", description="Log format (text, json)")

    model_config = {"env_prefix": "JSONDB_"}

    def comparator(self) -> SchemaComparator:
        """Resolve the configured schema comparator.

        Raises:
            ConfigurationError: If the comparator name is unknown
        """
        return get_comparator(self.schema_comparator)


def get_settings() -> Settings:
    """Get the process-wide settings, loading them on first use."""
    global _settings
    with _settings_lock:
        if _settings is None:
            _settings = Settings()
        return _settings


def reset_settings() -> None:
    """Forget loaded settings (for testing only)."""
    global _settings
    with _settings_lock:
        _settings = None
