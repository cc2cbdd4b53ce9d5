"""
Configuration management for Domain Finder.

Settings come from (lowest to highest precedence) defaults, a local ``.env``
file, ``DOMAIN_FINDER_*`` environment variables, an optional YAML file and
explicit CLI overrides.
The API credential is deliberately not a setting: only the *name* of the
environment variable holding it is configured, and the value is read at the
first lookup.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings


class FinderSettings(BaseSettings):
    """Domain Finder settings with environment variable support."""

    # Lookup service
    model: str = Field(
        default="gemini/gemini-2.5-flash", description="LiteLLM model identifier"
    )
    temperature: float = Field(default=0.1, ge=0.0, le=2.0, description="Sampling temperature")
    request_timeout_seconds: float = Field(
        default=60.0, gt=0, description="Timeout for a single lookup call"
    )
    api_key_env: str = Field(
        default="GEMINI_API_KEY", description="Environment variable holding the API key"
    )

    # Batch processing
    concurrency_limit: int = Field(default=5, ge=1, description="Lookups per group")
    group_delay_seconds: float = Field(
        default=0.5, ge=0.0, description="Pause between groups"
    )

    # Logging
    log_level: str = Field(default="WARNING", description="Logging level")
    json_logs: bool = Field(default=False, description="Render logs as JSON")

    model_config = {
        "env_file": ".env",
        "env_prefix": "DOMAIN_FINDER_",
        "case_sensitive": False,
        "extra": "ignore",
    }

    @classmethod
    def load_from_file(cls, config_path: Path, **overrides: Any) -> "FinderSettings":
        """
        Load settings from a YAML configuration file.

        A missing file yields default settings. Keyword overrides win over
        file values; ``None`` overrides are ignored so CLI options that were
        not given do not clobber the file.
        """
        config_data: dict[str, Any] = {}
        if config_path.exists():
            with open(config_path, "r", encoding="utf-8") as f:
                config_data = yaml.safe_load(f) or {}
            if not isinstance(config_data, dict):
                raise ValueError(f"Config file must contain a mapping: {config_path}")

        config_data.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**config_data)
