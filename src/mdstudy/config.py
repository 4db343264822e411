"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


CONFIG_FILE = "config.yaml"


class Settings(BaseModel):
    app_name:        str = "mdstudy"
    base_url:        str = Field(default="http://localhost:3000/", description="Prefix for manifest and document fetches")
    manifest_path:   str = Field(default="manifest.json", description="Manifest location relative to base_url")
    storage_url:     str = Field(default="sqlite:///mdstudy.db", description="Database URL for persisted study state")
    storage_prefix:  str = Field(default="frontend-master-", description="Namespace prefix for storage keys")
    request_timeout: float = Field(default=10.0, gt=0, description="HTTP timeout in seconds")
    parser_config:   str = Field(default="gfm-like", description="MarkdownIt parser preset name")
    log_level:       str = Field(default="WARNING", pattern="^(TRACE|DEBUG|INFO|SUCCESS|WARNING|ERROR|CRITICAL)$")
    search_limit:    int = Field(default=20, ge=0, description="Max search results; 0 = unlimited")


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then MDSTUDY_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping, got {type(data).__name__}")

    for name in Settings.model_fields:
        if val := os.getenv(f"MDSTUDY_{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
