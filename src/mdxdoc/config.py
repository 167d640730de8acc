"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from mdxdoc.core.imports import DEFAULT_EXTENSION, DEFAULT_IMPORT_ROOT


CONFIG_FILE = "config.yaml"
ENV_PREFIX = "MDXDOC_"


class Settings(BaseModel):
    app_name:              str = "mdxdoc"
    component_import_root: str = Field(default=DEFAULT_IMPORT_ROOT, description="Directory prefix of generated component imports")
    component_extension:   str = Field(default=DEFAULT_EXTENSION,   description="File extension of generated component imports")
    log_level:             str = Field(default="WARNING", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    json_indent:           int = Field(default=2, ge=0, description="Indent for JSON output; 0 = compact")


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then MDXDOC_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping")

    for name in Settings.model_fields:
        if val := os.getenv(f"{ENV_PREFIX}{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    if isinstance(data.get("log_level"), str):
        data["log_level"] = data["log_level"].upper()
    return Settings(**data)
