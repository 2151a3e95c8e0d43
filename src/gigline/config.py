"""
Client configuration: JSON file under ~/.gigline plus environment overrides.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.gigline.app"
DEFAULT_CONFIG_DIR = Path.home() / ".gigline"

ENV_OVERRIDES = {
    "base_url": "GIGLINE_API_URL",
    "timeout": "GIGLINE_TIMEOUT",
}


class Settings(BaseModel):
    base_url: str = DEFAULT_BASE_URL
    timeout: float = 30.0
    upload_folder: str = "messages"


def config_dir() -> Path:
    return Path(os.environ.get("GIGLINE_HOME", DEFAULT_CONFIG_DIR)).expanduser()


def config_path() -> Path:
    override = os.environ.get("GIGLINE_CONFIG")
    if override:
        return Path(override).expanduser()
    return config_dir() / "config.json"


def load_config(path: Optional[Path] = None) -> dict[str, Any]:
    try:
        data = json.loads((path or config_path()).read_text())
    except (FileNotFoundError, json.JSONDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(cfg: dict[str, Any], path: Optional[Path] = None) -> None:
    target = path or config_path()
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(json.dumps(cfg, indent=2))


def load_settings(path: Optional[Path] = None) -> Settings:
    """Settings from the config file, with GIGLINE_* environment variables on top."""
    values = load_config(path)
    for key, env_var in ENV_OVERRIDES.items():
        raw = os.environ.get(env_var)
        if raw:
            values[key] = raw
    try:
        return Settings.model_validate(values)
    except ValueError as e:
        logger.warning("Ignoring invalid config values: %s", e)
        return Settings()
