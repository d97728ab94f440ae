from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import jsonschema
import yaml


DISPLAY_CURSES = "curses"
DISPLAY_STREAM = "stream"
DISPLAY_MODES = (DISPLAY_CURSES, DISPLAY_STREAM)

DEFAULT_SCHEMA_PATH = Path("config/schema.json")


@dataclass(frozen=True)
class Settings:
    log_level: str = "INFO"
    app_log_path: Optional[str] = None
    metrics_log_path: Optional[str] = None
    display: str = DISPLAY_CURSES
    config_path: Optional[Path] = None
    raw: Dict[str, Any] = field(default_factory=dict)


def default_settings() -> Settings:
    return Settings()


def load_yaml(path: Path) -> Dict[str, Any]:
    data = yaml.safe_load(path.read_text())
    return data or {}


def validate_config(config: Dict[str, Any], schema_path: Path) -> None:
    schema = json.loads(schema_path.read_text())
    jsonschema.validate(instance=config, schema=schema)


def load_settings(config_path: Path, schema_path: Path = DEFAULT_SCHEMA_PATH) -> Settings:
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")
    if not schema_path.exists():
        raise FileNotFoundError(f"Schema file not found: {schema_path}")

    config = load_yaml(config_path)
    validate_config(config, schema_path)

    logging_cfg = config.get("logging", {}) or {}
    return Settings(
        log_level=str(logging_cfg.get("level", "INFO")),
        app_log_path=logging_cfg.get("app_log_path"),
        metrics_log_path=logging_cfg.get("metrics_log_path"),
        display=str(config.get("display", DISPLAY_CURSES)),
        config_path=config_path,
        raw=config,
    )
