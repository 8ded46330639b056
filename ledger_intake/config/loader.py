from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import IntakeConfig, ParsingConfig, ValidationConfig

"""Intake configuration.

The YAML file is checked against the packaged ``schema.json`` before anything
is built, so unknown keys and wrong types are reported with the offending path
(``$.parsing.max_rows``) instead of surfacing later as odd parser behavior.
The ``parsing`` and ``validation`` sections are shallow overrides of the
dataclass defaults.
"""

SCHEMA_PATH = Path(__file__).with_name("schema.json")
DEFAULT_CONFIG_PATH = Path("config/intake.yml")
CONFIG_ENV_VAR = "LEDGER_INTAKE_CONFIG"


class ConfigError(Exception):
    pass


@lru_cache(maxsize=1)
def _load_schema() -> dict[str, Any]:
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")
    try:
        return json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e


def _validate_config_schema(data: dict[str, Any]) -> None:
    try:
        jsonschema.validate(data, _load_schema())
    except ValidationError as e:
        raise ConfigError(f"config validation failed at {e.json_path}: {e.message}") from e


def resolve_config_path(cli_value: Path | None = None) -> Path:
    """--config, then $LEDGER_INTAKE_CONFIG, then config/intake.yml."""
    if cli_value is not None:
        return cli_value
    from_env = os.getenv(CONFIG_ENV_VAR)
    return Path(from_env) if from_env else DEFAULT_CONFIG_PATH


def build_config(data: dict[str, Any]) -> IntakeConfig:
    """Validate parsed config data and build an IntakeConfig from it."""
    _validate_config_schema(data)
    optional: dict[str, Any] = {}
    if "extensions" in data:
        optional["extensions"] = tuple(ext.lower() for ext in data["extensions"])
    return IntakeConfig(
        source_directory=data["source_directory"],
        columns=dict(data["columns"]),
        defaults=dict(data.get("defaults") or {}),
        parsing=ParsingConfig().with_overrides(**(data.get("parsing") or {})),
        validation=ValidationConfig().with_overrides(**(data.get("validation") or {})),
        **optional,
    )


def load_config(path: Path) -> IntakeConfig:
    if not path.is_file():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping: {path}")
    return build_config(data)
