import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any
from typing import Final

from loguru import logger
from pydantic import ValidationError

from rum_core.common.logging import log_span
from rum_core.config.data_types import RumConfiguration
from rum_core.errors import ConfigNotFoundError
from rum_core.errors import ConfigParseError

CONFIG_TABLE_NAME: Final[str] = "rum"

ENV_APPLICATION_ID: Final[str] = "RUM_APPLICATION_ID"
ENV_ENABLE_EXPERIMENTAL_FEATURES: Final[str] = "RUM_ENABLE_EXPERIMENTAL_FEATURES"
ENV_LOG_LEVEL: Final[str] = "RUM_LOG_LEVEL"


def load_configuration(
    config_path: Path | None = None,
    overrides: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
) -> RumConfiguration:
    """Load the collector configuration.

    Layers, lowest precedence first: field defaults, the [rum] table of the TOML
    file at config_path, RUM_* environment variables, then overrides (typically
    command-line options). Override values of None are ignored.
    """
    if environ is None:
        environ = os.environ

    with log_span("Loading configuration", config_path=str(config_path)):
        raw: dict[str, Any] = {}
        if config_path is not None:
            raw.update(_load_rum_table(config_path))
        raw.update(_parse_env_vars(environ))
        if overrides is not None:
            raw.update({key: value for key, value in overrides.items() if value is not None})

        _check_unknown_fields(raw)
        try:
            configuration = RumConfiguration.model_validate(raw)
        except ValidationError as e:
            raise ConfigParseError(f"Invalid configuration: {e}") from e

    logger.debug("Loaded configuration for application {}", configuration.application_id)
    return configuration


# =============================================================================
# Config Loading
# =============================================================================


def _load_toml(path: Path) -> dict[str, Any]:
    """Load and parse a TOML file."""
    if not path.exists():
        raise ConfigNotFoundError(f"Config file not found: {path}")

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Failed to parse {path}: {e}") from e


def _load_rum_table(path: Path) -> dict[str, Any]:
    root = _load_toml(path)
    table = root.get(CONFIG_TABLE_NAME, {})
    if not isinstance(table, dict):
        raise ConfigParseError(f"Expected a [{CONFIG_TABLE_NAME}] table in {path}")
    return dict(table)


def _check_unknown_fields(raw_config: Mapping[str, Any]) -> None:
    """Raise ConfigParseError if raw_config contains fields RumConfiguration does not define."""
    known_fields = set(RumConfiguration.model_fields.keys())
    unknown = set(raw_config.keys()) - known_fields
    if unknown:
        raise ConfigParseError(
            f"Unknown fields in [{CONFIG_TABLE_NAME}]: {sorted(unknown)}. Valid fields: {sorted(known_fields)}"
        )


# =============================================================================
# Environment Overrides
# =============================================================================


def _parse_env_vars(environ: Mapping[str, str]) -> dict[str, Any]:
    """Extract configuration overrides from RUM_* environment variables."""
    parsed: dict[str, Any] = {}
    application_id = environ.get(ENV_APPLICATION_ID)
    if application_id:
        parsed["application_id"] = application_id
    features = environ.get(ENV_ENABLE_EXPERIMENTAL_FEATURES)
    if features is not None:
        parsed["enable_experimental_features"] = split_feature_list(features)
    log_level = environ.get(ENV_LOG_LEVEL)
    if log_level:
        parsed["log_level"] = log_level
    return parsed


def split_feature_list(value: str) -> tuple[str, ...]:
    """Split a comma-separated feature list, ignoring blanks ('a, b,' -> ('a', 'b'))."""
    return tuple(name.strip() for name in value.split(",") if name.strip())
