from pathlib import Path

import pytest

from rum_core.config.loader import load_configuration
from rum_core.config.loader import split_feature_list
from rum_core.errors import ConfigNotFoundError
from rum_core.errors import ConfigParseError
from rum_core.primitives import LogLevel


def _write_config(tmp_path: Path, content: str) -> Path:
    config_path = tmp_path / "rum.toml"
    config_path.write_text(content)
    return config_path


def test_load_configuration_from_toml(tmp_path: Path) -> None:
    config_path = _write_config(
        tmp_path,
        '[rum]\napplication_id = "app"\ntrack_interactions = true\n'
        'enable_experimental_features = ["v2_format"]\nlog_level = "debug"\n',
    )

    configuration = load_configuration(config_path, environ={})

    assert configuration.application_id == "app"
    assert configuration.track_interactions
    assert configuration.is_enabled("v2_format")
    assert configuration.log_level == LogLevel.DEBUG


def test_environment_overrides_the_file(tmp_path: Path) -> None:
    config_path = _write_config(tmp_path, '[rum]\napplication_id = "from-file"\n')

    configuration = load_configuration(
        config_path,
        environ={
            "RUM_APPLICATION_ID": "from-env",
            "RUM_ENABLE_EXPERIMENTAL_FEATURES": "v2_format, other,",
            "RUM_LOG_LEVEL": "warning",
        },
    )

    assert configuration.application_id == "from-env"
    assert configuration.enable_experimental_features == ("v2_format", "other")
    assert configuration.log_level == LogLevel.WARNING


def test_overrides_win_and_none_overrides_are_ignored(tmp_path: Path) -> None:
    config_path = _write_config(tmp_path, '[rum]\napplication_id = "from-file"\nlog_level = "ERROR"\n')

    configuration = load_configuration(
        config_path,
        overrides={"application_id": "from-cli", "log_level": None},
        environ={"RUM_APPLICATION_ID": "from-env"},
    )

    assert configuration.application_id == "from-cli"
    assert configuration.log_level == LogLevel.ERROR


def test_defaults_apply_without_file() -> None:
    configuration = load_configuration(environ={"RUM_APPLICATION_ID": "app"})

    assert not configuration.track_interactions
    assert configuration.enable_experimental_features == ()
    assert configuration.log_level == LogLevel.INFO
    assert not configuration.is_enabled("v2_format")


def test_missing_explicit_file_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigNotFoundError):
        load_configuration(tmp_path / "missing.toml", environ={})


def test_invalid_toml_raises(tmp_path: Path) -> None:
    config_path = _write_config(tmp_path, "[rum\n")

    with pytest.raises(ConfigParseError, match="Failed to parse"):
        load_configuration(config_path, environ={})


def test_unknown_field_raises(tmp_path: Path) -> None:
    config_path = _write_config(tmp_path, '[rum]\napplication_id = "app"\nsample_rate = 100\n')

    with pytest.raises(ConfigParseError, match="sample_rate"):
        load_configuration(config_path, environ={})


def test_missing_application_id_raises() -> None:
    with pytest.raises(ConfigParseError, match="application_id"):
        load_configuration(environ={})


def test_invalid_log_level_raises() -> None:
    with pytest.raises(ConfigParseError):
        load_configuration(environ={"RUM_APPLICATION_ID": "app", "RUM_LOG_LEVEL": "loud"})


def test_split_feature_list() -> None:
    assert split_feature_list(" a, b ,,") == ("a", "b")
    assert split_feature_list("") == ()
