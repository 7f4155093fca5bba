import pytest
from pydantic import ValidationError

from rum_core.config.data_types import RumConfiguration
from rum_core.config.data_types import V2_FORMAT_FEATURE
from rum_core.primitives import LogLevel


def test_configuration_defaults() -> None:
    configuration = RumConfiguration(application_id="appId")

    assert not configuration.track_interactions
    assert configuration.enable_experimental_features == ()
    assert configuration.log_level == LogLevel.INFO
    assert not configuration.is_enabled(V2_FORMAT_FEATURE)


def test_is_enabled_matches_feature_names_exactly() -> None:
    configuration = RumConfiguration(application_id="appId", enable_experimental_features=("v2_format", "other"))

    assert configuration.is_enabled(V2_FORMAT_FEATURE)
    assert not configuration.is_enabled("v2")


def test_log_level_is_case_insensitive() -> None:
    assert RumConfiguration(application_id="appId", log_level="warning").log_level == LogLevel.WARNING


def test_unknown_log_level_is_rejected() -> None:
    with pytest.raises(ValidationError):
        RumConfiguration(application_id="appId", log_level="loud")


def test_configuration_is_immutable() -> None:
    configuration = RumConfiguration(application_id="appId")

    with pytest.raises(ValidationError):
        configuration.track_interactions = True  # type: ignore[misc]
