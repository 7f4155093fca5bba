from click import ClickException

from rum_core.errors import BaseRumError
from rum_core.errors import ConfigNotFoundError
from rum_core.errors import ConfigParseError
from rum_core.errors import ReplayInputError


def test_user_facing_errors_are_click_exceptions() -> None:
    error = ConfigParseError("bad value")

    assert isinstance(error, ClickException)
    assert isinstance(error, BaseRumError)
    assert error.format_message() == "bad value"


def test_help_text_is_appended_to_the_message() -> None:
    error = ConfigNotFoundError("Config file not found: rum.toml")

    assert error.format_message().startswith("Config file not found: rum.toml  [")


def test_replay_input_error_names_the_line() -> None:
    error = ReplayInputError(3, "start_time: Field required")

    assert error.line_number == 3
    assert "line 3" in error.format_message()
