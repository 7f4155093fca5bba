from click import ClickException


class BaseRumError(Exception):
    """Base exception for all rum_core errors."""


class RumError(ClickException, BaseRumError):
    """Base exception for all user-facing rum_core errors.

    Subclasses can provide a user_help_text attribute with additional context to help
    the user resolve the error. The CLI appends it to the message.
    """

    user_help_text: str | None = None

    def format_message(self) -> str:
        if self.user_help_text:
            return str(self) + "  [" + self.user_help_text + "]"
        return str(self)


class ConfigError(RumError):
    """Base class for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when an explicitly requested configuration file does not exist."""

    user_help_text = "Pass an existing TOML file with --config, or omit the option."


class ConfigParseError(ConfigError):
    """Raised when a configuration file or environment override cannot be parsed."""


class ReplayInputError(RumError):
    """Raised when a replay input line is not a valid raw event envelope."""

    def __init__(self, line_number: int, reason: str) -> None:
        self.line_number = line_number
        self.reason = reason
        super().__init__(f"Invalid raw event envelope on line {line_number}: {reason}")
