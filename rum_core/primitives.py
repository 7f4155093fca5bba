from enum import auto

from rum_core.common.primitives import LowerCaseStrEnum
from rum_core.common.primitives import NonEmptyStr
from rum_core.common.primitives import NonNegativeFloat
from rum_core.common.primitives import UpperCaseStrEnum

# === Identifiers ===


class ApplicationId(NonEmptyStr):
    """Identifier of the monitored application, issued by the RUM backend."""


class SessionId(NonEmptyStr):
    """Identifier of the current user session."""


class ViewId(NonEmptyStr):
    """Identifier of a single page view."""


class ActionId(NonEmptyStr):
    """Identifier of a user action (click, custom action)."""


class FeatureName(NonEmptyStr):
    """Name of an experimental feature flag (e.g. 'v2_format')."""


# === Time ===


class RelativeTime(NonNegativeFloat):
    """Milliseconds elapsed since the collector's time origin, read from a monotonic clock."""


# === Enums ===


class RumEventCategory(LowerCaseStrEnum):
    """Category discriminator of schema 1 events (carried as evt.category)."""

    VIEW = auto()
    USER_ACTION = auto()
    RESOURCE = auto()
    LONG_TASK = auto()
    ERROR = auto()


class RumEventType(LowerCaseStrEnum):
    """Type discriminator of schema 2 events (carried as type)."""

    VIEW = auto()
    ACTION = auto()
    RESOURCE = auto()
    LONG_TASK = auto()
    ERROR = auto()


class ResourceKind(LowerCaseStrEnum):
    """Kind of a loaded resource."""

    DOCUMENT = auto()
    XHR = auto()
    BEACON = auto()
    FETCH = auto()
    CSS = auto()
    JS = auto()
    IMAGE = auto()
    FONT = auto()
    MEDIA = auto()
    OTHER = auto()


class RequestType(LowerCaseStrEnum):
    """Instrumentation that observed a network request."""

    XHR = auto()
    FETCH = auto()


class ActionType(LowerCaseStrEnum):
    """How a user action was produced."""

    CLICK = auto()
    CUSTOM = auto()


class ViewLoadingType(LowerCaseStrEnum):
    """How a view was reached."""

    INITIAL_LOAD = auto()
    ROUTE_CHANGE = auto()


class ErrorSource(LowerCaseStrEnum):
    """Where an error was observed."""

    AGENT = auto()
    CONSOLE = auto()
    NETWORK = auto()
    SOURCE = auto()
    LOGGER = auto()


class SchemaVersion(LowerCaseStrEnum):
    """Wire-schema version of the assembled records."""

    V1 = auto()
    V2 = auto()


class LogLevel(UpperCaseStrEnum):
    """Log verbosity level."""

    TRACE = auto()
    DEBUG = auto()
    INFO = auto()
    WARNING = auto()
    ERROR = auto()
