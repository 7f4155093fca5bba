from typing import Literal

from pydantic import Field

from rum_core.common.models import FrozenModel
from rum_core.common.models import WireModel
from rum_core.context import Context
from rum_core.primitives import ActionId
from rum_core.primitives import ActionType
from rum_core.primitives import ErrorSource
from rum_core.primitives import RelativeTime
from rum_core.primitives import RequestType
from rum_core.primitives import SessionId
from rum_core.primitives import ViewId
from rum_core.primitives import ViewLoadingType
from rum_core.raw_events import RawRumEvent
from rum_core.raw_events_v2 import RawRumEventV2

# =============================================================================
# Parent contexts (answers of ParentContextsInterface)
# =============================================================================


class ViewDetails(WireModel):
    id: ViewId
    referrer: str | None = None
    url: str


class ViewContext(WireModel):
    """Schema 1 view context: the view active at some time, and its session."""

    session_id: SessionId | None = None
    view: ViewDetails


class ActionDetails(WireModel):
    id: ActionId


class ActionContext(WireModel):
    """Schema 1 action context: the user action in progress at some time."""

    user_action: ActionDetails


class SessionDetails(WireModel):
    id: SessionId


class ViewContextV2(WireModel):
    """Schema 2 view context."""

    session: SessionDetails | None = None
    view: ViewDetails


class ActionContextV2(WireModel):
    """Schema 2 action context."""

    action: ActionDetails


# =============================================================================
# Raw event envelopes and finished records (bus payloads)
# =============================================================================


class RawRumEventCollected(FrozenModel):
    """Payload of RAW_RUM_EVENT_COLLECTED: a schema 1 raw event and its context overrides."""

    start_time: RelativeTime = Field(description="When the event was observed; keys the view/action lookups")
    raw_rum_event: RawRumEvent = Field(description="The category-tagged raw event")
    saved_global_context: Context | None = Field(
        default=None,
        description="Global context captured by the caller; replaces the live store for this event",
    )
    customer_context: Context | None = Field(
        default=None,
        description="Caller-supplied attributes, merged without key conversion",
    )


class RawRumEventV2Collected(FrozenModel):
    """Payload of RAW_RUM_EVENT_V2_COLLECTED: a schema 2 raw event and its context overrides."""

    start_time: RelativeTime
    raw_rum_event: RawRumEventV2
    saved_global_context: Context | None = None
    customer_context: Context | None = None


class RumEventCollected(FrozenModel):
    """Payload of RUM_EVENT_COLLECTED: the raw event and the assembled server record."""

    rum_event: RawRumEvent
    server_rum_event: Context


class RumEventV2Collected(FrozenModel):
    """Payload of RUM_EVENT_V2_COLLECTED."""

    rum_event: RawRumEventV2
    server_rum_event: Context


# =============================================================================
# Collected observations (inputs of the raw-event producers)
# =============================================================================


class RumPerformanceResourceTiming(FrozenModel):
    """A resource timing entry. Timing fields are relative times, None when not reported."""

    entry_type: Literal["resource"] = "resource"
    name: str = Field(description="URL of the resource")
    start_time: RelativeTime
    duration: float
    initiator_type: str = "other"
    fetch_start: float | None = None
    redirect_start: float | None = None
    redirect_end: float | None = None
    domain_lookup_start: float | None = None
    domain_lookup_end: float | None = None
    connect_start: float | None = None
    secure_connection_start: float | None = None
    connect_end: float | None = None
    request_start: float | None = None
    response_start: float | None = None
    response_end: float | None = None
    decoded_body_size: int | None = None
    trace_id: str | None = Field(default=None, description="Trace id of a traced initial document")


class RumPerformanceLongTaskTiming(FrozenModel):
    entry_type: Literal["longtask"] = "longtask"
    name: str = "self"
    start_time: RelativeTime
    duration: float


RumPerformanceEntry = RumPerformanceResourceTiming | RumPerformanceLongTaskTiming


class RequestCompleteEvent(FrozenModel):
    """A finished XHR or fetch request, as reported by the request instrumentation."""

    type: RequestType
    method: str
    url: str
    status: int
    start_time: RelativeTime
    duration: float
    response: str | None = None
    trace_id: str | None = None
    span_id: str | None = None


class AutoActionMeasures(FrozenModel):
    error_count: int = 0
    long_task_count: int = 0
    resource_count: int = 0


class AutoAction(FrozenModel):
    """An automatically detected user action that completed."""

    id: ActionId
    type: ActionType = ActionType.CLICK
    name: str
    start_time: RelativeTime
    duration: float
    measures: AutoActionMeasures = AutoActionMeasures()


class CustomAction(FrozenModel):
    """An action reported by the host application."""

    type: Literal[ActionType.CUSTOM] = ActionType.CUSTOM
    name: str
    start_time: RelativeTime
    context: Context | None = Field(default=None, description="Customer context of the action")


class CustomActionCollected(FrozenModel):
    """Payload of CUSTOM_ACTION_COLLECTED."""

    action: CustomAction
    context: Context | None = Field(
        default=None,
        description="Global context captured when the action was reported",
    )


class ViewTimings(FrozenModel):
    """Timings of a view in milliseconds, plus event counters."""

    dom_complete: float | None = None
    dom_content_loaded: float | None = None
    dom_interactive: float | None = None
    first_contentful_paint: float | None = None
    load_event_end: float | None = None
    error_count: int = 0
    long_task_count: int = 0
    resource_count: int = 0
    user_action_count: int = 0


class View(FrozenModel):
    """Payload of VIEW_UPDATED: the current state of a view."""

    id: ViewId
    start_time: RelativeTime
    duration: float
    document_version: int
    loading_time: float | None = None
    loading_type: ViewLoadingType = ViewLoadingType.INITIAL_LOAD
    measures: ViewTimings = ViewTimings()


class ErrorResource(FrozenModel):
    url: str
    method: str
    status_code: int


class ErrorMessage(FrozenModel):
    """Payload of ERROR_COLLECTED."""

    message: str
    start_time: RelativeTime
    source: ErrorSource
    kind: str | None = None
    stack: str | None = None
    resource: ErrorResource | None = None
    saved_global_context: Context | None = None
