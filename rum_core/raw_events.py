"""Schema 1 raw events: one model per category, tagged by ``evt.category``.

Raw events are produced by the collection modules (or any other producer) and
carry only event-specific fields. Contexts (application, session, view, action,
global and customer) are added later by the schema 1 assembler.
"""

from collections.abc import Mapping
from typing import Annotated
from typing import Any

from pydantic import Discriminator
from pydantic import Field
from pydantic import Tag

from rum_core.common.models import WireModel
from rum_core.primitives import ActionId
from rum_core.primitives import ActionType
from rum_core.primitives import ErrorSource
from rum_core.primitives import ResourceKind
from rum_core.primitives import RumEventCategory
from rum_core.primitives import ViewLoadingType

# =============================================================================
# Shared sub-records
# =============================================================================


class EventDescriptor(WireModel):
    """The evt sub-record: category discriminator plus an optional event name."""

    category: RumEventCategory
    name: str | None = None


class PerformanceTimingSpan(WireModel):
    """One phase of a resource load, in nanoseconds relative to the resource start."""

    duration: int
    start: int


class PerformanceResourceDetails(WireModel):
    """Per-phase timing of a resource load. Phases that did not happen are absent."""

    connect: PerformanceTimingSpan | None = None
    dns: PerformanceTimingSpan | None = None
    download: PerformanceTimingSpan | None = None
    first_byte: PerformanceTimingSpan | None = None
    redirect: PerformanceTimingSpan | None = None
    ssl: PerformanceTimingSpan | None = None


class TracingInfo(WireModel):
    """Distributed-tracing identifiers attached to a traced resource."""

    trace_id: str | None = None
    span_id: str | None = None


class ActionMeasures(WireModel):
    """Counters of events that happened while a user action was in progress."""

    error_count: int = 0
    long_task_count: int = 0
    resource_count: int = 0


class ViewMeasures(WireModel):
    """View timings (nanoseconds) and event counters."""

    dom_complete: int | None = None
    dom_content_loaded: int | None = None
    dom_interactive: int | None = None
    first_contentful_paint: int | None = None
    load_event_end: int | None = None
    error_count: int = 0
    long_task_count: int = 0
    resource_count: int = 0
    user_action_count: int = 0


# =============================================================================
# Category variants
# =============================================================================


class DocumentInfo(WireModel):
    document_version: int


class ViewPerformance(WireModel):
    loading_time: int | None = None
    loading_type: ViewLoadingType | None = None
    measures: ViewMeasures | None = None


class RumViewEvent(WireModel):
    """A view update: emitted every time the view's measures change."""

    date: int | None = None
    duration: int | None = None
    evt: EventDescriptor = EventDescriptor(category=RumEventCategory.VIEW)
    rum: DocumentInfo | None = None
    view: ViewPerformance | None = None


class UserActionInfo(WireModel):
    id: ActionId | None = None
    measures: ActionMeasures | None = None
    type: ActionType | None = None


class RumUserActionEvent(WireModel):
    """A completed automatic action or a custom action."""

    date: int | None = None
    duration: int | None = None
    evt: EventDescriptor = EventDescriptor(category=RumEventCategory.USER_ACTION)
    user_action: UserActionInfo | None = None


class HttpInfo(WireModel):
    method: str | None = None
    performance: PerformanceResourceDetails | None = None
    status_code: int | None = None
    url: str | None = None


class NetworkInfo(WireModel):
    bytes_written: int | None = None


class ResourceInfo(WireModel):
    kind: ResourceKind | None = None
    id: str | None = None


class RumResourceEvent(WireModel):
    """A loaded resource, from a performance entry or a completed request."""

    dd: TracingInfo | None = Field(default=None, alias="_dd")
    date: int | None = None
    duration: int | None = None
    evt: EventDescriptor = EventDescriptor(category=RumEventCategory.RESOURCE)
    http: HttpInfo | None = None
    network: NetworkInfo | None = None
    resource: ResourceInfo | None = None


class RumLongTaskEvent(WireModel):
    """A task that blocked the main thread for too long."""

    date: int | None = None
    duration: int | None = None
    evt: EventDescriptor = EventDescriptor(category=RumEventCategory.LONG_TASK)


class ErrorInfo(WireModel):
    kind: str | None = None
    origin: ErrorSource | None = None
    stack: str | None = None


class ErrorHttpInfo(WireModel):
    method: str | None = None
    status_code: int | None = None
    url: str | None = None


class RumErrorEvent(WireModel):
    """A collected error. Any additional error context is kept as extra fields."""

    date: int | None = None
    evt: EventDescriptor = EventDescriptor(category=RumEventCategory.ERROR)
    message: str | None = None
    error: ErrorInfo | None = None
    http: ErrorHttpInfo | None = None


def _get_category_tag(value: Any) -> str | None:
    if isinstance(value, Mapping):
        evt = value.get("evt")
        category = evt.get("category") if isinstance(evt, Mapping) else getattr(evt, "category", None)
    else:
        category = value.evt.category
    return None if category is None else str(category)


RawRumEvent = Annotated[
    Annotated[RumViewEvent, Tag(RumEventCategory.VIEW.value)]
    | Annotated[RumUserActionEvent, Tag(RumEventCategory.USER_ACTION.value)]
    | Annotated[RumResourceEvent, Tag(RumEventCategory.RESOURCE.value)]
    | Annotated[RumLongTaskEvent, Tag(RumEventCategory.LONG_TASK.value)]
    | Annotated[RumErrorEvent, Tag(RumEventCategory.ERROR.value)],
    Discriminator(_get_category_tag),
]
