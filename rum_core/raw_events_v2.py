"""Schema 2 raw events: one model per type, tagged by the top-level ``type`` field.

Category payloads are nested under a sub-record named after the type (view,
action, resource, error, long_task) instead of being spread at the top level.
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
from rum_core.primitives import RumEventType
from rum_core.primitives import ViewLoadingType
from rum_core.raw_events import PerformanceTimingSpan
from rum_core.raw_events import TracingInfo


class Count(WireModel):
    count: int = 0


class DocumentVersionInfo(WireModel):
    document_version: int


class ViewDetailsV2(WireModel):
    action: Count | None = None
    dom_complete: int | None = None
    dom_content_loaded: int | None = None
    dom_interactive: int | None = None
    error: Count | None = None
    first_contentful_paint: int | None = None
    load_event_end: int | None = None
    loading_time: int | None = None
    loading_type: ViewLoadingType | None = None
    long_task: Count | None = None
    resource: Count | None = None
    time_spent: int | None = None


class RumViewEventV2(WireModel):
    dd: DocumentVersionInfo | None = Field(default=None, alias="_dd")
    date: int | None = None
    type: RumEventType = RumEventType.VIEW
    view: ViewDetailsV2 | None = None


class ActionTarget(WireModel):
    name: str


class ActionDetailsV2(WireModel):
    id: ActionId | None = None
    type: ActionType | None = None
    target: ActionTarget | None = None
    loading_time: int | None = None
    error: Count | None = None
    long_task: Count | None = None
    resource: Count | None = None


class RumActionEventV2(WireModel):
    date: int | None = None
    type: RumEventType = RumEventType.ACTION
    action: ActionDetailsV2 | None = None


class ResourceDetailsV2(WireModel):
    id: str | None = None
    type: ResourceKind | None = None
    url: str | None = None
    method: str | None = None
    status_code: int | None = None
    duration: int | None = None
    size: int | None = None
    connect: PerformanceTimingSpan | None = None
    dns: PerformanceTimingSpan | None = None
    download: PerformanceTimingSpan | None = None
    first_byte: PerformanceTimingSpan | None = None
    redirect: PerformanceTimingSpan | None = None
    ssl: PerformanceTimingSpan | None = None


class RumResourceEventV2(WireModel):
    dd: TracingInfo | None = Field(default=None, alias="_dd")
    date: int | None = None
    type: RumEventType = RumEventType.RESOURCE
    resource: ResourceDetailsV2 | None = None


class ErrorResourceV2(WireModel):
    method: str | None = None
    status_code: int | None = None
    url: str | None = None


class ErrorDetailsV2(WireModel):
    message: str | None = None
    source: ErrorSource | None = None
    stack: str | None = None
    type: str | None = None
    resource: ErrorResourceV2 | None = None


class RumErrorEventV2(WireModel):
    date: int | None = None
    type: RumEventType = RumEventType.ERROR
    error: ErrorDetailsV2 | None = None


class LongTaskDetailsV2(WireModel):
    duration: int | None = None


class RumLongTaskEventV2(WireModel):
    date: int | None = None
    type: RumEventType = RumEventType.LONG_TASK
    long_task: LongTaskDetailsV2 | None = None


def _get_type_tag(value: Any) -> str | None:
    event_type = value.get("type") if isinstance(value, Mapping) else value.type
    return None if event_type is None else str(event_type)


RawRumEventV2 = Annotated[
    Annotated[RumViewEventV2, Tag(RumEventType.VIEW.value)]
    | Annotated[RumActionEventV2, Tag(RumEventType.ACTION.value)]
    | Annotated[RumResourceEventV2, Tag(RumEventType.RESOURCE.value)]
    | Annotated[RumLongTaskEventV2, Tag(RumEventType.LONG_TASK.value)]
    | Annotated[RumErrorEventV2, Tag(RumEventType.ERROR.value)],
    Discriminator(_get_type_tag),
]
