"""Turns resource timing entries and completed requests into resource raw events.

Both sources are gated by the session's resource-tracking policy, read again for
every observation. Resource timing entries of XHR and fetch calls are skipped,
completed requests report those.
"""

from typing import Final
from typing import assert_never
from uuid import uuid4

from rum_core.clock import Clock
from rum_core.clock import ms_to_ns
from rum_core.collection.resource_utils import compute_performance_resource_details
from rum_core.collection.resource_utils import compute_performance_resource_duration
from rum_core.collection.resource_utils import compute_resource_kind
from rum_core.collection.resource_utils import compute_size
from rum_core.config.data_types import RumConfiguration
from rum_core.config.data_types import V2_FORMAT_FEATURE
from rum_core.data_types import RawRumEventCollected
from rum_core.data_types import RawRumEventV2Collected
from rum_core.data_types import RequestCompleteEvent
from rum_core.data_types import RumPerformanceEntry
from rum_core.data_types import RumPerformanceResourceTiming
from rum_core.interfaces import RumSessionInterface
from rum_core.lifecycle import LifeCycle
from rum_core.lifecycle import LifeCycleEventType
from rum_core.lifecycle import Subscription
from rum_core.primitives import RequestType
from rum_core.primitives import ResourceKind
from rum_core.raw_events import HttpInfo
from rum_core.raw_events import NetworkInfo
from rum_core.raw_events import ResourceInfo
from rum_core.raw_events import RumResourceEvent
from rum_core.raw_events import TracingInfo
from rum_core.raw_events_v2 import ResourceDetailsV2
from rum_core.raw_events_v2 import RumResourceEventV2

_REQUEST_KINDS: Final[frozenset[ResourceKind]] = frozenset({ResourceKind.XHR, ResourceKind.FETCH})


def start_resource_collection(
    lifecycle: LifeCycle,
    configuration: RumConfiguration,
    session: RumSessionInterface,
    clock: Clock,
) -> list[Subscription]:
    def handle_performance_entry(entry: RumPerformanceEntry) -> None:
        if entry.entry_type != "resource" or not session.is_tracked_with_resource():
            return
        if compute_resource_kind(entry) in _REQUEST_KINDS:
            return
        if configuration.is_enabled(V2_FORMAT_FEATURE):
            lifecycle.notify(LifeCycleEventType.RAW_RUM_EVENT_V2_COLLECTED, process_resource_entry_v2(entry, clock))
        else:
            lifecycle.notify(LifeCycleEventType.RAW_RUM_EVENT_COLLECTED, process_resource_entry(entry, clock))
        lifecycle.notify(LifeCycleEventType.RESOURCE_ADDED_TO_BATCH)

    def handle_request(request: RequestCompleteEvent) -> None:
        if not session.is_tracked_with_resource():
            return
        if configuration.is_enabled(V2_FORMAT_FEATURE):
            lifecycle.notify(LifeCycleEventType.RAW_RUM_EVENT_V2_COLLECTED, process_request_v2(request, clock))
        else:
            lifecycle.notify(LifeCycleEventType.RAW_RUM_EVENT_COLLECTED, process_request(request, clock))
        lifecycle.notify(LifeCycleEventType.RESOURCE_ADDED_TO_BATCH)

    return [
        lifecycle.subscribe(LifeCycleEventType.PERFORMANCE_ENTRY_COLLECTED, handle_performance_entry),
        lifecycle.subscribe(LifeCycleEventType.REQUEST_COMPLETED, handle_request),
    ]


# =============================================================================
# Schema 1
# =============================================================================


def process_resource_entry(entry: RumPerformanceResourceTiming, clock: Clock) -> RawRumEventCollected:
    raw_event = RumResourceEvent(
        dd=TracingInfo(trace_id=entry.trace_id) if entry.trace_id else None,
        date=clock.get_timestamp(entry.start_time),
        duration=compute_performance_resource_duration(entry),
        http=HttpInfo(
            performance=compute_performance_resource_details(entry),
            url=entry.name,
        ),
        network=NetworkInfo(bytes_written=compute_size(entry)),
        resource=ResourceInfo(kind=compute_resource_kind(entry)),
    )
    return RawRumEventCollected(start_time=entry.start_time, raw_rum_event=raw_event)


def process_request(request: RequestCompleteEvent, clock: Clock) -> RawRumEventCollected:
    tracing = _get_request_tracing(request)
    raw_event = RumResourceEvent(
        dd=tracing,
        date=clock.get_timestamp(request.start_time),
        duration=ms_to_ns(request.duration),
        http=HttpInfo(
            method=request.method,
            status_code=request.status,
            url=request.url,
        ),
        resource=ResourceInfo(
            kind=_get_request_kind(request),
            id=_generate_resource_id() if tracing is not None else None,
        ),
    )
    return RawRumEventCollected(start_time=request.start_time, raw_rum_event=raw_event)


# =============================================================================
# Schema 2
# =============================================================================


def process_resource_entry_v2(entry: RumPerformanceResourceTiming, clock: Clock) -> RawRumEventV2Collected:
    details = compute_performance_resource_details(entry)
    raw_event = RumResourceEventV2(
        dd=TracingInfo(trace_id=entry.trace_id) if entry.trace_id else None,
        date=clock.get_timestamp(entry.start_time),
        resource=ResourceDetailsV2(
            duration=compute_performance_resource_duration(entry),
            size=compute_size(entry),
            type=compute_resource_kind(entry),
            url=entry.name,
            **(details.model_dump(exclude_none=True) if details is not None else {}),
        ),
    )
    return RawRumEventV2Collected(start_time=entry.start_time, raw_rum_event=raw_event)


def process_request_v2(request: RequestCompleteEvent, clock: Clock) -> RawRumEventV2Collected:
    tracing = _get_request_tracing(request)
    raw_event = RumResourceEventV2(
        dd=tracing,
        date=clock.get_timestamp(request.start_time),
        resource=ResourceDetailsV2(
            duration=ms_to_ns(request.duration),
            id=_generate_resource_id() if tracing is not None else None,
            method=request.method,
            status_code=request.status,
            type=_get_request_kind(request),
            url=request.url,
        ),
    )
    return RawRumEventV2Collected(start_time=request.start_time, raw_rum_event=raw_event)


# =============================================================================
# Helpers
# =============================================================================


def _get_request_kind(request: RequestCompleteEvent) -> ResourceKind:
    match request.type:
        case RequestType.XHR:
            return ResourceKind.XHR
        case RequestType.FETCH:
            return ResourceKind.FETCH
        case _ as unreachable:
            assert_never(unreachable)


def _get_request_tracing(request: RequestCompleteEvent) -> TracingInfo | None:
    # A request is traced only when both identifiers were injected
    if request.trace_id and request.span_id:
        return TracingInfo(trace_id=request.trace_id, span_id=request.span_id)
    return None


def _generate_resource_id() -> str:
    return str(uuid4())
