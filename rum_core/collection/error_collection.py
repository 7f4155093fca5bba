"""Turns collected errors into error raw events."""

from rum_core.clock import Clock
from rum_core.config.data_types import RumConfiguration
from rum_core.config.data_types import V2_FORMAT_FEATURE
from rum_core.data_types import ErrorMessage
from rum_core.data_types import RawRumEventCollected
from rum_core.data_types import RawRumEventV2Collected
from rum_core.lifecycle import LifeCycle
from rum_core.lifecycle import LifeCycleEventType
from rum_core.lifecycle import Subscription
from rum_core.raw_events import ErrorHttpInfo
from rum_core.raw_events import ErrorInfo
from rum_core.raw_events import RumErrorEvent
from rum_core.raw_events_v2 import ErrorDetailsV2
from rum_core.raw_events_v2 import ErrorResourceV2
from rum_core.raw_events_v2 import RumErrorEventV2


def start_error_collection(lifecycle: LifeCycle, configuration: RumConfiguration, clock: Clock) -> Subscription:
    def handle_error(error: ErrorMessage) -> None:
        if configuration.is_enabled(V2_FORMAT_FEATURE):
            lifecycle.notify(LifeCycleEventType.RAW_RUM_EVENT_V2_COLLECTED, process_error_v2(error, clock))
        else:
            lifecycle.notify(LifeCycleEventType.RAW_RUM_EVENT_COLLECTED, process_error(error, clock))

    return lifecycle.subscribe(LifeCycleEventType.ERROR_COLLECTED, handle_error)


def process_error(error: ErrorMessage, clock: Clock) -> RawRumEventCollected:
    http = None
    if error.resource is not None:
        http = ErrorHttpInfo(
            method=error.resource.method,
            status_code=error.resource.status_code,
            url=error.resource.url,
        )
    raw_event = RumErrorEvent(
        date=clock.get_timestamp(error.start_time),
        message=error.message,
        error=ErrorInfo(kind=error.kind, origin=error.source, stack=error.stack),
        http=http,
    )
    return RawRumEventCollected(
        start_time=error.start_time,
        raw_rum_event=raw_event,
        saved_global_context=error.saved_global_context,
    )


def process_error_v2(error: ErrorMessage, clock: Clock) -> RawRumEventV2Collected:
    resource = None
    if error.resource is not None:
        resource = ErrorResourceV2(
            method=error.resource.method,
            status_code=error.resource.status_code,
            url=error.resource.url,
        )
    raw_event = RumErrorEventV2(
        date=clock.get_timestamp(error.start_time),
        error=ErrorDetailsV2(
            message=error.message,
            resource=resource,
            source=error.source,
            stack=error.stack,
            type=error.kind,
        ),
    )
    return RawRumEventV2Collected(
        start_time=error.start_time,
        raw_rum_event=raw_event,
        saved_global_context=error.saved_global_context,
    )
