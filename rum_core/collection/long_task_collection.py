"""Turns long-task timing entries into long-task raw events."""

from rum_core.clock import Clock
from rum_core.clock import ms_to_ns
from rum_core.config.data_types import RumConfiguration
from rum_core.config.data_types import V2_FORMAT_FEATURE
from rum_core.data_types import RawRumEventCollected
from rum_core.data_types import RawRumEventV2Collected
from rum_core.data_types import RumPerformanceEntry
from rum_core.data_types import RumPerformanceLongTaskTiming
from rum_core.lifecycle import LifeCycle
from rum_core.lifecycle import LifeCycleEventType
from rum_core.lifecycle import Subscription
from rum_core.raw_events import RumLongTaskEvent
from rum_core.raw_events_v2 import LongTaskDetailsV2
from rum_core.raw_events_v2 import RumLongTaskEventV2


def start_long_task_collection(lifecycle: LifeCycle, configuration: RumConfiguration, clock: Clock) -> Subscription:
    def handle_performance_entry(entry: RumPerformanceEntry) -> None:
        if entry.entry_type != "longtask":
            return
        if configuration.is_enabled(V2_FORMAT_FEATURE):
            lifecycle.notify(LifeCycleEventType.RAW_RUM_EVENT_V2_COLLECTED, process_long_task_v2(entry, clock))
        else:
            lifecycle.notify(LifeCycleEventType.RAW_RUM_EVENT_COLLECTED, process_long_task(entry, clock))

    return lifecycle.subscribe(LifeCycleEventType.PERFORMANCE_ENTRY_COLLECTED, handle_performance_entry)


def process_long_task(entry: RumPerformanceLongTaskTiming, clock: Clock) -> RawRumEventCollected:
    raw_event = RumLongTaskEvent(
        date=clock.get_timestamp(entry.start_time),
        duration=ms_to_ns(entry.duration),
    )
    return RawRumEventCollected(start_time=entry.start_time, raw_rum_event=raw_event)


def process_long_task_v2(entry: RumPerformanceLongTaskTiming, clock: Clock) -> RawRumEventV2Collected:
    raw_event = RumLongTaskEventV2(
        date=clock.get_timestamp(entry.start_time),
        long_task=LongTaskDetailsV2(duration=ms_to_ns(entry.duration)),
    )
    return RawRumEventV2Collected(start_time=entry.start_time, raw_rum_event=raw_event)
