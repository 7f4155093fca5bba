"""Turns view updates into view raw events, one per update."""

from rum_core.clock import Clock
from rum_core.clock import ms_to_ns
from rum_core.config.data_types import RumConfiguration
from rum_core.config.data_types import V2_FORMAT_FEATURE
from rum_core.data_types import RawRumEventCollected
from rum_core.data_types import RawRumEventV2Collected
from rum_core.data_types import View
from rum_core.lifecycle import LifeCycle
from rum_core.lifecycle import LifeCycleEventType
from rum_core.lifecycle import Subscription
from rum_core.raw_events import DocumentInfo
from rum_core.raw_events import RumViewEvent
from rum_core.raw_events import ViewMeasures
from rum_core.raw_events import ViewPerformance
from rum_core.raw_events_v2 import Count
from rum_core.raw_events_v2 import DocumentVersionInfo
from rum_core.raw_events_v2 import RumViewEventV2
from rum_core.raw_events_v2 import ViewDetailsV2


def start_view_collection(lifecycle: LifeCycle, configuration: RumConfiguration, clock: Clock) -> Subscription:
    def handle_view_update(view: View) -> None:
        if configuration.is_enabled(V2_FORMAT_FEATURE):
            lifecycle.notify(LifeCycleEventType.RAW_RUM_EVENT_V2_COLLECTED, process_view_update_v2(view, clock))
        else:
            lifecycle.notify(LifeCycleEventType.RAW_RUM_EVENT_COLLECTED, process_view_update(view, clock))

    return lifecycle.subscribe(LifeCycleEventType.VIEW_UPDATED, handle_view_update)


def process_view_update(view: View, clock: Clock) -> RawRumEventCollected:
    measures = view.measures
    raw_event = RumViewEvent(
        date=clock.get_timestamp(view.start_time),
        duration=ms_to_ns(view.duration),
        rum=DocumentInfo(document_version=view.document_version),
        view=ViewPerformance(
            loading_time=ms_to_ns(view.loading_time),
            loading_type=view.loading_type,
            measures=ViewMeasures(
                dom_complete=ms_to_ns(measures.dom_complete),
                dom_content_loaded=ms_to_ns(measures.dom_content_loaded),
                dom_interactive=ms_to_ns(measures.dom_interactive),
                first_contentful_paint=ms_to_ns(measures.first_contentful_paint),
                load_event_end=ms_to_ns(measures.load_event_end),
                error_count=measures.error_count,
                long_task_count=measures.long_task_count,
                resource_count=measures.resource_count,
                user_action_count=measures.user_action_count,
            ),
        ),
    )
    return RawRumEventCollected(start_time=view.start_time, raw_rum_event=raw_event)


def process_view_update_v2(view: View, clock: Clock) -> RawRumEventV2Collected:
    measures = view.measures
    raw_event = RumViewEventV2(
        dd=DocumentVersionInfo(document_version=view.document_version),
        date=clock.get_timestamp(view.start_time),
        view=ViewDetailsV2(
            action=Count(count=measures.user_action_count),
            dom_complete=ms_to_ns(measures.dom_complete),
            dom_content_loaded=ms_to_ns(measures.dom_content_loaded),
            dom_interactive=ms_to_ns(measures.dom_interactive),
            error=Count(count=measures.error_count),
            first_contentful_paint=ms_to_ns(measures.first_contentful_paint),
            load_event_end=ms_to_ns(measures.load_event_end),
            loading_time=ms_to_ns(view.loading_time),
            loading_type=view.loading_type,
            long_task=Count(count=measures.long_task_count),
            resource=Count(count=measures.resource_count),
            time_spent=ms_to_ns(view.duration),
        ),
    )
    return RawRumEventV2Collected(start_time=view.start_time, raw_rum_event=raw_event)
