from rum_core.clock import Clock
from rum_core.collection.view_collection import start_view_collection
from rum_core.config.data_types import RumConfiguration
from rum_core.data_types import RawRumEventCollected
from rum_core.data_types import RawRumEventV2Collected
from rum_core.data_types import View
from rum_core.data_types import ViewTimings
from rum_core.lifecycle import LifeCycle
from rum_core.lifecycle import LifeCycleEventType
from rum_core.primitives import RelativeTime
from rum_core.primitives import ViewId
from rum_core.primitives import ViewLoadingType
from rum_core.testing import FAKE_ORIGIN_EPOCH_MS

_VIEW = View(
    id=ViewId("abcde"),
    start_time=RelativeTime(1234),
    duration=100,
    document_version=3,
    loading_time=20,
    loading_type=ViewLoadingType.INITIAL_LOAD,
    measures=ViewTimings(
        dom_complete=10,
        dom_content_loaded=10,
        dom_interactive=10,
        first_contentful_paint=10,
        load_event_end=10,
        error_count=10,
        long_task_count=10,
        resource_count=10,
        user_action_count=10,
    ),
)
_EXPECTED_DATE = int(FAKE_ORIGIN_EPOCH_MS) + 1234


def test_view_update(
    lifecycle: LifeCycle,
    configuration: RumConfiguration,
    clock: Clock,
    raw_rum_events: list[RawRumEventCollected],
) -> None:
    start_view_collection(lifecycle, configuration, clock)

    lifecycle.notify(LifeCycleEventType.VIEW_UPDATED, _VIEW)

    assert raw_rum_events[0].start_time == 1234
    assert raw_rum_events[0].raw_rum_event.to_context() == {
        "date": _EXPECTED_DATE,
        "duration": 100_000_000,
        "evt": {"category": "view"},
        "rum": {"documentVersion": 3},
        "view": {
            "loadingTime": 20_000_000,
            "loadingType": "initial_load",
            "measures": {
                "domComplete": 10_000_000,
                "domContentLoaded": 10_000_000,
                "domInteractive": 10_000_000,
                "errorCount": 10,
                "firstContentfulPaint": 10_000_000,
                "loadEventEnd": 10_000_000,
                "longTaskCount": 10,
                "resourceCount": 10,
                "userActionCount": 10,
            },
        },
    }


def test_view_update_v2(
    lifecycle: LifeCycle,
    configuration_v2: RumConfiguration,
    clock: Clock,
    raw_rum_events_v2: list[RawRumEventV2Collected],
) -> None:
    start_view_collection(lifecycle, configuration_v2, clock)

    lifecycle.notify(LifeCycleEventType.VIEW_UPDATED, _VIEW)

    assert raw_rum_events_v2[0].raw_rum_event.to_context() == {
        "_dd": {"documentVersion": 3},
        "date": _EXPECTED_DATE,
        "type": "view",
        "view": {
            "action": {"count": 10},
            "domComplete": 10_000_000,
            "domContentLoaded": 10_000_000,
            "domInteractive": 10_000_000,
            "error": {"count": 10},
            "firstContentfulPaint": 10_000_000,
            "loadEventEnd": 10_000_000,
            "loadingTime": 20_000_000,
            "loadingType": "initial_load",
            "longTask": {"count": 10},
            "resource": {"count": 10},
            "timeSpent": 100_000_000,
        },
    }


def test_unknown_view_timings_are_left_out(
    lifecycle: LifeCycle,
    configuration: RumConfiguration,
    clock: Clock,
    raw_rum_events: list[RawRumEventCollected],
) -> None:
    start_view_collection(lifecycle, configuration, clock)

    lifecycle.notify(
        LifeCycleEventType.VIEW_UPDATED,
        View(id=ViewId("abcde"), start_time=RelativeTime(0), duration=5, document_version=1),
    )

    view_context = raw_rum_events[0].raw_rum_event.to_context()["view"]
    assert "loadingTime" not in view_context
    assert "domComplete" not in view_context["measures"]
