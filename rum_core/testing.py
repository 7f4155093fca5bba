"""Constants and helpers shared by the test modules."""

from typing import Any
from typing import Final

from rum_core.context import Context
from rum_core.data_types import RawRumEventCollected
from rum_core.data_types import RawRumEventV2Collected
from rum_core.lifecycle import LifeCycle
from rum_core.lifecycle import LifeCycleEventType
from rum_core.primitives import ApplicationId
from rum_core.primitives import RelativeTime
from rum_core.primitives import SessionId

FAKE_ORIGIN_EPOCH_MS: Final[float] = 1_600_000_000_000.0
FAKE_APPLICATION_ID: Final[ApplicationId] = ApplicationId("appId")
FAKE_SESSION_ID: Final[SessionId] = SessionId("1234")


def notify_raw_rum_event(
    lifecycle: LifeCycle,
    raw_rum_event: Any,
    start_time: float = 0,
    saved_global_context: Context | None = None,
    customer_context: Context | None = None,
) -> None:
    """Notify a schema 1 raw event; raw_rum_event may be a model or a wire-named mapping."""
    lifecycle.notify(
        LifeCycleEventType.RAW_RUM_EVENT_COLLECTED,
        RawRumEventCollected(
            start_time=RelativeTime(start_time),
            raw_rum_event=raw_rum_event,
            saved_global_context=saved_global_context,
            customer_context=customer_context,
        ),
    )


def notify_raw_rum_event_v2(
    lifecycle: LifeCycle,
    raw_rum_event: Any,
    start_time: float = 0,
    saved_global_context: Context | None = None,
    customer_context: Context | None = None,
) -> None:
    """Notify a schema 2 raw event; raw_rum_event may be a model or a wire-named mapping."""
    lifecycle.notify(
        LifeCycleEventType.RAW_RUM_EVENT_V2_COLLECTED,
        RawRumEventV2Collected(
            start_time=RelativeTime(start_time),
            raw_rum_event=raw_rum_event,
            saved_global_context=saved_global_context,
            customer_context=customer_context,
        ),
    )
