"""Turns completed automatic actions and custom actions into action raw events."""

from rum_core.clock import Clock
from rum_core.clock import ms_to_ns
from rum_core.config.data_types import RumConfiguration
from rum_core.config.data_types import V2_FORMAT_FEATURE
from rum_core.data_types import AutoAction
from rum_core.data_types import CustomAction
from rum_core.data_types import CustomActionCollected
from rum_core.data_types import RawRumEventCollected
from rum_core.data_types import RawRumEventV2Collected
from rum_core.lifecycle import LifeCycle
from rum_core.lifecycle import LifeCycleEventType
from rum_core.lifecycle import Subscription
from rum_core.primitives import RumEventCategory
from rum_core.raw_events import ActionMeasures
from rum_core.raw_events import EventDescriptor
from rum_core.raw_events import RumUserActionEvent
from rum_core.raw_events import UserActionInfo
from rum_core.raw_events_v2 import ActionDetailsV2
from rum_core.raw_events_v2 import ActionTarget
from rum_core.raw_events_v2 import Count
from rum_core.raw_events_v2 import RumActionEventV2

Action = AutoAction | CustomAction


def start_action_collection(
    lifecycle: LifeCycle,
    configuration: RumConfiguration,
    clock: Clock,
) -> list[Subscription]:
    """Subscribe the action producers.

    Automatic actions are only turned into raw events when interaction tracking is
    enabled. Custom actions always are, carrying the global context captured when
    they were reported.
    """

    def handle_auto_action(action: AutoAction) -> None:
        if configuration.is_enabled(V2_FORMAT_FEATURE):
            lifecycle.notify(LifeCycleEventType.RAW_RUM_EVENT_V2_COLLECTED, process_action_v2(action, clock))
        else:
            lifecycle.notify(LifeCycleEventType.RAW_RUM_EVENT_COLLECTED, process_action(action, clock))

    def handle_custom_action(collected: CustomActionCollected) -> None:
        if configuration.is_enabled(V2_FORMAT_FEATURE):
            envelope_v2 = process_action_v2(collected.action, clock)
            lifecycle.notify(
                LifeCycleEventType.RAW_RUM_EVENT_V2_COLLECTED,
                envelope_v2.model_copy(update={"saved_global_context": collected.context}),
            )
        else:
            envelope = process_action(collected.action, clock)
            lifecycle.notify(
                LifeCycleEventType.RAW_RUM_EVENT_COLLECTED,
                envelope.model_copy(update={"saved_global_context": collected.context}),
            )

    subscriptions = [lifecycle.subscribe(LifeCycleEventType.CUSTOM_ACTION_COLLECTED, handle_custom_action)]
    if configuration.track_interactions:
        subscriptions.append(lifecycle.subscribe(LifeCycleEventType.AUTO_ACTION_COMPLETED, handle_auto_action))
    return subscriptions


def process_action(action: Action, clock: Clock) -> RawRumEventCollected:
    if isinstance(action, AutoAction):
        user_action = UserActionInfo(
            id=action.id,
            measures=ActionMeasures(
                error_count=action.measures.error_count,
                long_task_count=action.measures.long_task_count,
                resource_count=action.measures.resource_count,
            ),
            type=action.type,
        )
        duration = ms_to_ns(action.duration)
        customer_context = None
    else:
        user_action = UserActionInfo(type=action.type)
        duration = None
        customer_context = action.context

    raw_event = RumUserActionEvent(
        date=clock.get_timestamp(action.start_time),
        duration=duration,
        evt=EventDescriptor(category=RumEventCategory.USER_ACTION, name=action.name),
        user_action=user_action,
    )
    return RawRumEventCollected(
        start_time=action.start_time,
        raw_rum_event=raw_event,
        customer_context=customer_context,
    )


def process_action_v2(action: Action, clock: Clock) -> RawRumEventV2Collected:
    if isinstance(action, AutoAction):
        details = ActionDetailsV2(
            error=Count(count=action.measures.error_count),
            id=action.id,
            loading_time=ms_to_ns(action.duration),
            long_task=Count(count=action.measures.long_task_count),
            resource=Count(count=action.measures.resource_count),
            target=ActionTarget(name=action.name),
            type=action.type,
        )
        customer_context = None
    else:
        details = ActionDetailsV2(target=ActionTarget(name=action.name), type=action.type)
        customer_context = action.context

    raw_event = RumActionEventV2(
        action=details,
        date=clock.get_timestamp(action.start_time),
    )
    return RawRumEventV2Collected(
        start_time=action.start_time,
        raw_rum_event=raw_event,
        customer_context=customer_context,
    )
