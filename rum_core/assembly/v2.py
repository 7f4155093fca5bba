"""Schema 2: category payloads nested under their type, attributes under ``context``.

Output shape (illustrative)::

    {_dd: {format_version: 2}, application: {id}, date, session: {id},
     view: {id, referrer, url}, action: {id}?, type, <type>: {...},
     context: {...global, ...customer}}
"""

from collections.abc import Callable
from typing import Any
from typing import Final

from pydantic import Field

from rum_core.assembly.engine import AssemblyEngine
from rum_core.assembly.engine import AssemblyLayers
from rum_core.assembly.engine import RumSchema
from rum_core.clock import Clock
from rum_core.context import Context
from rum_core.context import ContextSource
from rum_core.context import GlobalContextStore
from rum_core.context import combine
from rum_core.data_types import RawRumEventV2Collected
from rum_core.data_types import RumEventV2Collected
from rum_core.interfaces import ParentContextsInterface
from rum_core.interfaces import RumSessionInterface
from rum_core.lifecycle import LifeCycle
from rum_core.lifecycle import LifeCycleEventType
from rum_core.lifecycle import Subscription
from rum_core.primitives import ApplicationId
from rum_core.primitives import RumEventType
from rum_core.primitives import SessionId

FORMAT_VERSION: Final[int] = 2

ACTION_ELIGIBLE_TYPES: Final[frozenset[str]] = frozenset(
    {
        RumEventType.RESOURCE,
        RumEventType.LONG_TASK,
        RumEventType.ERROR,
    }
)


class RumSchemaV2(RumSchema):
    action_eligible_categories: frozenset[str] = Field(default=ACTION_ELIGIBLE_TYPES)

    def get_category(self, raw_event: Any) -> str:
        return str(raw_event.type)

    def build_rum_context(self, application_id: ApplicationId, session_id: SessionId | None, date: int) -> Context:
        return {
            "_dd": {"formatVersion": FORMAT_VERSION},
            "application": {"id": application_id},
            "date": date,
            "session": {} if session_id is None else {"id": session_id},
        }

    def find_view(self, parent_contexts: ParentContextsInterface, start_time: float) -> ContextSource:
        return parent_contexts.find_view_v2(start_time)

    def find_action(self, parent_contexts: ParentContextsInterface, start_time: float) -> ContextSource:
        return parent_contexts.find_action_v2(start_time)

    def build_record(self, layers: AssemblyLayers) -> Context:
        return combine(
            layers.rum_context,
            layers.view_context,
            layers.action_context,
            {"context": combine(layers.global_context, layers.customer_context)},
            layers.event_context,
        )

    def subscribe_raw_events(
        self, lifecycle: LifeCycle, callback: Callable[[RawRumEventV2Collected], None]
    ) -> Subscription:
        return lifecycle.subscribe(LifeCycleEventType.RAW_RUM_EVENT_V2_COLLECTED, callback)

    def publish_record(self, lifecycle: LifeCycle, raw_event: Any, record: Context) -> None:
        lifecycle.notify(
            LifeCycleEventType.RUM_EVENT_V2_COLLECTED,
            RumEventV2Collected(rum_event=raw_event, server_rum_event=record),
        )


def start_rum_assembly_v2(
    application_id: ApplicationId,
    lifecycle: LifeCycle,
    session: RumSessionInterface,
    parent_contexts: ParentContextsInterface,
    global_context_store: GlobalContextStore,
    clock: Clock,
) -> Subscription:
    """Assemble schema 2 records from RAW_RUM_EVENT_V2_COLLECTED into RUM_EVENT_V2_COLLECTED."""
    engine = AssemblyEngine(
        rum_schema=RumSchemaV2(),
        application_id=application_id,
        lifecycle=lifecycle,
        session=session,
        parent_contexts=parent_contexts,
        global_context_store=global_context_store,
        clock=clock,
    )
    return engine.start()
