"""Schema 1: flat records, global and customer attributes merged at the top level.

Output shape (illustrative)::

    {application_id, date, session_id, view: {id, referrer, url},
     user_action: {id}?, evt: {category}, ...event fields, ...global, ...customer}
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
from rum_core.data_types import RawRumEventCollected
from rum_core.data_types import RumEventCollected
from rum_core.interfaces import ParentContextsInterface
from rum_core.interfaces import RumSessionInterface
from rum_core.lifecycle import LifeCycle
from rum_core.lifecycle import LifeCycleEventType
from rum_core.lifecycle import Subscription
from rum_core.primitives import ApplicationId
from rum_core.primitives import RumEventCategory
from rum_core.primitives import SessionId

ACTION_ELIGIBLE_CATEGORIES: Final[frozenset[str]] = frozenset(
    {
        RumEventCategory.RESOURCE,
        RumEventCategory.LONG_TASK,
        RumEventCategory.ERROR,
    }
)


class RumSchemaV1(RumSchema):
    action_eligible_categories: frozenset[str] = Field(default=ACTION_ELIGIBLE_CATEGORIES)

    def get_category(self, raw_event: Any) -> str:
        return str(raw_event.evt.category)

    def build_rum_context(self, application_id: ApplicationId, session_id: SessionId | None, date: int) -> Context:
        rum_context: Context = {"applicationId": application_id, "date": date}
        if session_id is not None:
            rum_context["sessionId"] = session_id
        return rum_context

    def find_view(self, parent_contexts: ParentContextsInterface, start_time: float) -> ContextSource:
        return parent_contexts.find_view(start_time)

    def find_action(self, parent_contexts: ParentContextsInterface, start_time: float) -> ContextSource:
        return parent_contexts.find_action(start_time)

    def build_record(self, layers: AssemblyLayers) -> Context:
        return combine(
            layers.rum_context,
            layers.view_context,
            layers.action_context,
            layers.global_context,
            layers.customer_context,
            layers.event_context,
        )

    def subscribe_raw_events(
        self, lifecycle: LifeCycle, callback: Callable[[RawRumEventCollected], None]
    ) -> Subscription:
        return lifecycle.subscribe(LifeCycleEventType.RAW_RUM_EVENT_COLLECTED, callback)

    def publish_record(self, lifecycle: LifeCycle, raw_event: Any, record: Context) -> None:
        lifecycle.notify(
            LifeCycleEventType.RUM_EVENT_COLLECTED,
            RumEventCollected(rum_event=raw_event, server_rum_event=record),
        )


def start_rum_assembly(
    application_id: ApplicationId,
    lifecycle: LifeCycle,
    session: RumSessionInterface,
    parent_contexts: ParentContextsInterface,
    global_context_store: GlobalContextStore,
    clock: Clock,
) -> Subscription:
    """Assemble schema 1 records from RAW_RUM_EVENT_COLLECTED into RUM_EVENT_COLLECTED."""
    engine = AssemblyEngine(
        rum_schema=RumSchemaV1(),
        application_id=application_id,
        lifecycle=lifecycle,
        session=session,
        parent_contexts=parent_contexts,
        global_context_store=global_context_store,
        clock=clock,
    )
    return engine.start()
