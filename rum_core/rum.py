"""Wires one collector: the bus, both assemblers and every raw-event producer."""

from typing import Any

from loguru import logger
from pydantic import ConfigDict
from pydantic import Field

from rum_core.assembly.v1 import start_rum_assembly
from rum_core.assembly.v2 import start_rum_assembly_v2
from rum_core.clock import Clock
from rum_core.collection.action_collection import start_action_collection
from rum_core.collection.error_collection import start_error_collection
from rum_core.collection.long_task_collection import start_long_task_collection
from rum_core.collection.resource_collection import start_resource_collection
from rum_core.collection.view_collection import start_view_collection
from rum_core.common.models import MutableModel
from rum_core.config.data_types import RumConfiguration
from rum_core.config.data_types import V2_FORMAT_FEATURE
from rum_core.context import Context
from rum_core.context import GlobalContextStore
from rum_core.context import as_context
from rum_core.context import combine
from rum_core.context import with_snake_case_keys
from rum_core.data_types import CustomAction
from rum_core.data_types import CustomActionCollected
from rum_core.interfaces import ParentContextsInterface
from rum_core.interfaces import RumSessionInterface
from rum_core.lifecycle import LifeCycle
from rum_core.lifecycle import LifeCycleEventType
from rum_core.lifecycle import Subscription
from rum_core.primitives import ApplicationId
from rum_core.primitives import RelativeTime
from rum_core.primitives import SchemaVersion


class RumApi(MutableModel):
    """Handle on a started collector."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    configuration: RumConfiguration = Field(frozen=True)
    lifecycle: LifeCycle = Field(frozen=True, repr=False, description="The bus every component is attached to")
    session: RumSessionInterface = Field(frozen=True, repr=False)
    parent_contexts: ParentContextsInterface = Field(frozen=True, repr=False)
    global_context_store: GlobalContextStore = Field(frozen=True, repr=False)
    clock: Clock = Field(frozen=True, repr=False)
    subscriptions: list[Subscription] = Field(default_factory=list, repr=False)

    def get_internal_context(self, start_time: float | None = None) -> Context | None:
        """Return the correlation context (application, session, view and action) at start_time."""
        return get_internal_context(
            self.parent_contexts,
            self.configuration.application_id,
            self.session,
            start_time,
        )

    def add_action(self, name: str, context: Context | None = None, start_time: float | None = None) -> None:
        """Report a custom action. The global context is captured now and used for its record."""
        action = CustomAction(
            name=name,
            start_time=RelativeTime(start_time) if start_time is not None else self.clock.relative_now(),
            context=context,
        )
        self.lifecycle.notify(
            LifeCycleEventType.CUSTOM_ACTION_COLLECTED,
            CustomActionCollected(action=action, context=self.global_context_store.get()),
        )

    def stop(self) -> None:
        """Detach every component from the bus. Calling it again does nothing."""
        for subscription in self.subscriptions:
            subscription.unsubscribe()
        self.subscriptions.clear()


def start_rum(
    configuration: RumConfiguration,
    session: RumSessionInterface,
    parent_contexts: ParentContextsInterface,
    global_context_store: GlobalContextStore,
    clock: Clock | None = None,
) -> RumApi:
    if clock is None:
        clock = Clock.start()
    lifecycle = LifeCycle()

    subscriptions = [
        start_rum_assembly(
            configuration.application_id, lifecycle, session, parent_contexts, global_context_store, clock
        ),
        start_rum_assembly_v2(
            configuration.application_id, lifecycle, session, parent_contexts, global_context_store, clock
        ),
        *start_resource_collection(lifecycle, configuration, session, clock),
        *start_action_collection(lifecycle, configuration, clock),
        start_view_collection(lifecycle, configuration, clock),
        start_error_collection(lifecycle, configuration, clock),
        start_long_task_collection(lifecycle, configuration, clock),
    ]

    schema_version = SchemaVersion.V2 if configuration.is_enabled(V2_FORMAT_FEATURE) else SchemaVersion.V1
    logger.debug(
        "Started RUM collection for application {} with schema {}",
        configuration.application_id,
        schema_version,
    )
    return RumApi(
        configuration=configuration,
        lifecycle=lifecycle,
        session=session,
        parent_contexts=parent_contexts,
        global_context_store=global_context_store,
        clock=clock,
        subscriptions=subscriptions,
    )


def get_internal_context(
    parent_contexts: ParentContextsInterface,
    application_id: ApplicationId,
    session: RumSessionInterface,
    start_time: float | None = None,
) -> Context | None:
    """Return the snake_cased {application_id, session_id, view, user_action} context, if any.

    Returns None when the session is not tracked, or when no view with a session
    is active at start_time.
    """
    view_context = as_context(parent_contexts.find_view(start_time))
    if not session.is_tracked() or not view_context:
        return None
    if not _get_session_id(view_context):
        return None
    internal_context: dict[str, Any] = with_snake_case_keys(
        combine(
            {"applicationId": application_id},
            view_context,
            parent_contexts.find_action(start_time),
        )
    )
    return internal_context


def _get_session_id(view_context: Context) -> Any:
    return view_context.get("sessionId", view_context.get("session_id"))
