"""The assembly algorithm shared by every wire-schema version.

An AssemblyEngine listens to one raw-event type and turns each accepted envelope
into exactly one finished record:

    rum context < view < action (eligible categories only) < global < customer < event fields

Every layer except the customer context has its keys converted to snake_case.
What differs between schema versions (event types, eligible categories, base
layer and output shape) lives in a RumSchema, so gating and precedence cannot
diverge between versions.
"""

from abc import ABC
from abc import abstractmethod
from collections.abc import Callable
from typing import Any

from pydantic import ConfigDict
from pydantic import Field

from rum_core.clock import Clock
from rum_core.common.models import FrozenModel
from rum_core.common.models import MutableModel
from rum_core.common.models import WireModel
from rum_core.context import Context
from rum_core.context import ContextSource
from rum_core.context import GlobalContextStore
from rum_core.context import as_context
from rum_core.context import with_snake_case_keys
from rum_core.interfaces import ParentContextsInterface
from rum_core.interfaces import RumSessionInterface
from rum_core.lifecycle import LifeCycle
from rum_core.lifecycle import Subscription
from rum_core.primitives import ApplicationId
from rum_core.primitives import SessionId


class AssemblyLayers(FrozenModel):
    """The normalized context layers of one event, lowest precedence first."""

    rum_context: Context
    view_context: Context | None
    action_context: Context | None
    global_context: Context
    customer_context: Context | None
    event_context: Context


class RumSchema(FrozenModel, ABC):
    """Everything that is allowed to differ between two wire-schema versions."""

    action_eligible_categories: frozenset[str] = Field(
        description="Categories whose records are enriched with the current action context",
    )

    @abstractmethod
    def get_category(self, raw_event: Any) -> str:
        """Return the category discriminator of a raw event."""
        ...

    @abstractmethod
    def build_rum_context(self, application_id: ApplicationId, session_id: SessionId | None, date: int) -> Context:
        """Return the base layer (application, session and date) in wire naming."""
        ...

    @abstractmethod
    def find_view(self, parent_contexts: ParentContextsInterface, start_time: float) -> ContextSource:
        """Query the view context of this schema."""
        ...

    @abstractmethod
    def find_action(self, parent_contexts: ParentContextsInterface, start_time: float) -> ContextSource:
        """Query the action context of this schema."""
        ...

    @abstractmethod
    def build_record(self, layers: AssemblyLayers) -> Context:
        """Merge the layers into the output shape of this schema."""
        ...

    @abstractmethod
    def subscribe_raw_events(self, lifecycle: LifeCycle, callback: Callable[[Any], None]) -> Subscription:
        """Register callback for the raw envelopes of this schema."""
        ...

    @abstractmethod
    def publish_record(self, lifecycle: LifeCycle, raw_event: Any, record: Context) -> None:
        """Notify the finished record on the event type of this schema."""
        ...


class AssemblyEngine(MutableModel):
    """Subscribes to a schema's raw events and publishes the finished records.

    The engine holds no per-event state: session policy, view and action history
    and the global context are queried anew for every envelope.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    rum_schema: RumSchema = Field(frozen=True, description="Schema version this engine assembles")
    application_id: ApplicationId = Field(frozen=True)
    lifecycle: LifeCycle = Field(frozen=True, repr=False)
    session: RumSessionInterface = Field(frozen=True, repr=False)
    parent_contexts: ParentContextsInterface = Field(frozen=True, repr=False)
    global_context_store: GlobalContextStore = Field(frozen=True, repr=False)
    clock: Clock = Field(frozen=True, repr=False)

    def start(self) -> Subscription:
        """Start listening to raw events. Unsubscribe the returned handle to stop."""
        return self.rum_schema.subscribe_raw_events(self.lifecycle, self.handle_raw_event)

    def handle_raw_event(self, envelope: Any) -> None:
        record = self.assemble(envelope)
        if record is None:
            return
        self.rum_schema.publish_record(self.lifecycle, envelope.raw_rum_event, record)

    def assemble(self, envelope: Any) -> Context | None:
        """Return the finished record for envelope, or None if the session is not tracked."""
        if not self.session.is_tracked():
            return None

        schema = self.rum_schema
        start_time = envelope.start_time
        raw_event = envelope.raw_rum_event

        view_context = as_context(schema.find_view(self.parent_contexts, start_time))
        action_context: Context | None = None
        if schema.get_category(raw_event) in schema.action_eligible_categories:
            action_context = as_context(schema.find_action(self.parent_contexts, start_time))

        rum_context = schema.build_rum_context(
            self.application_id,
            self.session.get_id(),
            self.clock.get_timestamp(start_time),
        )
        # A saved snapshot replaces the live store entirely, it is never merged with it
        if envelope.saved_global_context is not None:
            global_context = envelope.saved_global_context
        else:
            global_context = self.global_context_store.get()

        layers = AssemblyLayers(
            rum_context=with_snake_case_keys(rum_context),
            view_context=with_snake_case_keys(view_context),
            action_context=with_snake_case_keys(action_context),
            global_context=with_snake_case_keys(global_context),
            customer_context=envelope.customer_context,
            event_context=with_snake_case_keys(_raw_event_to_context(raw_event)),
        )
        return schema.build_record(layers)


def _raw_event_to_context(raw_event: Any) -> Context:
    if isinstance(raw_event, WireModel):
        return raw_event.to_context()
    return as_context(raw_event) or {}
