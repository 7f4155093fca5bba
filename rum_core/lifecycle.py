"""Synchronous, typed publish/subscribe bus connecting producers and the assemblers.

Every ``notify`` runs all callbacks registered for the event type, in registration
order, before it returns. Nothing is queued, retried or caught: an exception raised
by a callback propagates to whoever called ``notify``.
"""

from collections.abc import Callable
from enum import auto
from typing import Any
from typing import Literal
from typing import overload

from rum_core.common.primitives import UpperCaseStrEnum
from rum_core.data_types import AutoAction
from rum_core.data_types import CustomActionCollected
from rum_core.data_types import ErrorMessage
from rum_core.data_types import RawRumEventCollected
from rum_core.data_types import RawRumEventV2Collected
from rum_core.data_types import RequestCompleteEvent
from rum_core.data_types import RumEventCollected
from rum_core.data_types import RumEventV2Collected
from rum_core.data_types import RumPerformanceEntry
from rum_core.data_types import View

LifeCycleCallback = Callable[[Any], None]


class LifeCycleEventType(UpperCaseStrEnum):
    """Every event type exchanged on the bus."""

    ERROR_COLLECTED = auto()
    PERFORMANCE_ENTRY_COLLECTED = auto()
    CUSTOM_ACTION_COLLECTED = auto()
    AUTO_ACTION_CREATED = auto()
    AUTO_ACTION_COMPLETED = auto()
    AUTO_ACTION_DISCARDED = auto()
    VIEW_CREATED = auto()
    VIEW_UPDATED = auto()
    REQUEST_STARTED = auto()
    REQUEST_COMPLETED = auto()
    SESSION_RENEWED = auto()
    RESOURCE_ADDED_TO_BATCH = auto()
    DOM_MUTATED = auto()
    BEFORE_UNLOAD = auto()
    RAW_RUM_EVENT_COLLECTED = auto()
    RAW_RUM_EVENT_V2_COLLECTED = auto()
    RUM_EVENT_COLLECTED = auto()
    RUM_EVENT_V2_COLLECTED = auto()


# Event types without a payload: callbacks receive None
SignalEventType = Literal[
    LifeCycleEventType.AUTO_ACTION_DISCARDED,
    LifeCycleEventType.SESSION_RENEWED,
    LifeCycleEventType.RESOURCE_ADDED_TO_BATCH,
    LifeCycleEventType.DOM_MUTATED,
    LifeCycleEventType.BEFORE_UNLOAD,
]

# Event types whose payload is defined by the external producer that emits them
ProducerDefinedEventType = Literal[
    LifeCycleEventType.AUTO_ACTION_CREATED,
    LifeCycleEventType.VIEW_CREATED,
    LifeCycleEventType.REQUEST_STARTED,
]


class _Registration:
    """One subscribe() call. Identity, not callback equality, tells registrations apart."""

    __slots__ = ("callback",)

    def __init__(self, callback: LifeCycleCallback) -> None:
        self.callback = callback


class Subscription:
    """Handle returned by LifeCycle.subscribe()."""

    __slots__ = ("_lifecycle", "_event_type", "_registration")

    def __init__(self, lifecycle: "LifeCycle", event_type: LifeCycleEventType, registration: _Registration) -> None:
        self._lifecycle = lifecycle
        self._event_type = event_type
        self._registration = registration

    def unsubscribe(self) -> None:
        """Remove this registration. Calling it again does nothing."""
        self._lifecycle._remove(self._event_type, self._registration)


class LifeCycle:
    """The bus. One instance is shared by every producer and consumer of a collector.

    subscribe() and notify() are overloaded per event type, so a type checker rejects
    a callback or a payload that does not match the event type.
    """

    __slots__ = ("_registrations",)

    def __init__(self) -> None:
        self._registrations: dict[LifeCycleEventType, list[_Registration]] = {}

    @overload
    def subscribe(
        self, event_type: Literal[LifeCycleEventType.ERROR_COLLECTED], callback: Callable[[ErrorMessage], None]
    ) -> Subscription: ...

    @overload
    def subscribe(
        self,
        event_type: Literal[LifeCycleEventType.PERFORMANCE_ENTRY_COLLECTED],
        callback: Callable[[RumPerformanceEntry], None],
    ) -> Subscription: ...

    @overload
    def subscribe(
        self,
        event_type: Literal[LifeCycleEventType.CUSTOM_ACTION_COLLECTED],
        callback: Callable[[CustomActionCollected], None],
    ) -> Subscription: ...

    @overload
    def subscribe(
        self, event_type: Literal[LifeCycleEventType.AUTO_ACTION_COMPLETED], callback: Callable[[AutoAction], None]
    ) -> Subscription: ...

    @overload
    def subscribe(
        self, event_type: Literal[LifeCycleEventType.VIEW_UPDATED], callback: Callable[[View], None]
    ) -> Subscription: ...

    @overload
    def subscribe(
        self,
        event_type: Literal[LifeCycleEventType.REQUEST_COMPLETED],
        callback: Callable[[RequestCompleteEvent], None],
    ) -> Subscription: ...

    @overload
    def subscribe(
        self,
        event_type: Literal[LifeCycleEventType.RAW_RUM_EVENT_COLLECTED],
        callback: Callable[[RawRumEventCollected], None],
    ) -> Subscription: ...

    @overload
    def subscribe(
        self,
        event_type: Literal[LifeCycleEventType.RAW_RUM_EVENT_V2_COLLECTED],
        callback: Callable[[RawRumEventV2Collected], None],
    ) -> Subscription: ...

    @overload
    def subscribe(
        self,
        event_type: Literal[LifeCycleEventType.RUM_EVENT_COLLECTED],
        callback: Callable[[RumEventCollected], None],
    ) -> Subscription: ...

    @overload
    def subscribe(
        self,
        event_type: Literal[LifeCycleEventType.RUM_EVENT_V2_COLLECTED],
        callback: Callable[[RumEventV2Collected], None],
    ) -> Subscription: ...

    @overload
    def subscribe(self, event_type: SignalEventType, callback: Callable[[None], None]) -> Subscription: ...

    @overload
    def subscribe(self, event_type: ProducerDefinedEventType, callback: Callable[[Any], None]) -> Subscription: ...

    def subscribe(self, event_type: LifeCycleEventType, callback: LifeCycleCallback) -> Subscription:
        """Register callback for event_type; it receives the payload of every later notify."""
        registration = _Registration(callback)
        self._registrations.setdefault(event_type, []).append(registration)
        return Subscription(self, event_type, registration)

    @overload
    def notify(self, event_type: Literal[LifeCycleEventType.ERROR_COLLECTED], data: ErrorMessage) -> None: ...

    @overload
    def notify(
        self, event_type: Literal[LifeCycleEventType.PERFORMANCE_ENTRY_COLLECTED], data: RumPerformanceEntry
    ) -> None: ...

    @overload
    def notify(
        self, event_type: Literal[LifeCycleEventType.CUSTOM_ACTION_COLLECTED], data: CustomActionCollected
    ) -> None: ...

    @overload
    def notify(self, event_type: Literal[LifeCycleEventType.AUTO_ACTION_COMPLETED], data: AutoAction) -> None: ...

    @overload
    def notify(self, event_type: Literal[LifeCycleEventType.VIEW_UPDATED], data: View) -> None: ...

    @overload
    def notify(
        self, event_type: Literal[LifeCycleEventType.REQUEST_COMPLETED], data: RequestCompleteEvent
    ) -> None: ...

    @overload
    def notify(
        self, event_type: Literal[LifeCycleEventType.RAW_RUM_EVENT_COLLECTED], data: RawRumEventCollected
    ) -> None: ...

    @overload
    def notify(
        self, event_type: Literal[LifeCycleEventType.RAW_RUM_EVENT_V2_COLLECTED], data: RawRumEventV2Collected
    ) -> None: ...

    @overload
    def notify(self, event_type: Literal[LifeCycleEventType.RUM_EVENT_COLLECTED], data: RumEventCollected) -> None: ...

    @overload
    def notify(
        self, event_type: Literal[LifeCycleEventType.RUM_EVENT_V2_COLLECTED], data: RumEventV2Collected
    ) -> None: ...

    @overload
    def notify(self, event_type: SignalEventType) -> None: ...

    @overload
    def notify(self, event_type: ProducerDefinedEventType, data: Any = None) -> None: ...

    def notify(self, event_type: LifeCycleEventType, data: Any = None) -> None:
        """Call every callback currently registered for event_type with data."""
        registrations = self._registrations.get(event_type)
        if not registrations:
            return
        # Callbacks registered while dispatching only see later notifications
        for registration in tuple(registrations):
            registration.callback(data)

    def subscriber_count(self, event_type: LifeCycleEventType) -> int:
        """Return the number of live registrations for event_type."""
        return len(self._registrations.get(event_type, ()))

    def _remove(self, event_type: LifeCycleEventType, registration: _Registration) -> None:
        registrations = self._registrations.get(event_type)
        if registrations is None:
            return
        self._registrations[event_type] = [other for other in registrations if other is not registration]
