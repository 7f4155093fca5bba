"""Query contracts of the collaborators the assembly stage depends on.

Both collaborators are owned outside rum_core: session identity and sampling
decisions come from the session manager, view and action history from the
parent-contexts tracker. The assemblers call them once per event and never
cache their answers.
"""

from abc import ABC
from abc import abstractmethod

from rum_core.common.models import MutableModel
from rum_core.context import ContextSource
from rum_core.primitives import SessionId


class RumSessionInterface(MutableModel, ABC):
    """Current-state oracle for the user session."""

    @abstractmethod
    def get_id(self) -> SessionId | None:
        """Return the identifier of the current session, if any."""
        ...

    @abstractmethod
    def is_tracked(self) -> bool:
        """Whether events of the current session are collected at all."""
        ...

    @abstractmethod
    def is_tracked_with_resource(self) -> bool:
        """Whether resource events of the current session are collected."""
        ...


class ParentContextsInterface(MutableModel, ABC):
    """Time-scoped view and action lookups.

    Every method returns a context model, a plain mapping, or None when nothing
    matches the given time. None is a normal answer, not an error.
    """

    @abstractmethod
    def find_view(self, start_time: float | None = None) -> ContextSource:
        """Return the schema 1 view context ({session_id, view}) active at start_time."""
        ...

    @abstractmethod
    def find_action(self, start_time: float | None = None) -> ContextSource:
        """Return the schema 1 action context ({user_action: {id}}) in progress at start_time."""
        ...

    @abstractmethod
    def find_view_v2(self, start_time: float | None = None) -> ContextSource:
        """Return the schema 2 view context ({session: {id}, view}) active at start_time."""
        ...

    @abstractmethod
    def find_action_v2(self, start_time: float | None = None) -> ContextSource:
        """Return the schema 2 action context ({action: {id}}) in progress at start_time."""
        ...
