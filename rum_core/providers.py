"""In-memory implementations of the collaborator contracts.

Their answers are plain fields that can be changed at any time, which is how the
replay command feeds fixed session and view data and how tests flip the tracking
policy between two notifications.
"""

from pydantic import Field

from rum_core.context import ContextSource
from rum_core.data_types import ActionContext
from rum_core.data_types import ActionContextV2
from rum_core.data_types import ActionDetails
from rum_core.data_types import SessionDetails
from rum_core.data_types import ViewContext
from rum_core.data_types import ViewContextV2
from rum_core.data_types import ViewDetails
from rum_core.interfaces import ParentContextsInterface
from rum_core.interfaces import RumSessionInterface
from rum_core.primitives import ActionId
from rum_core.primitives import SessionId


class StaticRumSession(RumSessionInterface):
    """A session whose identity and tracking policy are set explicitly."""

    session_id: SessionId | None = Field(default=None, description="Identifier returned by get_id()")
    tracked: bool = Field(default=True, description="Answer of is_tracked()")
    tracked_with_resource: bool = Field(default=True, description="Answer of is_tracked_with_resource()")

    def get_id(self) -> SessionId | None:
        return self.session_id

    def is_tracked(self) -> bool:
        return self.tracked

    def is_tracked_with_resource(self) -> bool:
        return self.tracked_with_resource


class StaticParentContexts(ParentContextsInterface):
    """Answers every lookup with the same view and action, whatever the time.

    A view or action set to None makes the corresponding lookups return None.
    """

    session_id: SessionId | None = None
    view: ViewDetails | None = None
    action_id: ActionId | None = None

    def find_view(self, start_time: float | None = None) -> ContextSource:
        if self.view is None:
            return None
        return ViewContext(session_id=self.session_id, view=self.view)

    def find_action(self, start_time: float | None = None) -> ContextSource:
        if self.action_id is None:
            return None
        return ActionContext(user_action=ActionDetails(id=self.action_id))

    def find_view_v2(self, start_time: float | None = None) -> ContextSource:
        if self.view is None:
            return None
        session = None if self.session_id is None else SessionDetails(id=self.session_id)
        return ViewContextV2(session=session, view=self.view)

    def find_action_v2(self, start_time: float | None = None) -> ContextSource:
        if self.action_id is None:
            return None
        return ActionContextV2(action=ActionDetails(id=self.action_id))
