from collections.abc import Generator

import pytest
from click.testing import CliRunner
from loguru import logger

from rum_core.clock import Clock
from rum_core.config.data_types import RumConfiguration
from rum_core.context import Context
from rum_core.context import GlobalContextStore
from rum_core.data_types import RawRumEventCollected
from rum_core.data_types import RawRumEventV2Collected
from rum_core.data_types import RumEventCollected
from rum_core.data_types import RumEventV2Collected
from rum_core.data_types import ViewDetails
from rum_core.lifecycle import LifeCycle
from rum_core.lifecycle import LifeCycleEventType
from rum_core.primitives import ActionId
from rum_core.primitives import ViewId
from rum_core.providers import StaticParentContexts
from rum_core.providers import StaticRumSession
from rum_core.testing import FAKE_APPLICATION_ID
from rum_core.testing import FAKE_ORIGIN_EPOCH_MS
from rum_core.testing import FAKE_SESSION_ID


@pytest.fixture(autouse=True)
def reset_loguru_handlers() -> Generator[None, None, None]:
    """Drop handlers added during a test, some of them write to streams owned by that test."""
    yield
    logger.remove()


@pytest.fixture
def lifecycle() -> LifeCycle:
    return LifeCycle()


@pytest.fixture
def clock() -> Clock:
    """A clock whose relative time 0 is FAKE_ORIGIN_EPOCH_MS."""
    return Clock(origin_epoch_ms=FAKE_ORIGIN_EPOCH_MS, origin_monotonic_ms=0)


@pytest.fixture
def session() -> StaticRumSession:
    return StaticRumSession(session_id=FAKE_SESSION_ID)


@pytest.fixture
def parent_contexts() -> StaticParentContexts:
    return StaticParentContexts(
        session_id=FAKE_SESSION_ID,
        view=ViewDetails(id=ViewId("abcde"), referrer="referrer", url="url"),
        action_id=ActionId("7890"),
    )


@pytest.fixture
def global_context_store() -> GlobalContextStore:
    return GlobalContextStore()


@pytest.fixture
def configuration() -> RumConfiguration:
    return RumConfiguration(application_id=FAKE_APPLICATION_ID)


@pytest.fixture
def configuration_v2() -> RumConfiguration:
    return RumConfiguration(application_id=FAKE_APPLICATION_ID, enable_experimental_features=("v2_format",))


@pytest.fixture
def raw_rum_events(lifecycle: LifeCycle) -> list[RawRumEventCollected]:
    """Every schema 1 raw envelope notified on the bus."""
    events: list[RawRumEventCollected] = []
    lifecycle.subscribe(LifeCycleEventType.RAW_RUM_EVENT_COLLECTED, events.append)
    return events


@pytest.fixture
def raw_rum_events_v2(lifecycle: LifeCycle) -> list[RawRumEventV2Collected]:
    """Every schema 2 raw envelope notified on the bus."""
    events: list[RawRumEventV2Collected] = []
    lifecycle.subscribe(LifeCycleEventType.RAW_RUM_EVENT_V2_COLLECTED, events.append)
    return events


@pytest.fixture
def server_rum_events(lifecycle: LifeCycle) -> list[Context]:
    """Every schema 1 record published on the bus."""
    records: list[Context] = []

    def collect(collected: RumEventCollected) -> None:
        records.append(collected.server_rum_event)

    lifecycle.subscribe(LifeCycleEventType.RUM_EVENT_COLLECTED, collect)
    return records


@pytest.fixture
def server_rum_events_v2(lifecycle: LifeCycle) -> list[Context]:
    """Every schema 2 record published on the bus."""
    records: list[Context] = []

    def collect(collected: RumEventV2Collected) -> None:
        records.append(collected.server_rum_event)

    lifecycle.subscribe(LifeCycleEventType.RUM_EVENT_V2_COLLECTED, collect)
    return records


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click CLI runner for testing CLI commands."""
    return CliRunner()
