import json
from pathlib import Path
from typing import Any
from typing import assert_never

import click
from click_option_group import optgroup
from loguru import logger
from pydantic import ValidationError

from rum_core.assembly.v1 import start_rum_assembly
from rum_core.assembly.v2 import start_rum_assembly_v2
from rum_core.clock import Clock
from rum_core.common.logging import log_span
from rum_core.common.logging import setup_logging
from rum_core.common.models import FrozenModel
from rum_core.config.data_types import RumConfiguration
from rum_core.config.data_types import V2_FORMAT_FEATURE
from rum_core.config.loader import load_configuration
from rum_core.context import Context
from rum_core.context import GlobalContextStore
from rum_core.data_types import RawRumEventCollected
from rum_core.data_types import RawRumEventV2Collected
from rum_core.data_types import RumEventCollected
from rum_core.data_types import RumEventV2Collected
from rum_core.data_types import ViewDetails
from rum_core.errors import ReplayInputError
from rum_core.lifecycle import LifeCycle
from rum_core.lifecycle import LifeCycleEventType
from rum_core.primitives import LogLevel
from rum_core.primitives import SchemaVersion
from rum_core.providers import StaticParentContexts
from rum_core.providers import StaticRumSession


class ReplayCliOptions(FrozenModel):
    """Options passed from the CLI to the replay command."""

    input_path: Path
    config_path: Path | None
    application_id: str | None
    log_level: str | None
    session_id: str | None
    view_id: str | None
    view_url: str | None
    view_referrer: str | None
    global_context: str | None
    schema_format: str | None
    time_origin: float | None


@click.group(name="rum-core")
def cli() -> None:
    """Assemble RUM telemetry records from raw events."""


@cli.command(name="replay")
@click.argument("input_path", metavar="INPUT", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@optgroup.group("Configuration")
@optgroup.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="TOML file with a [rum] table",
)
@optgroup.option("--application-id", default=None, help="Overrides the configured application id")
@optgroup.option(
    "--log-level",
    type=click.Choice([level.value for level in LogLevel], case_sensitive=False),
    default=None,
    help="Overrides the configured log level",
)
@optgroup.group("Session and view")
@optgroup.option("--session-id", default=None, help="Identifier of the replayed session")
@optgroup.option("--view-id", default=None, help="Identifier of the view every event belongs to")
@optgroup.option("--view-url", default=None, help="URL of that view (required with --view-id)")
@optgroup.option("--view-referrer", default=None, help="Referrer of that view")
@optgroup.option("--global-context", default=None, help="Global context, as a JSON object")
@optgroup.group("Output")
@optgroup.option(
    "--format",
    "schema_format",
    type=click.Choice([version.value for version in SchemaVersion], case_sensitive=False),
    default=None,
    help="Schema version of the records [default: v2 when the v2_format feature is enabled, else v1]",
)
@optgroup.option(
    "--time-origin",
    type=float,
    default=None,
    help="Epoch milliseconds of relative time 0 [default: now]",
)
def replay(**kwargs: Any) -> None:
    """Assemble the raw event envelopes of INPUT (one JSON object per line) into records.

    Each accepted envelope is written to stdout as one JSON record. Envelopes use the
    keys start_time, raw_rum_event, saved_global_context and customer_context.
    """
    opts = ReplayCliOptions(**kwargs)
    # Until the configuration is known, only the command-line level applies
    setup_logging(opts.log_level or LogLevel.INFO)
    configuration = load_configuration(
        opts.config_path,
        overrides={"application_id": opts.application_id, "log_level": opts.log_level},
    )
    setup_logging(configuration.log_level)

    schema_version = _resolve_schema_version(opts, configuration)
    global_context_store = GlobalContextStore(context=_parse_global_context(opts.global_context))
    session = StaticRumSession(session_id=opts.session_id)
    parent_contexts = StaticParentContexts(session_id=opts.session_id, view=_build_view(opts))
    if opts.time_origin is None:
        clock = Clock.start()
    else:
        clock = Clock(origin_epoch_ms=opts.time_origin, origin_monotonic_ms=0)

    lifecycle = LifeCycle()
    records_written = 0

    def write_record(collected: RumEventCollected | RumEventV2Collected) -> None:
        nonlocal records_written
        click.echo(json.dumps(collected.server_rum_event))
        records_written += 1

    match schema_version:
        case SchemaVersion.V1:
            start_rum_assembly(
                configuration.application_id, lifecycle, session, parent_contexts, global_context_store, clock
            )
            lifecycle.subscribe(LifeCycleEventType.RUM_EVENT_COLLECTED, write_record)
        case SchemaVersion.V2:
            start_rum_assembly_v2(
                configuration.application_id, lifecycle, session, parent_contexts, global_context_store, clock
            )
            lifecycle.subscribe(LifeCycleEventType.RUM_EVENT_V2_COLLECTED, write_record)
        case _ as unreachable:
            assert_never(unreachable)

    lines_read = 0
    with log_span("Replaying {} as schema {}", opts.input_path, schema_version):
        with opts.input_path.open(encoding="utf-8") as input_file:
            for line_number, line in enumerate(input_file, start=1):
                if not line.strip():
                    continue
                lines_read += 1
                _replay_line(lifecycle, schema_version, line, line_number)

    logger.info("Wrote {} records for {} raw events", records_written, lines_read)


def _replay_line(lifecycle: LifeCycle, schema_version: SchemaVersion, line: str, line_number: int) -> None:
    try:
        match schema_version:
            case SchemaVersion.V1:
                lifecycle.notify(
                    LifeCycleEventType.RAW_RUM_EVENT_COLLECTED,
                    RawRumEventCollected.model_validate_json(line),
                )
            case SchemaVersion.V2:
                lifecycle.notify(
                    LifeCycleEventType.RAW_RUM_EVENT_V2_COLLECTED,
                    RawRumEventV2Collected.model_validate_json(line),
                )
            case _ as unreachable:
                assert_never(unreachable)
    except ValidationError as e:
        raise ReplayInputError(line_number, _describe_validation_error(e)) from e


def _describe_validation_error(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    if location:
        return f"{location}: {first['msg']}"
    return first["msg"]


def _resolve_schema_version(opts: ReplayCliOptions, configuration: RumConfiguration) -> SchemaVersion:
    if opts.schema_format is not None:
        return SchemaVersion(opts.schema_format)
    if configuration.is_enabled(V2_FORMAT_FEATURE):
        return SchemaVersion.V2
    return SchemaVersion.V1


def _parse_global_context(raw: str | None) -> Context:
    if raw is None:
        return {}
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"not valid JSON: {e}", param_hint="--global-context") from e
    if not isinstance(parsed, dict):
        raise click.BadParameter("must be a JSON object", param_hint="--global-context")
    return parsed


def _build_view(opts: ReplayCliOptions) -> ViewDetails | None:
    if opts.view_id is None:
        return None
    if opts.view_url is None:
        raise click.UsageError("--view-url is required with --view-id")
    return ViewDetails(id=opts.view_id, url=opts.view_url, referrer=opts.view_referrer)


def main() -> None:
    cli()
