import json
from pathlib import Path

from click.testing import CliRunner
from inline_snapshot import snapshot

from rum_core.cli.main import cli
from rum_core.cli.main import replay

_BASE_ARGS = ["--application-id", "appId", "--log-level", "error", "--time-origin", "1000"]


def _write_input(tmp_path: Path, *lines: str) -> Path:
    input_path = tmp_path / "events.jsonl"
    input_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return input_path


def _records(output: str) -> list[dict]:
    return [json.loads(line) for line in output.splitlines() if line.strip()]


def test_replay_writes_one_schema_1_record_per_envelope(cli_runner: CliRunner, tmp_path: Path) -> None:
    input_path = _write_input(
        tmp_path,
        json.dumps({"start_time": 5, "raw_rum_event": {"evt": {"category": "view"}}}),
        "",
        json.dumps(
            {
                "start_time": 7,
                "raw_rum_event": {"evt": {"category": "resource"}, "network": {"bytesWritten": 2}},
                "customer_context": {"fooBar": 1},
            }
        ),
    )

    result = cli_runner.invoke(
        replay,
        [str(input_path), *_BASE_ARGS, "--session-id", "1234", "--view-id", "abcde", "--view-url", "url"],
    )

    assert result.exit_code == 0, result.output
    assert _records(result.output) == snapshot(
        [
            {
                "application_id": "appId",
                "date": 1005,
                "session_id": "1234",
                "view": {"id": "abcde", "url": "url"},
                "evt": {"category": "view"},
            },
            {
                "application_id": "appId",
                "date": 1007,
                "session_id": "1234",
                "view": {"id": "abcde", "url": "url"},
                "fooBar": 1,
                "evt": {"category": "resource"},
                "network": {"bytes_written": 2},
            },
        ]
    )


def test_replay_schema_2_with_global_context(cli_runner: CliRunner, tmp_path: Path) -> None:
    input_path = _write_input(tmp_path, json.dumps({"start_time": 0, "raw_rum_event": {"type": "long_task"}}))

    result = cli_runner.invoke(
        replay,
        [str(input_path), *_BASE_ARGS, "--format", "v2", "--session-id", "1234", "--global-context", '{"cartSize": 3}'],
    )

    assert result.exit_code == 0, result.output
    assert _records(result.output) == snapshot(
        [
            {
                "_dd": {"format_version": 2},
                "application": {"id": "appId"},
                "date": 1000,
                "session": {"id": "1234"},
                "context": {"cart_size": 3},
                "type": "long_task",
            }
        ]
    )


def test_replay_uses_v2_format_from_the_configuration(cli_runner: CliRunner, tmp_path: Path) -> None:
    config_path = tmp_path / "rum.toml"
    config_path.write_text('[rum]\napplication_id = "fromFile"\nenable_experimental_features = ["v2_format"]\n')
    input_path = _write_input(tmp_path, json.dumps({"start_time": 0, "raw_rum_event": {"type": "error"}}))

    result = cli_runner.invoke(
        replay,
        [str(input_path), "--config", str(config_path), "--log-level", "error", "--time-origin", "0"],
    )

    assert result.exit_code == 0, result.output
    records = _records(result.output)
    assert records[0]["application"] == {"id": "fromFile"}
    assert records[0]["type"] == "error"


def test_replay_keeps_utf8_text_and_explicit_nulls(cli_runner: CliRunner, tmp_path: Path) -> None:
    envelope = {
        "start_time": 0,
        "raw_rum_event": {"evt": {"category": "view"}},
        "customer_context": {"city": "Zürich", "flag": None},
    }
    input_path = _write_input(tmp_path, json.dumps(envelope, ensure_ascii=False))

    result = cli_runner.invoke(replay, [str(input_path), *_BASE_ARGS, "--global-context", '{"flag": "on"}'])

    assert result.exit_code == 0, result.output
    record = _records(result.output)[0]
    assert record["city"] == "Zürich"
    assert record["flag"] is None


def test_replay_reports_the_line_of_an_invalid_envelope(cli_runner: CliRunner, tmp_path: Path) -> None:
    input_path = _write_input(
        tmp_path,
        json.dumps({"start_time": 0, "raw_rum_event": {"evt": {"category": "view"}}}),
        json.dumps({"raw_rum_event": {"evt": {"category": "view"}}}),
    )

    result = cli_runner.invoke(replay, [str(input_path), *_BASE_ARGS])

    assert result.exit_code == 1
    assert "line 2" in result.output
    assert "start_time" in result.output


def test_replay_rejects_view_id_without_url(cli_runner: CliRunner, tmp_path: Path) -> None:
    input_path = _write_input(tmp_path, json.dumps({"start_time": 0, "raw_rum_event": {"type": "view"}}))

    result = cli_runner.invoke(replay, [str(input_path), *_BASE_ARGS, "--view-id", "abcde"])

    assert result.exit_code == 2
    assert "--view-url" in result.output


def test_replay_rejects_a_global_context_that_is_not_an_object(cli_runner: CliRunner, tmp_path: Path) -> None:
    input_path = _write_input(tmp_path, json.dumps({"start_time": 0, "raw_rum_event": {"type": "view"}}))

    result = cli_runner.invoke(replay, [str(input_path), *_BASE_ARGS, "--global-context", "[1]"])

    assert result.exit_code == 2
    assert "--global-context" in result.output


def test_replay_requires_an_application_id(cli_runner: CliRunner, tmp_path: Path) -> None:
    input_path = _write_input(tmp_path, json.dumps({"start_time": 0, "raw_rum_event": {"type": "view"}}))

    result = cli_runner.invoke(replay, [str(input_path), "--log-level", "error"], env={"RUM_APPLICATION_ID": ""})

    assert result.exit_code == 1
    assert "application_id" in result.output


def test_cli_group_lists_the_replay_command(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "replay" in result.output
