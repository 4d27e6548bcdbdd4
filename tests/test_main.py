import json
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from cordscribe import main as main_module
from cordscribe.datatypes.errors import ConfigError
from cordscribe.main import build_intents, build_parser, main


def _write_snapshot(path: Path) -> Path:
    path.write_text(
        json.dumps(
            {
                "42": [
                    {"id": "2", "author": {"id": "u1", "username": "ann"}, "timestamp": "200",
                     "content": "hi", "attachments": [], "embeds": [], "mentions": []},
                    {"id": "1", "author": {"id": "u2", "username": "bob"}, "timestamp": "100",
                     "content": "yo", "attachments": [], "embeds": [], "mentions": []},
                ]
            }
        ),
        encoding="utf-8",
    )
    return path


def test_no_arguments_prints_usage_and_succeeds(capsys) -> None:
    assert main([]) == 0

    out = capsys.readouterr().out
    assert "fetch" in out and "filter" in out and "jsonl" in out


@pytest.mark.parametrize(
    "argv",
    [
        ["filter"],
        ["filter", "u1"],
        ["jsonl"],
        ["explode"],
    ],
)
def test_usage_errors_exit_non_zero(argv, capsys) -> None:
    assert main(argv) == 1
    assert "usage" in capsys.readouterr().err


def test_help_exits_zero() -> None:
    assert main(["--help"]) == 0


def test_filter_command_writes_user_messages(tmp_path: Path) -> None:
    snapshot = _write_snapshot(tmp_path / "all.json")
    out_dir = tmp_path / "out"

    assert main(["filter", "u1", str(snapshot), "--output-dir", str(out_dir)]) == 0

    written = json.loads((out_dir / "u1-messages.json").read_text(encoding="utf-8"))
    assert [m["id"] for m in written] == ["2"]


def test_jsonl_command_writes_dataset(tmp_path: Path) -> None:
    snapshot = _write_snapshot(tmp_path / "all.json")
    out_dir = tmp_path / "out"

    assert main(["jsonl", str(snapshot), "--output-dir", str(out_dir)]) == 0

    [dataset] = list(out_dir.glob("train-*.jsonl"))
    lines = dataset.read_text(encoding="utf-8").split("\n")
    assert [json.loads(line)["messages"][2]["content"] for line in lines] == ["hi", "yo"]


@pytest.mark.parametrize("command", ["filter", "jsonl"])
def test_missing_input_file_exits_non_zero(tmp_path: Path, command: str) -> None:
    args = [command, "u1"] if command == "filter" else [command]
    args += [str(tmp_path / "missing.json"), "--output-dir", str(tmp_path / "out")]

    assert main(args) == 1


def test_malformed_input_file_exits_non_zero(tmp_path: Path) -> None:
    bad = tmp_path / "bad.json"
    bad.write_text("{oops", encoding="utf-8")

    assert main(["jsonl", str(bad), "--output-dir", str(tmp_path)]) == 1


def test_fetch_without_token_exits_before_any_work(tmp_path: Path) -> None:
    with patch.object(main_module, "load_environment", side_effect=ConfigError("DISCORD_TOKEN not found")), \
            patch.object(main_module, "run_fetch", new_callable=AsyncMock) as run_fetch:
        assert main(["fetch", "--output-dir", str(tmp_path)]) == 1

    run_fetch.assert_not_awaited()


def test_fetch_passes_parsed_skip_list(tmp_path: Path) -> None:
    with patch.object(main_module, "load_environment", return_value="token"), \
            patch.object(main_module, "run_fetch", new_callable=AsyncMock) as run_fetch:
        assert main(["fetch", " 1, 2 ", "--output-dir", str(tmp_path)]) == 0

    token, skip, output_dir, _settings = run_fetch.await_args.args
    assert token == "token"
    assert skip == {"1", "2"}
    assert output_dir == tmp_path.resolve()


@pytest.mark.asyncio
async def test_run_fetch_closes_client_on_failure(tmp_path: Path) -> None:
    client = MagicMock()
    client.close = AsyncMock()

    with patch.object(main_module.discord, "Client", return_value=client), \
            patch.object(main_module, "connect_client", AsyncMock(side_effect=ConfigError("bad token"))):
        with pytest.raises(ConfigError):
            await main_module.run_fetch("token", set(), tmp_path, MagicMock())

    client.close.assert_awaited_once()


def test_parser_accepts_optional_skip_list() -> None:
    args = build_parser().parse_args(["fetch"])

    assert args.command == "fetch"
    assert args.skip_channels is None


def test_build_intents_enables_message_content() -> None:
    intents = build_intents()

    assert intents.guilds
    assert intents.messages
    assert intents.message_content


def test_discord_errors_exit_non_zero(tmp_path: Path) -> None:
    with patch.object(main_module, "load_environment", return_value="token"), \
            patch.object(main_module, "run_fetch", AsyncMock(side_effect=ConnectionError("gateway closed"))):
        assert main(["fetch", "--output-dir", str(tmp_path)]) == 1


@pytest.mark.parametrize("user_id", ["", "  "])
def test_filter_blank_user_id_is_usage_error(tmp_path: Path, user_id: str, capsys) -> None:
    snapshot = _write_snapshot(tmp_path / "all.json")

    assert main(["filter", user_id, str(snapshot), "--output-dir", str(tmp_path / "out")]) == 1

    assert "USER_ID" in capsys.readouterr().err
    assert not (tmp_path / "out").exists()


def test_filter_keeps_user_id_verbatim(tmp_path: Path) -> None:
    snapshot = _write_snapshot(tmp_path / "all.json")
    out_dir = tmp_path / "out"

    assert main(["filter", " u1 ", str(snapshot), "--output-dir", str(out_dir)]) == 0

    assert json.loads((out_dir / " u1 -messages.json").read_text(encoding="utf-8")) == []
