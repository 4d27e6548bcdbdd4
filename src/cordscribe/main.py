"""
Cordscribe
==========

Command line entry point. Three commands:

- ``fetch [SKIP_CHANNELS]``: download the history of every text channel the
  bot can see into JSON snapshots.
- ``filter <USER_ID> <INPUT_JSON>``: keep one author's messages from a snapshot.
- ``jsonl <INPUT_JSON>``: turn a snapshot into a fine-tuning JSONL dataset.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, NoReturn, Optional, Sequence

import discord

from cordscribe.configuration.app_configuration import app_config, load_environment
from cordscribe.configuration.fetch_settings import FetchSettings
from cordscribe.datatypes.errors import ConfigError, InputError, SnapshotError
from cordscribe.datatypes.message_datatypes import ChannelMessageSet
from cordscribe.dataset.jsonl_compiler import create_jsonl
from cordscribe.dataset.user_filter import filter_messages_by_user
from cordscribe.history.orchestrator import fetch_all_channel_messages, parse_skip_channels
from cordscribe.storage import snapshot_store
from cordscribe.util.logger import get_logger, handle_exception

logger = get_logger("main")


class UsageErrorParser(argparse.ArgumentParser):
    """ArgumentParser that exits with status 1 on usage errors."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def non_blank(value: str) -> str:
    """argparse type rejecting empty or whitespace-only values."""
    if not value.strip():
        raise argparse.ArgumentTypeError("must not be empty")
    return value


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory for output files (default: output_dir from the config, else a new temp dir)",
    )

    parser = UsageErrorParser(
        prog="cordscribe",
        description="Fetch Discord channel history and turn it into fine-tuning data.",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    fetch = subparsers.add_parser(
        "fetch", parents=[common],
        help="Fetch messages from all channels, skipping any comma-separated channels.",
    )
    fetch.add_argument("skip_channels", nargs="?", default=None, metavar="SKIP_CHANNELS")

    filter_cmd = subparsers.add_parser(
        "filter", parents=[common],
        help="Filter messages by a user ID and write them to a new file.",
    )
    filter_cmd.add_argument("user_id", type=non_blank, metavar="USER_ID")
    filter_cmd.add_argument("input_json", type=Path, metavar="INPUT_JSON")

    jsonl = subparsers.add_parser(
        "jsonl", parents=[common],
        help="Convert a saved JSON of messages into JSONL format.",
    )
    jsonl.add_argument("input_json", type=Path, metavar="INPUT_JSON")

    return parser


def build_intents() -> discord.Intents:
    """Intents needed to list guild channels and read message content."""
    intents = discord.Intents.default()
    intents.guilds = True
    intents.messages = True
    intents.message_content = True
    return intents


async def connect_client(client: discord.Client, token: str) -> asyncio.Task:
    """Log in, start the gateway connection and wait until the channel cache is ready.

    Returns the running connection task; the caller closes the client.

    Raises
    ------
    ConfigError
        If Discord rejects the token.
    """
    try:
        await client.login(token)
    except discord.LoginFailure as exc:
        raise ConfigError(f"Discord rejected the token: {exc}") from exc

    logger.info("Attempting to connect to Discord…")
    connect_task = asyncio.create_task(client.connect())
    ready_task = asyncio.create_task(client.wait_until_ready())
    done, _ = await asyncio.wait({connect_task, ready_task}, return_when=asyncio.FIRST_COMPLETED)

    if ready_task not in done:
        ready_task.cancel()
        # Raises the gateway error if the connection failed
        connect_task.result()
        raise ConnectionError("Discord connection closed before the client became ready")

    logger.info("Connected as %s", client.user)
    return connect_task


async def run_fetch(token: str, skip_channels: set[str], output_dir: Path, settings: FetchSettings) -> ChannelMessageSet:
    client = discord.Client(intents=build_intents())
    connect_task: Optional[asyncio.Task] = None
    try:
        connect_task = await connect_client(client, token)
        logger.info("Fetching all channel messages...")
        return await fetch_all_channel_messages(client, skip_channels, output_dir, settings)
    finally:
        await client.close()
        if connect_task is not None:
            await asyncio.gather(connect_task, return_exceptions=True)


def run_filter(user_id: str, input_json: Path, output_dir: Path) -> Path:
    data = snapshot_store.load_message_json(input_json)
    user_messages = filter_messages_by_user(data, user_id)
    out_path = snapshot_store.write_user_messages(output_dir, user_id, user_messages)
    logger.info("Wrote %d messages to: %s", len(user_messages), out_path)
    return out_path


def run_jsonl(input_json: Path, output_dir: Path) -> Path:
    data = snapshot_store.load_message_json(input_json)
    out_path = snapshot_store.write_jsonl(output_dir, create_jsonl(data))
    logger.info("Wrote JSONL lines to: %s", out_path)
    return out_path


def dispatch(args: argparse.Namespace) -> int:
    """Run the parsed command and return the process exit code."""
    if args.command == "fetch":
        token = load_environment()
        output_dir = snapshot_store.prepare_output_dir(args.output_dir or app_config.output_dir)
        asyncio.run(run_fetch(token, parse_skip_channels(args.skip_channels), output_dir, app_config.fetch_settings))
        return 0

    output_dir = snapshot_store.prepare_output_dir(args.output_dir or app_config.output_dir)
    if args.command == "filter":
        run_filter(args.user_id, args.input_json, output_dir)
    else:
        run_jsonl(args.input_json, output_dir)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entrypoint returning the process exit code.

    No arguments prints the usage and returns 0; a usage error returns 1.
    """
    args_list: List[str] = list(sys.argv[1:] if argv is None else argv)
    parser = build_parser()

    if not args_list:
        parser.print_help(sys.stdout)
        return 0

    try:
        args = parser.parse_args(args_list)
    except SystemExit as exit_exc:
        code = exit_exc.code
        return code if isinstance(code, int) else 1

    try:
        return dispatch(args)
    except ConfigError as exc:
        logger.critical("%s", exc)
        return 1
    except InputError as exc:
        logger.error("%s", exc)
        return 1
    except SnapshotError as exc:
        logger.error("%s", exc)
        return 1
    except (discord.DiscordException, ConnectionError) as exc:
        logger.critical("Discord client error: %s", exc)
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted by user.")
        return 130


if __name__ == "__main__":
    sys.excepthook = handle_exception
    sys.exit(main())
