"""
JSON persistence for fetched history and derived outputs.

Snapshots are rewritten in full after every page, so every write goes to a
temporary sibling first and is moved into place with ``os.replace``. A crash
mid-write leaves the previous snapshot intact.
"""

from __future__ import annotations

import json
import os
import tempfile
import uuid
from pathlib import Path
from typing import Any, Dict, List, Sequence

from cordscribe.datatypes.errors import InputError, SnapshotError
from cordscribe.datatypes.message_datatypes import ChannelMessageSet, ChatMessage, MessageCollection
from cordscribe.util.logger import get_logger

logger = get_logger("snapshot_store")

COMBINED_SNAPSHOT_NAME = "all-channel-messages.json"
TEMP_DIR_PREFIX = "discord_"


def channel_snapshot_path(output_dir: Path, channel_id: str) -> Path:
    return output_dir / f"{channel_id}-messages.json"


def serialize_message_set(message_set: ChannelMessageSet) -> Dict[str, List[Dict[str, Any]]]:
    return {
        channel_id: [message.to_payload() for message in messages]
        for channel_id, messages in message_set.items()
    }


def write_text_atomic(path: Path, text: str) -> Path:
    """Write ``text`` to ``path`` through a temporary file in the same directory.

    Raises:
        SnapshotError: If the directory is not writable or the rename fails.
    """
    tmp_name: str | None = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w", encoding="utf-8", dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", delete=False
        ) as tmp:
            tmp_name = tmp.name
            tmp.write(text)
        os.replace(tmp_name, path)
    except OSError as exc:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise SnapshotError(path, exc) from exc
    return path


def write_json(path: Path, payload: Any) -> Path:
    try:
        text = json.dumps(payload, ensure_ascii=False, indent=2)
    except (TypeError, ValueError) as exc:
        raise SnapshotError(path, exc) from exc
    return write_text_atomic(path, text)


def write_channel_snapshot(output_dir: Path, channel_id: str, message_set: ChannelMessageSet) -> Path:
    """Persist every channel fetched so far under the current channel's snapshot name."""
    return write_json(channel_snapshot_path(output_dir, channel_id), serialize_message_set(message_set))


def write_combined_snapshot(output_dir: Path, message_set: ChannelMessageSet) -> Path:
    return write_json(output_dir / COMBINED_SNAPSHOT_NAME, serialize_message_set(message_set))


def write_user_messages(output_dir: Path, user_id: str, messages: Sequence[ChatMessage]) -> Path:
    return write_json(output_dir / f"{user_id}-messages.json", [message.to_payload() for message in messages])


def write_jsonl(output_dir: Path, jsonl_text: str) -> Path:
    return write_text_atomic(output_dir / f"train-{uuid.uuid4()}.jsonl", jsonl_text)


def load_message_json(path: Path) -> MessageCollection:
    """Read a snapshot (channel mapping) or a filter output (flat array).

    Raises:
        InputError: If the file is missing, not JSON, or not made of message objects.
    """
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise InputError(path, "file not found") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise InputError(path, f"cannot read file: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise InputError(path, f"invalid JSON: {exc}") from exc

    try:
        if isinstance(raw, dict):
            message_set: ChannelMessageSet = {}
            for channel_id, payloads in raw.items():
                if not isinstance(payloads, list):
                    raise ValueError(f"channel {channel_id} does not hold a message array")
                message_set[str(channel_id)] = [ChatMessage.from_payload(p) for p in payloads]
            return message_set
        if isinstance(raw, list):
            return [ChatMessage.from_payload(p) for p in raw]
    except ValueError as exc:
        raise InputError(path, str(exc)) from exc

    raise InputError(path, f"expected an object or an array, got {type(raw).__name__}")


def prepare_output_dir(configured: Path | None = None) -> Path:
    """Return the configured output directory (created if needed) or a fresh temp dir."""
    if configured is not None:
        configured.mkdir(parents=True, exist_ok=True)
        return configured.resolve()
    output_dir = Path(tempfile.mkdtemp(prefix=TEMP_DIR_PREFIX))
    logger.info("Using temp directory: %s", output_dir)
    return output_dir
