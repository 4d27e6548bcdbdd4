"""
Error taxonomy for Cordscribe.

- `ConfigError`: a required credential or setting is missing. Fatal before any work starts.
- `FetchError`: one page request for a channel failed. Ends that channel's loop only.
- `SnapshotError`: a JSON snapshot or output file could not be written.
- `InputError`: an input file for ``filter``/``jsonl`` is missing or malformed.
- `EmptyDatasetWarning`: the dataset compiler found nothing to emit.
"""

from __future__ import annotations

from pathlib import Path


class CordscribeError(Exception):
    """Base class for every error raised by Cordscribe."""


class ConfigError(CordscribeError):
    """A required configuration value is missing or invalid."""


class FetchError(CordscribeError):
    """A message page request failed.

    Attributes:
        channel_id (str): Channel whose history was being read.
        cause (BaseException): The underlying network, API or payload error.
    """

    def __init__(self, channel_id: str, cause: BaseException) -> None:
        self.channel_id = channel_id
        self.cause = cause
        super().__init__(f"Failed to fetch messages for channel {channel_id}: {cause}")


class SnapshotError(CordscribeError):
    """Writing a JSON file to disk failed."""

    def __init__(self, path: Path, cause: BaseException) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to write {path}: {cause}")


class InputError(CordscribeError):
    """An input JSON file could not be read or decoded."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid input file {path}: {reason}")


class EmptyDatasetWarning(UserWarning):
    """No eligible messages were available to build a dataset."""
