"""
Type-safe wrappers for Discord identifiers.

Snowflakes travel as strings in the REST payloads and in our JSON snapshots.
They are treated as opaque: ordered by creation time on Discord's side but
never compared numerically here. Message timestamps are the ordering key.
"""

from __future__ import annotations

from typing import Any, Union


class DiscordID:
    """
    Opaque, non-empty identifier stored as a string.

    Equality works against other instances of the same class, plain strings
    and ints, so wrapped ids can be compared directly with raw payload values.

    Example:
        >>> cid = ChannelID(123456789012345678)
        >>> str(cid)
        '123456789012345678'
        >>> cid == "123456789012345678"
        True
    """

    __slots__ = ("_value",)

    def __init__(self, value: Union[str, int, "DiscordID"]) -> None:
        """
        Args:
            value: The identifier as a string, int, or wrapper of the same kind.

        Raises:
            ValueError: If the value is empty or of an unsupported type.
        """
        if isinstance(value, DiscordID):
            self._value = value._value
        elif isinstance(value, bool):
            raise ValueError(f"Cannot create {type(self).__name__} from bool")
        elif isinstance(value, int):
            self._value = str(value)
        elif isinstance(value, str):
            self._value = value
        else:
            raise ValueError(f"Cannot create {type(self).__name__} from {type(value).__name__}: {value!r}")

        if not self._value.strip():
            raise ValueError(f"{type(self).__name__} must not be empty")

    @classmethod
    def from_object(cls, obj: Any) -> "DiscordID":
        """Create an id from any Discord model exposing an ``id`` attribute."""
        return cls(obj.id)

    def __str__(self) -> str:
        return self._value

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._value!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, DiscordID):
            return type(self) is type(other) and self._value == other._value
        if isinstance(other, str):
            return self._value == other
        if isinstance(other, int) and not isinstance(other, bool):
            return self._value == str(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)


class ChannelID(DiscordID):
    """Identifier of a guild channel or thread."""

    __slots__ = ()


class MessageID(DiscordID):
    """Identifier of a message, also used as the pagination cursor."""

    __slots__ = ()


class UserID(DiscordID):
    """Identifier of a message author."""

    __slots__ = ()
