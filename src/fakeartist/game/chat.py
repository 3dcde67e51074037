"""Append-only chat log."""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fakeartist.core.models import ChatMessage


class ChatLog:
    """Chat messages in arrival order.

    Storage order is arrival order; ``newest_first`` is the display order used
    by the chat panel.
    """

    def __init__(self, messages: list[ChatMessage] | None = None) -> None:
        self._messages: list[ChatMessage] = list(messages or [])

    def append(self, message: ChatMessage) -> None:
        """Add a message at the end of the log."""
        self._messages.append(message)

    def load(self, messages: list[ChatMessage]) -> None:
        """Replace the log with a server snapshot."""
        self._messages = list(messages)

    def clear(self) -> None:
        self._messages.clear()

    def newest_first(self) -> list[ChatMessage]:
        return self._messages[::-1]

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        return tuple(self._messages)

    def __iter__(self) -> Iterator[ChatMessage]:
        return iter(self._messages)

    def __len__(self) -> int:
        return len(self._messages)
