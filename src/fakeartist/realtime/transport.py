"""Event transports for the session channel.

A transport moves named events between this client and the game server.
``SocketIOTransport`` talks to a socket.io server; ``LocalTransport`` keeps
everything in-process for tests and embedding.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

import socketio
import structlog
from socketio import exceptions as socketio_exceptions

from fakeartist.core.types import EventName
from fakeartist.exceptions import ChannelClosedError, TransportError

logger = structlog.get_logger(__name__)

Listener = Callable[..., Any]


@runtime_checkable
class TransportProtocol(Protocol):
    """Protocol defining the bidirectional event transport.

    Transports deliver inbound events to listeners in arrival order and fire
    the ``connect`` and ``disconnect`` signals as the link changes state.
    """

    async def connect(self) -> None:
        """Open the link to the server.

        Raises:
            TransportError: If the server cannot be reached.
        """
        ...

    async def disconnect(self) -> None:
        """Close the link. Safe to call when already closed."""
        ...

    async def emit(self, event: str, payload: Any = None) -> None:
        """Send an event to the server.

        Raises:
            ChannelClosedError: If the link is not open.
        """
        ...

    def on(self, event: str, listener: Listener) -> None:
        """Register a listener for an event or signal."""
        ...

    def off(self, event: str, listener: Listener) -> None:
        """Remove a previously registered listener. Unknown listeners are ignored."""
        ...

    def listener_count(self, event: str | None = None) -> int:
        """Number of listeners for ``event``, or for all events when None."""
        ...


class _ListenerRegistry:
    """Listener bookkeeping shared by the transports."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = {}

    def on(self, event: str, listener: Listener) -> None:
        self._listeners.setdefault(event, []).append(listener)

    def off(self, event: str, listener: Listener) -> None:
        listeners = self._listeners.get(event)
        if listeners and listener in listeners:
            listeners.remove(listener)

    def listener_count(self, event: str | None = None) -> int:
        if event is not None:
            return len(self._listeners.get(event, ()))
        return sum(len(listeners) for listeners in self._listeners.values())

    def _dispatch(self, event: str, *args: Any) -> None:
        # Copy so listeners may unsubscribe while being called.
        for listener in list(self._listeners.get(event, ())):
            listener(*args)


class LocalTransport(_ListenerRegistry):
    """In-process transport.

    Outbound events are recorded in ``sent``; ``deliver`` plays the role of
    the server pushing an event.

    Example:
        >>> transport = LocalTransport()
        >>> transport.on("chat_msg", print)
        >>> transport.deliver("chat_msg", {"author": {"id": "a"}, "message": "hi"})
        {'author': {'id': 'a'}, 'message': 'hi'}
    """

    def __init__(self) -> None:
        """Initialize a closed transport."""
        super().__init__()
        self.sent: list[tuple[str, Any]] = []
        self.connected = False
        self.connect_calls = 0
        self.disconnect_calls = 0

    async def connect(self) -> None:
        """Open the link and fire the connect signal."""
        self.connected = True
        self.connect_calls += 1
        self._dispatch(EventName.CONNECT)

    async def disconnect(self) -> None:
        """Close the link and fire the disconnect signal."""
        if not self.connected:
            return
        self.connected = False
        self.disconnect_calls += 1
        self._dispatch(EventName.DISCONNECT)

    async def emit(self, event: str, payload: Any = None) -> None:
        """Record an outbound event."""
        if not self.connected:
            raise ChannelClosedError(event)
        self.sent.append((event, payload))

    def deliver(self, event: str, payload: Any = None) -> None:
        """Deliver an inbound event to the registered listeners."""
        self._dispatch(event, payload)

    def drop(self) -> None:
        """Simulate the server closing the link."""
        if self.connected:
            self.connected = False
            self._dispatch(EventName.DISCONNECT)

    def sent_events(self, event: str) -> list[Any]:
        """Payloads of every recorded outbound ``event``."""
        return [payload for name, payload in self.sent if name == event]


class SocketIOTransport(_ListenerRegistry):
    """Transport backed by a python-socketio ``AsyncClient``.

    socket.io keeps a single handler per event name, so the transport binds
    one trampoline per event and fans out to its own listener list. Automatic
    reconnection is disabled; reconnecting is an explicit caller action.
    """

    def __init__(
        self,
        url: str,
        *,
        socketio_path: str = "socket.io",
        client: socketio.AsyncClient | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            url: Base URL of the game server.
            socketio_path: Path of the socket.io endpoint.
            client: Pre-built client, mainly for tests.
        """
        super().__init__()
        self._url = url
        self._socketio_path = socketio_path
        self._client = client or socketio.AsyncClient(reconnection=False)
        self._bound: set[str] = set()

    def on(self, event: str, listener: Listener) -> None:
        """Register a listener, binding the socket.io handler on first use."""
        if event not in self._bound:
            self._client.on(event, self._trampoline(event))
            self._bound.add(event)
        super().on(event, listener)

    def _trampoline(self, event: str) -> Listener:
        def handler(*args: Any) -> None:
            self._dispatch(event, *args)

        return handler

    async def connect(self) -> None:
        """Connect the socket.io client."""
        try:
            await self._client.connect(self._url, socketio_path=self._socketio_path)
        except socketio_exceptions.ConnectionError as exc:
            logger.warning("Connection failed", url=self._url, error=str(exc))
            raise TransportError(self._url, str(exc)) from exc
        logger.info("Connected", url=self._url, sid=self._client.sid)

    async def disconnect(self) -> None:
        """Disconnect the socket.io client."""
        if self._client.connected:
            await self._client.disconnect()
            logger.info("Disconnected", url=self._url)

    async def emit(self, event: str, payload: Any = None) -> None:
        """Emit an event through the socket.io client."""
        if not self._client.connected:
            raise ChannelClosedError(event)
        try:
            await self._client.emit(event, payload)
        except socketio_exceptions.SocketIOError as exc:
            logger.exception("Failed to emit event", event=event)
            raise ChannelClosedError(event) from exc
