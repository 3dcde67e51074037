"""Session channel: lifecycle wrapper over an event transport."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

import structlog

from fakeartist.core.types import EventName
from fakeartist.exceptions import ChannelClosedError

if TYPE_CHECKING:
    from fakeartist.realtime.messages import OutboundMessage
    from fakeartist.realtime.transport import Listener, TransportProtocol

logger = structlog.get_logger(__name__)

TransportFactory = Callable[[], "TransportProtocol"]


class SessionChannel:
    """Owns at most one live transport and every listener registered on it.

    ``connect`` is idempotent and ``disconnect`` is safe to call repeatedly.
    Listeners added through ``subscribe`` are tracked so that teardown removes
    all of them; a later ``connect`` starts from a clean transport and never
    delivers an event twice.
    """

    def __init__(self, transport_factory: TransportFactory) -> None:
        """Initialize a disconnected channel.

        Args:
            transport_factory: Builds a fresh transport for each connection.
        """
        self._factory = transport_factory
        self._transport: TransportProtocol | None = None
        self._subscriptions: list[tuple[str, Listener]] = []
        self.connected = False

    @property
    def transport(self) -> TransportProtocol | None:
        """The live transport, or None when disconnected."""
        return self._transport

    def _on_connect(self, *_args: Any) -> None:
        self.connected = True
        logger.debug("Channel connected")

    def _on_disconnect(self, *_args: Any) -> None:
        self.connected = False
        logger.info("Channel disconnected")

    async def connect(self) -> None:
        """Create the transport and open it. No-op if a transport already exists."""
        if self._transport is not None:
            return
        transport = self._factory()
        transport.on(EventName.CONNECT, self._on_connect)
        transport.on(EventName.DISCONNECT, self._on_disconnect)
        self._transport = transport
        try:
            await transport.connect()
        except Exception:
            await self.disconnect()
            raise

    async def disconnect(self) -> None:
        """Release every listener and close the transport exactly once."""
        transport = self._transport
        if transport is None:
            self.connected = False
            return
        self._transport = None
        for event, listener in self._subscriptions:
            transport.off(event, listener)
        self._subscriptions.clear()
        transport.off(EventName.CONNECT, self._on_connect)
        transport.off(EventName.DISCONNECT, self._on_disconnect)
        self.connected = False
        await transport.disconnect()
        logger.debug("Channel closed")

    def subscribe(self, event: str, listener: Listener) -> Callable[[], None]:
        """Register a listener for the lifetime of the current transport.

        Args:
            event: Event name.
            listener: Callable invoked with the event payload.

        Returns:
            A callable that removes the listener.

        Raises:
            ChannelClosedError: If there is no live transport.
        """
        transport = self._transport
        if transport is None:
            raise ChannelClosedError(event)
        transport.on(event, listener)
        entry = (event, listener)
        self._subscriptions.append(entry)

        def unsubscribe() -> None:
            if entry in self._subscriptions:
                self._subscriptions.remove(entry)
                transport.off(event, listener)

        return unsubscribe

    async def emit(self, event: str, payload: Any = None) -> None:
        """Send a raw event.

        Raises:
            ChannelClosedError: If the channel is not connected.
        """
        if self._transport is None or not self.connected:
            raise ChannelClosedError(event)
        await self._transport.emit(event, payload)

    async def send(self, message: OutboundMessage) -> None:
        """Send a typed outbound message."""
        await self.emit(message.event, message.payload())
