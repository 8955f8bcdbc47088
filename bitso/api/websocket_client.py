"""
Bitso WebSocket Client.

Real-time data streaming from wss://ws.bitso.com:
- trades: executed trades on a book
- diff-orders: incremental order book changes
- orders: top of the order book snapshot

One background task reads the connection and pushes typed messages onto a
bounded inbox. Keep-alive frames are dropped. A read or decode failure
closes the connection; reconnecting is left to the caller.
"""

import asyncio
import json
import logging
from enum import Enum, auto
from typing import Any, Awaitable, Callable, Dict, Optional, Union

import websockets
from websockets.exceptions import (
    ConnectionClosed,
    ConnectionClosedOK,
    WebSocketException,
)

from config.settings import WebSocketConfig
from .bitso_errors import BitsoError, DecodeError, StreamError, TransportError
from .models.enums import ChannelType
from .models.stream import (
    STREAM_VARIANTS,
    StreamMessage,
    WebSocketMessage,
    WebSocketReply,
)
from .models.types import Book

logger = logging.getLogger(__name__)

KEEP_ALIVE = "ka"


class ConnectionState(Enum):
    """WebSocket connection states."""
    DISCONNECTED = auto()
    CONNECTING = auto()
    CONNECTED = auto()
    CLOSING = auto()
    FAULTED = auto()


# Type aliases for callbacks
ErrorCallback = Callable[[BitsoError], Awaitable[None]]
StateCallback = Callable[[ConnectionState], Awaitable[None]]


def parse_stream_frame(raw: Union[str, bytes]) -> Optional[StreamMessage]:
    """
    Decode one inbound frame into a typed message.

    Returns:
        None for keep-alive frames, otherwise the message for the frame's
        type (WebSocketReply for subscription acks, frames without a
        payload and unknown types)

    Raises:
        DecodeError: If the frame is not a JSON object or does not match
            the shape of its type
    """
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"Frame is not valid UTF-8: {e}") from e

    try:
        data = json.loads(raw)
    except ValueError as e:
        raise DecodeError(f"Invalid JSON frame: {e}") from e
    except RecursionError as e:
        raise DecodeError("Frame JSON is nested too deeply") from e

    if not isinstance(data, dict):
        raise DecodeError(f"Expected JSON object frame, got {type(data).__name__}")

    frame_type = data.get("type", "")
    if not isinstance(frame_type, str):
        raise DecodeError(f"Frame type must be a string, got {frame_type!r}")

    if frame_type == KEEP_ALIVE:
        return None

    variant = STREAM_VARIANTS.get(frame_type)
    try:
        if variant is not None and data.get("payload") is not None:
            return variant.from_dict(data)
        return WebSocketReply.from_dict(data)
    except DecodeError:
        raise
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise DecodeError(f"Malformed {frame_type!r} frame: {e}") from e


class BitsoWebSocketClient:
    """
    Async WebSocket client for Bitso real-time data.

    Usage:
        async with BitsoWebSocketClient() as client:
            await client.subscribe(Book.from_string("btc_mxn"), ChannelType.TRADES)

            async for message in client:
                process(message)

    Or reading the inbox directly:
        client = BitsoWebSocketClient(on_error=handle_error)
        await client.connect()
        await client.subscribe("eth_mxn", "orders")
        message = await client.receive().get()
    """

    def __init__(
        self,
        config: Optional[WebSocketConfig] = None,
        on_error: Optional[ErrorCallback] = None,
        on_state_change: Optional[StateCallback] = None,
    ):
        """
        Initialize WebSocket client.

        Args:
            config: WebSocket configuration
            on_error: Awaited with the error when the connection faults
            on_state_change: Awaited on every state change
        """
        self._config = config or WebSocketConfig()
        self._on_error = on_error
        self._on_state_change = on_state_change

        self._state = ConnectionState.DISCONNECTED
        self._ws: Optional[Any] = None
        self._last_error: Optional[BitsoError] = None

        # Full inbox blocks the reader
        self._inbox: asyncio.Queue = asyncio.Queue(
            maxsize=self._config.message_queue_size
        )

        self._reader_task: Optional[asyncio.Task] = None

    @property
    def state(self) -> ConnectionState:
        """Get current connection state."""
        return self._state

    @property
    def is_connected(self) -> bool:
        return self._state == ConnectionState.CONNECTED

    @property
    def last_error(self) -> Optional[BitsoError]:
        """Error that faulted the last connection, if any."""
        return self._last_error

    async def _set_state(self, state: ConnectionState) -> None:
        """Update state and notify callback."""
        if state != self._state:
            old_state = self._state
            self._state = state
            logger.debug(f"WebSocket state: {old_state.name} -> {state.name}")

            if self._on_state_change:
                try:
                    await self._on_state_change(state)
                except Exception as e:
                    logger.error(f"State callback error: {e}")

    # ==========================================
    # CONNECTION MANAGEMENT
    # ==========================================

    async def connect(self) -> None:
        """
        Open the connection and start the reader task.

        Raises:
            TransportError: If the connection cannot be established
        """
        if self._state != ConnectionState.DISCONNECTED:
            logger.warning(f"Cannot connect in state {self._state.name}")
            return

        await self._set_state(ConnectionState.CONNECTING)

        url = self._config.url
        try:
            self._ws = await websockets.connect(
                url,
                open_timeout=self._config.open_timeout,
                close_timeout=self._config.close_timeout,
                ping_interval=self._config.ping_interval,
            )
        except (OSError, asyncio.TimeoutError, WebSocketException) as e:
            logger.error(f"Connection to {url} failed: {e}")
            self._ws = None
            await self._set_state(ConnectionState.DISCONNECTED)
            raise TransportError(f"WebSocket connection to {url} failed: {e}") from e

        self._last_error = None
        await self._set_state(ConnectionState.CONNECTED)
        self._reader_task = asyncio.create_task(self._reader_loop())

        logger.info(f"WebSocket connected to {url}")

    async def close(self) -> None:
        """Close the connection. Safe to call more than once."""
        if self._state == ConnectionState.DISCONNECTED and self._ws is None:
            return

        await self._set_state(ConnectionState.CLOSING)

        task = self._reader_task
        if task is not None and task is not asyncio.current_task() and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        await self._close_socket()
        await self._set_state(ConnectionState.DISCONNECTED)
        logger.info("WebSocket disconnected")

    async def _close_socket(self) -> None:
        ws, self._ws = self._ws, None
        if ws is None:
            return
        try:
            await ws.close()
        except (OSError, WebSocketException) as e:
            logger.warning(f"Error closing WebSocket: {e}")

    # ==========================================
    # MESSAGE HANDLING
    # ==========================================

    async def _reader_loop(self) -> None:
        """Background task: read frames and queue typed messages."""
        try:
            while True:
                raw = await self._ws.recv()
                message = parse_stream_frame(raw)
                if message is None:
                    continue
                await self._inbox.put(message)

        except ConnectionClosedOK:
            logger.info("WebSocket closed normally")
            await self._close_socket()
            await self._set_state(ConnectionState.DISCONNECTED)

        except DecodeError as e:
            await self._fault(e)

        except (ConnectionClosed, OSError) as e:
            await self._fault(StreamError(f"Failed to read message: {e}"))

        except Exception as e:
            await self._fault(StreamError(f"Unexpected stream failure: {e!r}"))

    async def _fault(self, error: BitsoError) -> None:
        """Record a reader failure and tear the connection down."""
        logger.error(f"WebSocket stream fault: {error}")
        self._last_error = error

        if self._on_error:
            try:
                await self._on_error(error)
            except Exception as e:
                logger.error(f"Error callback error: {e}")

        await self._set_state(ConnectionState.FAULTED)
        await self._close_socket()
        await self._set_state(ConnectionState.DISCONNECTED)

    async def _send(self, data: Dict[str, Any]) -> None:
        """Send a JSON message."""
        if self._ws is None or not self.is_connected:
            raise ConnectionError("WebSocket is not connected")

        try:
            await self._ws.send(json.dumps(data))
        except ConnectionClosed as e:
            raise ConnectionError(f"WebSocket closed while sending: {e}") from e

        logger.debug(f"Sent: {data}")

    async def subscribe(
        self,
        book: Union[Book, str],
        channel: Union[ChannelType, str],
    ) -> None:
        """
        Subscribe to a channel on a book.

        Args:
            book: Book to follow (e.g., "btc_mxn")
            channel: "trades", "diff-orders" or "orders"

        Raises:
            ConnectionError: If not connected
        """
        channel_name = channel.value if isinstance(channel, ChannelType) else str(channel)
        message = WebSocketMessage(book=book, type=channel_name)

        await self._send(message.to_dict())
        logger.info(f"Subscribed to {channel_name} on {book}")

    def receive(self) -> asyncio.Queue:
        """Inbox of typed messages, in arrival order."""
        return self._inbox

    # ==========================================
    # ITERATOR INTERFACE
    # ==========================================

    def __aiter__(self):
        return self

    async def __anext__(self) -> StreamMessage:
        """Next message; stops once the reader has exited and the inbox is drained."""
        if not self._inbox.empty():
            return self._inbox.get_nowait()

        reader = self._reader_task
        if reader is None or reader.done():
            raise StopAsyncIteration

        getter = asyncio.ensure_future(self._inbox.get())
        done, _ = await asyncio.wait(
            {getter, reader},
            return_when=asyncio.FIRST_COMPLETED,
        )

        if getter in done:
            return getter.result()

        getter.cancel()
        try:
            await getter
        except asyncio.CancelledError:
            pass
        else:
            return getter.result()

        if not self._inbox.empty():
            return self._inbox.get_nowait()
        raise StopAsyncIteration

    async def __aenter__(self):
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
