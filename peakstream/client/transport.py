"""Event channel between one dashboard and the server, over a WebSocket"""
import asyncio
import json
from collections import defaultdict
from typing import Any, Callable, Dict, List, Mapping, Optional
from urllib.parse import urlencode

import websockets
from websockets.exceptions import ConnectionClosedError, ConnectionClosedOK, InvalidHandshake, InvalidURI

from peakstream.config.logger import logger
from peakstream.models.schemas import EventMessage

# Transport error events, all surfaced to the dashboard as a connection error
TRANSPORT_ERRORS = ("reconnect_error", "connect_error", "connect_timeout", "connect_failed", "error")

CONNECT_EVENT = "connect"
DISCONNECT_EVENT = "disconnect"

Handler = Callable[[Any], None]


def build_url(url: str, params: Optional[Mapping[str, Any]] = None) -> str:
    if not params:
        return url
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{urlencode(params)}"


class Channel:
    """
    Bidirectional event channel.
    Handlers are plain callables invoked synchronously, in arrival order,
    with the event payload. Errors are delivered as events, never raised.
    """

    def __init__(self, url: str, params: Optional[Mapping[str, Any]] = None, open_timeout: float = 10.0):
        self.url = build_url(url, params)
        self.open_timeout = open_timeout
        self.websocket = None
        self._handlers: Dict[str, List[Handler]] = defaultdict(list)

    @property
    def connected(self) -> bool:
        return self.websocket is not None

    def on(self, event: str, handler: Handler) -> None:
        self._handlers[event].append(handler)

    def dispatch(self, event: str, payload: Any = None) -> None:
        for handler in list(self._handlers.get(event, ())):
            handler(payload)

    async def open(self, reconnecting: bool = False) -> bool:
        """Open the WebSocket, dispatching `connect` or one error event"""
        try:
            self.websocket = await websockets.connect(self.url, open_timeout=self.open_timeout)
        except (asyncio.TimeoutError, TimeoutError) as e:
            self._fail("connect_timeout", e, reconnecting)
            return False
        except InvalidURI as e:
            self._fail("connect_error", e, reconnecting)
            return False
        except InvalidHandshake as e:
            # Includes the server rejecting an invalid sensor
            self._fail("connect_failed", e, reconnecting)
            return False
        except OSError as e:
            self._fail("connect_error", e, reconnecting)
            return False

        logger.info(f"Connected to {self.url}")
        self.dispatch(CONNECT_EVENT, self.url)
        return True

    async def reconnect(self) -> bool:
        """Drop the current socket and open a fresh one, the server starts a new session"""
        await self.disconnect()
        return await self.open(reconnecting=True)

    async def emit(self, event: str, payload: Any = None) -> None:
        if self.websocket is None:
            raise RuntimeError("Channel is not connected")
        await self.websocket.send(EventMessage(event=event, data=payload).model_dump_json())

    async def listen(self) -> None:
        """Dispatch incoming events until the connection closes"""
        if self.websocket is None:
            return
        websocket = self.websocket
        try:
            async for raw in websocket:
                try:
                    message = EventMessage.model_validate(json.loads(raw))
                except ValueError as e:
                    self.dispatch("error", e)
                    continue
                self.dispatch(message.event, message.data)
        except ConnectionClosedError as e:
            self.websocket = None
            self.dispatch("error", e)
            return
        except ConnectionClosedOK:
            pass
        if self.websocket is websocket:
            self.websocket = None
            self.dispatch(DISCONNECT_EVENT, None)

    async def disconnect(self) -> None:
        websocket, self.websocket = self.websocket, None
        if websocket is not None:
            await websocket.close()
            self.dispatch(DISCONNECT_EVENT, None)

    def _fail(self, kind: str, error: BaseException, reconnecting: bool):
        if reconnecting:
            kind = "reconnect_error"
        self.websocket = None
        logger.warning(f"Transport {kind} for {self.url}: {type(error).__name__}: {error}")
        self.dispatch(kind, error)


async def connect(
    url: str,
    params: Optional[Mapping[str, Any]] = None,
    handlers: Optional[Mapping[str, Handler]] = None,
    open_timeout: float = 10.0,
) -> Channel:
    """Create a channel, register `handlers` and open it; failures arrive as error events"""
    channel = Channel(url, params, open_timeout=open_timeout)
    for event, handler in (handlers or {}).items():
        channel.on(event, handler)
    await channel.open()
    return channel
