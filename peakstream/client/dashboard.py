"""Live chart of one sensor fed by a transport channel"""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Optional, Protocol

from pydantic import ValidationError

from peakstream.client.buffer import WindowBuffer
from peakstream.client.projector import ChartView, project_view
from peakstream.client.transport import CONNECT_EVENT, DISCONNECT_EVENT, TRANSPORT_ERRORS, Channel
from peakstream.config.logger import logger
from peakstream.config.settings import settings
from peakstream.models.errors import InvalidDisplayWidthError, TransportError
from peakstream.models.schemas import READING_EVENT, Reading
from peakstream.services.reading_source import parse_sensor_id


class DisplayState(str, Enum):
    DISCONNECTED = "disconnected"
    STREAMING = "connected-streaming"
    ERROR = "error"


@dataclass(frozen=True)
class ConnectionStatus:
    connected: bool
    last_error: Optional[str] = None
    last_timestamp: Optional[int] = None

    @property
    def state(self) -> DisplayState:
        if self.last_error:
            return DisplayState.ERROR
        if self.connected:
            return DisplayState.STREAMING
        return DisplayState.DISCONNECTED


class ChartRenderer(Protocol):
    """Draws or updates a chart from an ordered sequence of points"""

    def render(self, view: ChartView, status: ConnectionStatus) -> None:
        ...


class LogRenderer:
    """Writes one line per redraw instead of drawing"""

    def __init__(self, sensor_id: int, width: int):
        self.sensor_id = sensor_id
        self.width = width

    def render(self, view: ChartView, status: ConnectionStatus) -> None:
        if status.state is DisplayState.ERROR:
            logger.warning(f"Sensor {self.sensor_id}: {status.last_error}")
            return
        label = "Connected to" if status.connected else "Disconnected from"
        if not view.visible:
            logger.info(f"{label} Sensor {self.sensor_id} | no readings")
            return
        last = view.visible[-1]
        peaks = sum(1 for point in view.secondary if point.value)
        logger.info(
            f"{label} Sensor {self.sensor_id} | Showing last {self.width} readings | "
            f"Last Reading: {datetime.fromtimestamp(last.timestamp / 1000).strftime('%H:%M:%S')} "
            f"value={last.value:.2f} peak={'yes' if last.zscore else 'no'} "
            f"highest={view.highest:.2f} peaks in view={peaks}"
        )


class SensorDashboard:
    """
    Client-side state of one chart.

    Readings are appended to a bounded window and the chart is redrawn in
    the same handler. Any transport error clears the window and switches
    to the error state; only a reading after a fresh connect leaves it.
    """

    def __init__(
        self,
        sensor_id: Any,
        url: Optional[str] = None,
        width: Optional[int] = None,
        renderer: Optional[ChartRenderer] = None,
        capacity: Optional[int] = None,
        open_timeout: Optional[float] = None,
    ):
        self.sensor_id = parse_sensor_id(sensor_id)
        self.width = settings.default_display_width if width is None else width
        if isinstance(self.width, bool) or not isinstance(self.width, int) \
                or not 1 <= self.width <= settings.max_display_width:
            raise InvalidDisplayWidthError(self.width, settings.max_display_width)

        self.url = url or settings.server_url
        self.open_timeout = open_timeout or settings.connect_timeout_seconds
        self.renderer: ChartRenderer = renderer or LogRenderer(self.sensor_id, self.width)
        self.buffer = WindowBuffer(capacity or settings.buffer_capacity)
        self.connected = False
        self.error: Optional[str] = None
        self.last_timestamp: Optional[int] = None
        self.channel: Optional[Channel] = None
        # Set by an error, readings are ignored until a new connection opens
        self.awaiting_connect = False

    @property
    def status(self) -> ConnectionStatus:
        return ConnectionStatus(
            connected=self.connected,
            last_error=self.error,
            last_timestamp=self.last_timestamp,
        )

    @property
    def state(self) -> DisplayState:
        return self.status.state

    def bind(self, channel: Channel) -> Channel:
        """Route the channel's reading and error events to this dashboard"""
        channel.on(CONNECT_EVENT, self._on_connect)
        channel.on(READING_EVENT, self.store_reading)
        channel.on(DISCONNECT_EVENT, self._on_disconnect)
        for kind in TRANSPORT_ERRORS:
            channel.on(kind, lambda error, kind=kind: self.set_error(kind, error))
        self.channel = channel
        return channel

    def store_reading(self, payload: Any) -> ChartView:
        if self.awaiting_connect:
            logger.debug(f"Dashboard for sensor {self.sensor_id} ignores a reading until it reconnects")
            return project_view(self.buffer.points, self.width)
        try:
            if isinstance(payload, (str, bytes)):
                reading = Reading.model_validate_json(payload)
            else:
                reading = Reading.model_validate(payload)
        except ValidationError as e:
            return self.set_error("error", e)

        self.buffer = self.buffer.append(reading)
        self.connected = True
        self.error = None
        self.last_timestamp = reading.timestamp
        return self.update_chart()

    def set_error(self, kind: str, error: Any) -> ChartView:
        """Clear displayed data and surface the error, stale points are never shown"""
        failure = error if isinstance(error, TransportError) else TransportError(kind, error)
        self.buffer = self.buffer.clear()
        self.connected = False
        self.error = str(failure)
        self.awaiting_connect = True
        logger.warning(f"Dashboard for sensor {self.sensor_id}: {self.error}")
        return self.update_chart()

    def update_chart(self) -> ChartView:
        view = project_view(self.buffer.points, self.width)
        self.renderer.render(view, self.status)
        return view

    async def connect(self) -> bool:
        """Open a fresh connection, the window starts empty"""
        if self.channel is not None:
            await self.channel.disconnect()
        self.buffer = self.buffer.clear()
        self.connected = False
        channel = self.bind(Channel(self.url, {"sensor": self.sensor_id}, open_timeout=self.open_timeout))
        return await channel.open()

    async def run(self) -> None:
        """Connect and process events until the connection ends"""
        if await self.connect():
            await self.channel.listen()

    async def close(self) -> None:
        if self.channel is not None:
            await self.channel.disconnect()
        self.connected = False

    def _on_connect(self, _payload: Any) -> None:
        self.awaiting_connect = False

    def _on_disconnect(self, _payload: Any) -> None:
        self.connected = False
