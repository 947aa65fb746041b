"""Registry of live streaming sessions, one per connection"""
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, Iterator, Optional

from peakstream.config.logger import logger
from peakstream.models.errors import SessionExistsError
from peakstream.models.schemas import Reading
from peakstream.services.emission import PeriodicTask, next_reading, now_ms
from peakstream.services.reading_source import ReadingSource, parse_sensor_id

ReadingSink = Callable[[Reading], Awaitable[None]]


@dataclass
class Session:
    """Binding between one connection and one sensor's emission state"""
    connection_id: str
    sensor_id: int
    sink: ReadingSink = field(repr=False)
    cursor: int = 0
    timer: Optional[PeriodicTask] = field(default=None, repr=False)


class SessionRegistry:
    """
    Owns every session of the server process and the lifecycle of its timer.
    A session is created with its timer on connect and both are discarded
    together on disconnect, so a connection never has two timers.
    """

    def __init__(
        self,
        source: ReadingSource,
        interval_ms: int,
        clock: Callable[[], int] = now_ms,
    ):
        self.source = source
        self.interval_ms = interval_ms
        self._clock = clock
        self._sessions: Dict[str, Session] = {}

    def on_connect(self, connection_id: str, sensor_id: int, sink: ReadingSink) -> Session:
        """Create the session and start its emission timer (needs a running event loop)"""
        sensor_id = parse_sensor_id(sensor_id)
        self.source.series_for(sensor_id)
        if connection_id in self._sessions:
            raise SessionExistsError(connection_id)

        session = Session(connection_id=connection_id, sensor_id=sensor_id, sink=sink)
        session.timer = PeriodicTask(
            name=f"emit-{connection_id}",
            interval=self.interval_ms / 1000,
            tick=lambda: self.emit_next(connection_id),
        )
        self._sessions[connection_id] = session
        session.timer.start()
        logger.info(f"Session {connection_id} opened for sensor {sensor_id} (Total: {len(self)})")
        return session

    def on_disconnect(self, connection_id: str) -> bool:
        """Stop the timer and drop the session, unknown ids are ignored"""
        session = self._sessions.pop(connection_id, None)
        if session is None:
            return False
        if session.timer is not None:
            session.timer.cancel()
            session.timer = None
        logger.info(f"Session {connection_id} closed (Total: {len(self)})")
        return True

    async def emit_next(self, connection_id: str) -> Optional[Reading]:
        """
        Push the next reading of a session to its connection.
        Returns None when the session is gone, which happens when a timer
        fires while the connection is being torn down.
        """
        session = self._sessions.get(connection_id)
        if session is None:
            logger.debug(f"Dropped emission for closed session {connection_id}")
            return None

        series = self.source.series_for(session.sensor_id)
        cursor = session.cursor
        reading, next_cursor = next_reading(series, cursor, self._clock())
        logger.debug(f"Emitting to sensor id:{session.sensor_id}, index: {cursor}")
        await session.sink(reading)

        # The session may have been closed while the send was pending
        if self._sessions.get(connection_id) is session:
            session.cursor = next_cursor
        return reading

    def get(self, connection_id: str) -> Optional[Session]:
        return self._sessions.get(connection_id)

    def sessions(self) -> Iterator[Session]:
        return iter(list(self._sessions.values()))

    def shutdown(self) -> None:
        """Stop every timer, used when the application exits"""
        for connection_id in list(self._sessions):
            self.on_disconnect(connection_id)

    def __contains__(self, connection_id: object) -> bool:
        return connection_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
