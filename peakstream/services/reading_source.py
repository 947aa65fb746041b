"""Read-only table of pre-computed sensor series"""
import json
from pathlib import Path
from typing import Any, Iterable, Optional, Union

from peakstream.config.logger import logger
from peakstream.models.errors import InvalidSensorError
from peakstream.models.schemas import SensorSeries


def parse_sensor_id(raw: Optional[Any]) -> int:
    """Parse the `sensor` connection parameter into a 1-based sensor id"""
    if raw is None or isinstance(raw, bool):
        raise InvalidSensorError(raw, "sensor parameter is required")
    if isinstance(raw, int):
        sensor_id = raw
    else:
        text = str(raw).strip()
        if not text.isdecimal():
            raise InvalidSensorError(raw)
        sensor_id = int(text)
    if sensor_id < 1:
        raise InvalidSensorError(raw)
    return sensor_id


class ReadingSource:
    """Sensor series addressed by id, sensor `k` is the `k - 1`-th entry"""

    def __init__(self, series: Iterable[SensorSeries]):
        self._series = tuple(series)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "ReadingSource":
        """Load the dataset once, a JSON list of {readings, zScores} objects"""
        with open(path, "r", encoding="utf-8") as fh:
            raw = json.load(fh)
        source = cls(SensorSeries.model_validate(entry) for entry in raw)
        logger.info(f"Loaded {len(source)} sensor series from {path}")
        return source

    def series_for(self, sensor_id: int) -> SensorSeries:
        if isinstance(sensor_id, bool) or not isinstance(sensor_id, int) or sensor_id < 1:
            raise InvalidSensorError(sensor_id)
        if sensor_id > len(self._series):
            raise InvalidSensorError(sensor_id, f"only sensors 1..{len(self._series)} exist")
        return self._series[sensor_id - 1]

    @property
    def sensor_ids(self) -> range:
        return range(1, len(self._series) + 1)

    def __len__(self) -> int:
        return len(self._series)
