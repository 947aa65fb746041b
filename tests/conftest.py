import itertools

import pytest
from fastapi.testclient import TestClient

from peakstream.app import create_app
from peakstream.config.settings import Settings
from peakstream.models.schemas import SensorSeries
from peakstream.services.reading_source import ReadingSource


class Collector:
    """Reading sink that keeps everything it receives"""

    def __init__(self):
        self.readings = []

    async def __call__(self, reading):
        self.readings.append(reading)


@pytest.fixture
def source() -> ReadingSource:
    return ReadingSource([
        SensorSeries(readings=(1.0, 2.0, 3.0), z_scores=(0, 1, 0)),
        SensorSeries(readings=(10.0, 20.0), z_scores=(0, -1)),
    ])


@pytest.fixture
def clock():
    ticks = itertools.count(1_000, 10)
    return lambda: next(ticks)


@pytest.fixture
def collector() -> Collector:
    return Collector()


@pytest.fixture
def fast_settings() -> Settings:
    return Settings(emission_interval_ms=10)


@pytest.fixture
def client(fast_settings):
    with TestClient(create_app(fast_settings)) as test_client:
        yield test_client
