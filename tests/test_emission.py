import asyncio

import pytest

from peakstream.models.schemas import SensorSeries
from peakstream.services.emission import PeriodicTask, next_reading, now_ms


def test_next_reading_wraps():
    series = SensorSeries(readings=(1.0, 2.0), z_scores=(0, 1))

    first, cursor = next_reading(series, 0, 100)
    second, cursor = next_reading(series, cursor, 200)

    assert (first.value, first.zscore, first.timestamp) == (1.0, 0.0, 100)
    assert (second.value, second.zscore, second.timestamp) == (2.0, 1.0, 200)
    assert cursor == 0


def test_now_ms_is_epoch_milliseconds():
    assert now_ms() > 1_600_000_000_000


@pytest.mark.asyncio
async def test_periodic_task_ticks_until_cancelled():
    calls = []

    async def tick():
        calls.append(1)

    task = PeriodicTask("test", 0.01, tick)
    task.start()
    task.start()
    for _ in range(100):
        if len(calls) >= 3:
            break
        await asyncio.sleep(0.01)
    task.cancel()
    task.cancel()
    count = len(calls)
    await asyncio.sleep(0.05)

    assert count >= 3
    assert len(calls) == count
    assert not task.running


@pytest.mark.asyncio
async def test_periodic_task_survives_failing_tick():
    calls = []

    async def tick():
        calls.append(1)
        raise RuntimeError("send failed")

    task = PeriodicTask("failing", 0.01, tick)
    task.start()
    for _ in range(100):
        if len(calls) >= 2:
            break
        await asyncio.sleep(0.01)

    assert len(calls) >= 2
    assert task.running
    task.cancel()


@pytest.mark.asyncio
async def test_periodic_task_keeps_fixed_rate_with_slow_ticks():
    loop = asyncio.get_running_loop()
    started = []

    async def slow_tick():
        started.append(loop.time())
        await asyncio.sleep(0.03)

    task = PeriodicTask("slow", 0.05, slow_tick)
    task.start()
    for _ in range(200):
        if len(started) >= 5:
            break
        await asyncio.sleep(0.01)
    task.cancel()

    assert len(started) >= 5
    average_period = (started[4] - started[0]) / 4
    # A delay counted from the end of each tick would give 0.08
    assert average_period < 0.07
