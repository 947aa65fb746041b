import asyncio

import pytest

from peakstream.models.errors import InvalidSensorError, SessionExistsError
from peakstream.services.session_registry import SessionRegistry

# Long enough that timers never fire on their own
IDLE_INTERVAL_MS = 60_000


async def wait_for(predicate, timeout=1.0):
    for _ in range(int(timeout / 0.01)):
        if predicate():
            return
        await asyncio.sleep(0.01)


@pytest.fixture
def registry(source, clock):
    registry = SessionRegistry(source, IDLE_INTERVAL_MS, clock=clock)
    yield registry
    registry.shutdown()


@pytest.mark.asyncio
async def test_connect_creates_session(registry, collector):
    session = registry.on_connect("abc", 1, collector)

    assert "abc" in registry
    assert registry.get("abc") is session
    assert session.cursor == 0
    assert session.timer.running
    assert len(registry) == 1


@pytest.mark.asyncio
async def test_sensor_id_selects_previous_index(registry, collector):
    registry.on_connect("abc", 2, collector)

    reading = await registry.emit_next("abc")

    assert reading.value == 10.0
    assert reading.zscore == 0.0
    assert collector.readings == [reading]


@pytest.mark.asyncio
@pytest.mark.parametrize("sensor_id", [0, 3, -1, "x", None])
async def test_invalid_sensor_rejected(registry, collector, sensor_id):
    with pytest.raises(InvalidSensorError):
        registry.on_connect("abc", sensor_id, collector)
    assert len(registry) == 0


@pytest.mark.asyncio
async def test_duplicate_connection_id(registry, collector):
    registry.on_connect("abc", 1, collector)
    first_timer = registry.get("abc").timer

    with pytest.raises(SessionExistsError):
        registry.on_connect("abc", 2, collector)

    assert registry.get("abc").sensor_id == 1
    assert registry.get("abc").timer is first_timer


@pytest.mark.asyncio
async def test_cursor_is_cyclic(registry, collector):
    session = registry.on_connect("abc", 1, collector)

    cursors = []
    for _ in range(6):
        cursors.append(session.cursor)
        await registry.emit_next("abc")

    assert cursors == [0, 1, 2, 0, 1, 2]
    assert session.cursor == 0
    values = [r.value for r in collector.readings]
    assert values[:3] == values[3:] == [1.0, 2.0, 3.0]
    assert [r.zscore for r in collector.readings[:3]] == [0.0, 1.0, 0.0]


@pytest.mark.asyncio
async def test_timestamps_come_from_clock(registry, collector):
    registry.on_connect("abc", 1, collector)

    for _ in range(3):
        await registry.emit_next("abc")

    assert [r.timestamp for r in collector.readings] == [1_000, 1_010, 1_020]


@pytest.mark.asyncio
async def test_disconnect_is_idempotent(registry, collector):
    session = registry.on_connect("abc", 1, collector)
    timer = session.timer

    assert registry.on_disconnect("abc") is True
    assert registry.on_disconnect("abc") is False
    assert registry.on_disconnect("never-seen") is False
    assert "abc" not in registry
    assert not timer.running


@pytest.mark.asyncio
async def test_emission_after_disconnect_is_dropped(registry, collector):
    registry.on_connect("abc", 1, collector)
    registry.on_disconnect("abc")

    assert await registry.emit_next("abc") is None
    assert "abc" not in registry
    assert collector.readings == []


@pytest.mark.asyncio
async def test_disconnect_during_send(registry):
    async def closing_sink(reading):
        registry.on_disconnect("abc")

    registry.on_connect("abc", 1, closing_sink)

    reading = await registry.emit_next("abc")

    assert reading.value == 1.0
    assert "abc" not in registry


@pytest.mark.asyncio
async def test_reconnect_starts_at_cursor_zero(registry, collector):
    registry.on_connect("abc", 1, collector)
    await registry.emit_next("abc")
    await registry.emit_next("abc")
    registry.on_disconnect("abc")

    session = registry.on_connect("abc", 1, collector)

    assert session.cursor == 0


@pytest.mark.asyncio
async def test_shutdown_stops_every_session(registry, collector):
    timers = [registry.on_connect(name, 1, collector).timer for name in ("a", "b", "c")]

    registry.shutdown()

    assert len(registry) == 0
    assert not any(timer.running for timer in timers)


@pytest.mark.asyncio
async def test_timer_drives_emissions(source, clock, collector):
    registry = SessionRegistry(source, 10, clock=clock)
    registry.on_connect("abc", 1, collector)

    await wait_for(lambda: len(collector.readings) >= 3)
    registry.on_disconnect("abc")
    received = len(collector.readings)
    await asyncio.sleep(0.05)

    assert received >= 3
    assert len(collector.readings) == received
    assert [r.value for r in collector.readings[:3]] == [1.0, 2.0, 3.0]
    timestamps = [r.timestamp for r in collector.readings]
    assert timestamps == sorted(set(timestamps))


@pytest.mark.asyncio
async def test_failing_session_does_not_affect_others(source, clock, collector):
    async def broken_sink(reading):
        raise RuntimeError("socket gone")

    registry = SessionRegistry(source, 10, clock=clock)
    broken = registry.on_connect("broken", 1, broken_sink)
    registry.on_connect("healthy", 2, collector)

    await wait_for(lambda: len(collector.readings) >= 3)

    assert [r.value for r in collector.readings[:3]] == [10.0, 20.0, 10.0]
    assert broken.cursor == 0
    assert broken.timer.running
    registry.shutdown()
