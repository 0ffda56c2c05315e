"""Tick Driver — cadence, error isolation and clean shutdown."""

import asyncio

import pytest

from app.services.tick_driver import TickDriver


async def test_ticks_repeat_until_stopped():
    calls = []

    async def tick():
        calls.append(asyncio.get_running_loop().time())

    driver = TickDriver(tick, interval=0.01)
    driver.start()
    await asyncio.sleep(0.06)
    await driver.stop()

    assert len(calls) >= 3
    assert not driver.running
    count = len(calls)
    await asyncio.sleep(0.03)
    assert len(calls) == count


async def test_failing_tick_does_not_end_loop():
    async def tick():
        raise RuntimeError("boom")

    driver = TickDriver(tick, interval=0.01)
    driver.start()
    await asyncio.sleep(0.05)
    assert driver.running
    assert driver.ticks >= 2
    await driver.stop()


async def test_stop_interrupts_long_interval():
    async def tick():
        return None

    driver = TickDriver(tick, interval=30)
    driver.start()
    await asyncio.sleep(0)
    await asyncio.wait_for(driver.stop(), timeout=1)
    assert not driver.running
    assert driver.ticks == 1


async def test_overrun_skips_missed_deadlines():
    durations = [0.1]

    async def tick():
        await asyncio.sleep(durations.pop() if durations else 0)

    driver = TickDriver(tick, interval=0.02)
    driver.start()
    await asyncio.sleep(0.2)
    await driver.stop()
    # one slow tick then the 0.12..0.2 grid; replaying the missed deadlines would add 5 more
    assert driver.ticks <= 8


async def test_start_twice_rejected():
    async def tick():
        return None

    driver = TickDriver(tick, interval=1)
    driver.start()
    with pytest.raises(RuntimeError):
        driver.start()
    await driver.stop()


def test_non_positive_interval_rejected():
    async def tick():
        return None

    with pytest.raises(ValueError):
        TickDriver(tick, interval=0)
