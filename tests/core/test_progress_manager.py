"""
Tests for ProgressManager and ProgressChannel.

Intervals are kept short; assertions leave at least a quarter interval of
slack around every deadline.
"""

import asyncio

import pytest

from src.managers.progress_manager import (
    PROGRESS_COMPLETE,
    PROGRESS_MESSAGES,
    ProgressChannel,
    ProgressManager,
)

INTERVAL = 0.1


@pytest.fixture
def ticks():
    return []


@pytest.fixture
def sender(ticks):
    async def send(tick):
        ticks.append((asyncio.get_running_loop().time(), tick))
    return send


def intermediate(ticks):
    return [tick for _, tick in ticks if 0 < tick.sequence_number < PROGRESS_COMPLETE]


@pytest.mark.asyncio
async def test_n_intervals_produce_n_ticks_plus_terminal(sender, ticks):
    channel = ProgressChannel("generate_video_veo", "tok", sender, interval=INTERVAL)

    await channel.start()
    await asyncio.sleep(INTERVAL * 3.5)
    await channel.stop(success=True)

    assert len(intermediate(ticks)) == 3
    assert ticks[0][1].sequence_number == 0
    assert ticks[-1][1].sequence_number == PROGRESS_COMPLETE
    assert ticks[-1][1].message == "✅ generate_video_veo completed successfully!"


@pytest.mark.asyncio
async def test_no_tick_after_stop(sender, ticks):
    channel = ProgressChannel("op", "tok", sender, interval=INTERVAL)

    await channel.start()
    await asyncio.sleep(INTERVAL * 1.5)
    await channel.stop(success=False)
    stopped_at = asyncio.get_running_loop().time()
    count = len(ticks)

    await asyncio.sleep(INTERVAL * 3)

    assert len(ticks) == count
    assert all(sent_at <= stopped_at for sent_at, _ in ticks)
    assert ticks[-1][1].message == "❌ op failed"
    assert not channel.active


@pytest.mark.asyncio
async def test_stop_is_idempotent(sender, ticks):
    channel = ProgressChannel("op", "tok", sender, interval=INTERVAL)

    await channel.start()
    await channel.stop()
    await channel.stop()

    terminal = [tick for _, tick in ticks if tick.sequence_number == PROGRESS_COMPLETE]
    assert len(terminal) == 1


@pytest.mark.asyncio
async def test_messages_rotate_and_include_status(sender, ticks):
    status = {"text": ""}
    channel = ProgressChannel(
        "op", "tok", sender, interval=INTERVAL,
        status_source=lambda: status["text"],
    )

    await channel.start()
    await asyncio.sleep(INTERVAL * 0.5)
    status["text"] = "Generating image 2/3..."
    await asyncio.sleep(INTERVAL)
    await channel.stop()

    first = intermediate(ticks)[0]
    assert first.message.startswith(PROGRESS_MESSAGES[0].format(name="op"))
    assert first.message.endswith("\n📝 Status: ...Generating image 2/3...")


def test_next_tick_cycles_through_phases():
    channel = ProgressChannel("op", "tok", None)

    messages = [channel.next_tick().message for _ in range(len(PROGRESS_MESSAGES) + 1)]

    assert messages[0] == PROGRESS_MESSAGES[0].format(name="op")
    assert messages[-1] == messages[0]
    assert channel.step == len(PROGRESS_MESSAGES) + 1


def test_status_excerpt_is_truncated():
    channel = ProgressChannel("op", "tok", None, status_source=lambda: "a" * 150 + "END")

    message = channel.next_tick().message

    excerpt = message.split("📝 Status: ...")[1]
    assert len(excerpt) == 100
    assert excerpt.endswith("END")


@pytest.mark.asyncio
async def test_channel_without_token_sends_nothing(sender, ticks):
    channel = ProgressChannel("op", None, sender, interval=INTERVAL)

    await channel.start()
    await asyncio.sleep(INTERVAL * 1.5)
    await channel.stop()

    assert not channel.transmitting
    assert ticks == []


@pytest.mark.asyncio
async def test_sender_failures_are_swallowed():
    attempts = []

    async def failing(tick):
        attempts.append(tick)
        raise RuntimeError("session gone")

    channel = ProgressChannel("op", "tok", failing, interval=INTERVAL)
    await channel.start()
    await asyncio.sleep(INTERVAL * 1.5)
    await channel.stop()

    assert len(attempts) == 3


@pytest.mark.asyncio
async def test_channels_are_independent(sender, ticks):
    manager = ProgressManager(sender=sender, interval=INTERVAL)

    first = await manager.start("first", "a")
    second = await manager.start("second", "b")
    await manager.stop(first)
    await asyncio.sleep(INTERVAL * 1.5)
    await manager.stop(second)

    second_ticks = [tick for _, tick in ticks if tick.token == "b"]
    assert len([t for t in second_ticks if 0 < t.sequence_number < PROGRESS_COMPLETE]) == 1
    assert not manager.is_active("a")
    assert not manager.is_active("b")


@pytest.mark.asyncio
async def test_reused_token_is_detached(sender, ticks):
    manager = ProgressManager(sender=sender, interval=INTERVAL)

    first = await manager.start("first", "tok")
    second = await manager.start("second", "tok")

    assert first.transmitting
    assert not second.transmitting

    await manager.stop(second)
    assert manager.is_active("tok")

    await manager.stop(first)
    assert not manager.is_active("tok")
    assert all("second" not in tick.message for _, tick in ticks)


@pytest.mark.asyncio
async def test_cancelled_initial_tick_releases_token(ticks):
    first_tick_sent = asyncio.Event()
    blocked = True

    async def slow_sender(tick):
        nonlocal blocked
        if blocked:
            blocked = False
            first_tick_sent.set()
            await asyncio.Event().wait()
        ticks.append((asyncio.get_running_loop().time(), tick))

    manager = ProgressManager(sender=slow_sender, interval=INTERVAL)

    starting = asyncio.create_task(manager.start("first", "tok"))
    await first_tick_sent.wait()
    starting.cancel()
    with pytest.raises(asyncio.CancelledError):
        await starting

    assert not manager.is_active("tok")

    channel = await manager.start("second", "tok")
    assert channel.transmitting
    await manager.stop(channel)

    assert [tick.message for _, tick in ticks] == [
        "🎨 Starting second",
        "✅ second completed successfully!",
    ]


@pytest.mark.asyncio
async def test_terminal_tick_never_goes_backwards(sender, ticks):
    channel = ProgressChannel("op", "tok", sender, interval=60.0)
    await channel.start()
    for _ in range(PROGRESS_COMPLETE + 5):
        channel.next_tick()

    await channel.stop()

    terminal = ticks[-1][1]
    assert terminal.sequence_number == PROGRESS_COMPLETE + 6
    assert terminal.total == terminal.sequence_number
