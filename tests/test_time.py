"""Unit tests for the playback clock."""

import asyncio

import pytest

from playsim.exceptions import PlaybackStateError
from playsim.time import PlaybackClock, PlaybackState


def test_clock_initialization(playback_clock):
    """Test clock initializes idle at the snap."""
    assert playback_clock.state == PlaybackState.IDLE
    assert playback_clock.current_time == pytest.approx(0.0)
    assert playback_clock.time_scale == pytest.approx(1.0)
    assert playback_clock.query_time() is None


def test_invalid_time_scale():
    """Test non-positive time scales are rejected."""
    with pytest.raises(PlaybackStateError):
        PlaybackClock(duration=5.0, time_scale=0.0)

    clock = PlaybackClock(duration=5.0)
    with pytest.raises(PlaybackStateError):
        clock.time_scale = -1.0


def test_advance_ignored_when_idle(playback_clock):
    """Test advancing an idle clock does nothing."""
    assert playback_clock.advance(1.0) == 0.0
    assert playback_clock.query_time() is None


@pytest.mark.asyncio
async def test_clock_start(playback_clock):
    """Test starting the clock."""
    await playback_clock.start()
    assert playback_clock.state == PlaybackState.PLAYING
    assert playback_clock.query_time() is not None
    await playback_clock.stop()


@pytest.mark.asyncio
async def test_clock_pause(playback_clock):
    """Test pausing the clock holds time."""
    await playback_clock.start()
    await asyncio.sleep(0.05)

    await playback_clock.pause()
    assert playback_clock.state == PlaybackState.PAUSED

    time_at_pause = playback_clock.current_time
    assert time_at_pause > 0.0

    await asyncio.sleep(0.05)
    assert playback_clock.current_time == time_at_pause
    await playback_clock.stop()


@pytest.mark.asyncio
async def test_clock_resume(playback_clock):
    """Test resuming the clock."""
    await playback_clock.start()
    await asyncio.sleep(0.05)

    await playback_clock.pause()
    paused_time = playback_clock.current_time

    await playback_clock.resume()
    assert playback_clock.state == PlaybackState.PLAYING

    await asyncio.sleep(0.05)
    assert playback_clock.current_time > paused_time
    await playback_clock.stop()


@pytest.mark.asyncio
async def test_toggle_pause(playback_clock):
    """Test toggling between playing and paused."""
    await playback_clock.toggle_pause()
    assert playback_clock.state == PlaybackState.IDLE

    await playback_clock.start()
    await playback_clock.toggle_pause()
    assert playback_clock.state == PlaybackState.PAUSED
    await playback_clock.toggle_pause()
    assert playback_clock.state == PlaybackState.PLAYING
    await playback_clock.stop()


@pytest.mark.asyncio
async def test_pause_idle_clock_raises(playback_clock):
    """Test pausing or resuming an idle clock is rejected."""
    with pytest.raises(PlaybackStateError):
        await playback_clock.pause()
    with pytest.raises(PlaybackStateError):
        await playback_clock.resume()


@pytest.mark.asyncio
async def test_clock_stop(playback_clock):
    """Test stopping rewinds to the snap."""
    await playback_clock.start()
    await asyncio.sleep(0.05)

    await playback_clock.stop()
    assert playback_clock.state == PlaybackState.IDLE
    assert playback_clock.current_time == 0.0
    assert playback_clock.query_time() is None


@pytest.mark.asyncio
async def test_playback_stops_at_duration():
    """Test playback ends at the play duration and holds the final frame."""
    clock = PlaybackClock(duration=0.05, frame_interval=0.01)
    await clock.start()
    await asyncio.sleep(0.2)

    assert clock.state == PlaybackState.IDLE
    assert clock.current_time == pytest.approx(0.05)
    assert clock.query_time() == pytest.approx(0.05)


@pytest.mark.asyncio
async def test_playback_stops_at_turnover():
    """Test a turnover ends playback before the play duration."""
    clock = PlaybackClock(duration=5.0, turnover_time=1.0)
    await clock.start()
    await clock.pause()
    await clock.seek(0.9)
    await clock.resume()

    clock.advance(0.5)

    assert clock.state == PlaybackState.IDLE
    assert clock.current_time == pytest.approx(1.0)
    await clock.stop()


@pytest.mark.asyncio
async def test_seek_clamps(playback_clock):
    """Test seeking is clamped to the playable range."""
    await playback_clock.seek(-3.0)
    assert playback_clock.current_time == 0.0
    await playback_clock.seek(50.0)
    assert playback_clock.current_time == pytest.approx(5.0)


@pytest.mark.asyncio
async def test_slow_motion():
    """Test the time scale slows playback."""
    clock = PlaybackClock(duration=10.0, time_scale=0.5)
    await clock.start()
    await clock.pause()
    await clock.seek(0.0)
    await clock.resume()

    clock.advance(1.0)

    assert clock.current_time == pytest.approx(0.5, abs=0.05)
    await clock.stop()
