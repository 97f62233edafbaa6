# playsim/time.py

"""Host-side playback clock.

The clock only advances a number. Frames ask the engine for positions at
``query_time()``; nothing in the engine holds a timer.
"""

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .config import config
from .exceptions import PlaybackStateError
from .logging import get_logger

logger = get_logger(__name__)


class PlaybackState(str, Enum):
    """Enumeration for playback states."""

    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"


@dataclass
class PlaybackTime:
    """Current playback position."""

    current_time: float  # Play seconds since the snap
    time_scale: float  # Multiplier (1.0 = real-time, 0.5 = slow motion)


class PlaybackClock:
    """Advances play time for animation, stopping at the end of the play.

    Playback stops (back to IDLE, time held) once it reaches the turnover
    time of a throw into space or the play duration, whichever comes first.
    """

    def __init__(
        self,
        duration: float = 0.0,
        turnover_time: Optional[float] = None,
        time_scale: Optional[float] = None,
        frame_interval: Optional[float] = None,
    ):
        scale = config.default_time_scale if time_scale is None else time_scale
        if scale <= 0:
            raise PlaybackStateError("Time scale must be positive")
        self.duration = max(0.0, duration)
        self.turnover_time = turnover_time
        self.frame_interval = frame_interval or config.playback_frame_interval
        self._time = PlaybackTime(current_time=0.0, time_scale=scale)
        self._state = PlaybackState.IDLE
        self._last_update: Optional[float] = None  # asyncio loop time
        self._update_task: Optional[asyncio.Task] = None

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def current_time(self) -> float:
        return self._time.current_time

    @property
    def time_scale(self) -> float:
        return self._time.time_scale

    @time_scale.setter
    def time_scale(self, value: float) -> None:
        if value <= 0:
            raise PlaybackStateError("Time scale must be positive")
        self._time.time_scale = value

    @property
    def is_active(self) -> bool:
        return self._state != PlaybackState.IDLE

    def query_time(self) -> Optional[float]:
        """Time to pass to a positions query, or None when not animating."""
        if self._state == PlaybackState.IDLE and self._time.current_time == 0.0:
            return None
        return self._time.current_time

    def _stop_time(self) -> Optional[float]:
        candidates = [t for t in (self.turnover_time,) if t is not None]
        if self.duration > 0:
            candidates.append(self.duration)
        return min(candidates) if candidates else None

    def advance(self, delta: float) -> float:
        """Advance playback by ``delta`` real seconds.

        Args:
            delta: Elapsed wall-clock seconds since the last frame

        Returns:
            Current play time after the update
        """
        if self._state != PlaybackState.PLAYING:
            return self._time.current_time

        next_time = self._time.current_time + max(0.0, delta) * self._time.time_scale
        stop_at = self._stop_time()
        if stop_at is not None and next_time >= stop_at:
            self._time.current_time = stop_at
            self._state = PlaybackState.IDLE
            logger.info("playback.finished", time=stop_at, turnover=stop_at == self.turnover_time)
            return stop_at

        self._time.current_time = next_time
        return next_time

    async def start(self) -> None:
        """Start playback from the snap."""
        await self._cancel_loop()
        self._time.current_time = 0.0
        self._state = PlaybackState.PLAYING
        logger.info("playback.started", duration=self.duration, time_scale=self.time_scale)
        self._launch_loop()
        await asyncio.sleep(0)  # Let the frame loop begin

    async def pause(self) -> None:
        """Pause playback, holding the current time."""
        if self._state == PlaybackState.IDLE:
            raise PlaybackStateError("Cannot pause: playback is not running")
        if self._state == PlaybackState.PAUSED:
            return
        self._state = PlaybackState.PAUSED
        await self._cancel_loop()
        logger.info("playback.paused", time=self._time.current_time)

    async def resume(self) -> None:
        """Resume playback from a pause."""
        if self._state == PlaybackState.IDLE:
            raise PlaybackStateError("Cannot resume: playback is not running")
        if self._state == PlaybackState.PLAYING:
            return
        self._state = PlaybackState.PLAYING
        logger.info("playback.resumed", time=self._time.current_time)
        self._launch_loop()
        await asyncio.sleep(0)

    async def toggle_pause(self) -> None:
        """Pause when playing, resume when paused, ignore when idle."""
        if self._state == PlaybackState.PLAYING:
            await self.pause()
        elif self._state == PlaybackState.PAUSED:
            await self.resume()

    async def stop(self) -> None:
        """Stop playback and rewind to the snap."""
        await self._cancel_loop()
        self._state = PlaybackState.IDLE
        self._time.current_time = 0.0
        logger.info("playback.stopped")

    async def seek(self, target_time: float) -> None:
        """Jump to a play time, clamped to the playable range."""
        stop_at = self._stop_time()
        target = max(0.0, target_time)
        if stop_at is not None:
            target = min(target, stop_at)
        self._time.current_time = target
        self._last_update = asyncio.get_running_loop().time()

    def _launch_loop(self) -> None:
        self._last_update = asyncio.get_running_loop().time()
        self._update_task = asyncio.create_task(self._update_loop())

    async def _cancel_loop(self) -> None:
        task, self._update_task = self._update_task, None
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _update_loop(self) -> None:
        """Internal loop that advances play time once per frame."""
        loop = asyncio.get_running_loop()
        while self._state == PlaybackState.PLAYING:
            await asyncio.sleep(self.frame_interval)
            now = loop.time()
            if self._last_update is not None:
                self.advance(now - self._last_update)
            self._last_update = now
