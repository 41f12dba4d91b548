"""
Playback Clock for ChronoCanvas.
Advances the shared timeline position from wall-clock time while playing.
"""

import asyncio
import time
import logging
from enum import Enum
from typing import Callable, Optional

from ..logging_config import timeline_context
from .timeline_state import ActiveDriver, TimelineState

logger = logging.getLogger('playback_clock')


class ClockState(Enum):
    STOPPED = "stopped"
    RUNNING = "running"


class PlaybackClock:
    """
    Frame-driven time source for timeline playback.

    While running, each tick advances the position by elapsed wall time
    times speed and wraps to the start at the duration. Either bind an
    asyncio loop so the clock schedules its own ticks, or call tick()
    every frame.

    The clock reschedules only on play/pause changes. Speed, duration and
    position are read from the shared state at tick time, and the previous
    tick time lives on the clock itself, so writing the position never
    re-enters the scheduler.
    """

    def __init__(self, state: TimelineState, loop: Optional[asyncio.AbstractEventLoop] = None,
                 frame_interval: Optional[float] = None):
        self.state = state
        self.frame_interval = frame_interval or state.config.frame_interval
        self._loop = loop

        self._last_tick_time: float = time.time()
        self._handle: Optional[asyncio.TimerHandle] = None
        self._closed = False

        # Callbacks
        self._on_tick: Optional[Callable[[float], None]] = None
        self._on_state_change: Optional[Callable[[ClockState], None]] = None

        state.subscribe_playing(self._on_playing_changed)

    def set_callbacks(
        self,
        on_tick: Optional[Callable[[float], None]] = None,
        on_state_change: Optional[Callable[[ClockState], None]] = None
    ):
        """Set callback functions for clock events."""
        self._on_tick = on_tick
        self._on_state_change = on_state_change

    @property
    def clock_state(self) -> ClockState:
        return ClockState.RUNNING if self.state.is_playing else ClockState.STOPPED

    @property
    def position(self) -> float:
        return self.state.current_position

    @property
    def is_scheduled(self) -> bool:
        return self._handle is not None

    def start(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        """Bind an event loop for self-scheduled ticks and start playback."""
        if loop is not None:
            self._loop = loop
        if self._closed or not self.state.is_playing:
            return self.play()
        # Already playing, possibly without a loop until now
        if self._handle is None:
            self._last_tick_time = time.time()
            self._schedule_next()
        return True

    def play(self):
        """Start or resume playback."""
        if self._closed:
            logger.warning("Clock is closed")
            return False
        self.state.set_playing(True)
        return True

    def pause(self):
        """Pause playback, cancelling the pending tick."""
        self.state.set_playing(False)

    def toggle_playback(self):
        """Switch between running and stopped."""
        if self.state.is_playing:
            self.pause()
        else:
            self.play()

    def set_position(self, position: float) -> float:
        """Scrub to a position without changing play state."""
        return self.state.set_position(position)

    def set_playback_speed(self, speed: float) -> float:
        """Change the speed multiplier; applies from the next tick."""
        return self.state.set_speed(speed)

    def tick(self, now: Optional[float] = None) -> float:
        """
        Advance the position by the wall time since the previous tick.

        A long gap (missed frames, backgrounded process) becomes one jump,
        wrapped into the timeline.

        Args:
            now: Current wall time in seconds, defaults to time.time()

        Returns:
            The position after the tick
        """
        if not self.state.is_playing or self.state.active_driver != ActiveDriver.CLOCK:
            return self.state.current_position

        if now is None:
            now = time.time()
        elapsed = max(0.0, now - self._last_tick_time)
        self._last_tick_time = now

        duration = self.state.duration
        position = self.state.current_position + elapsed * self.state.speed
        if duration > 0 and position >= duration:
            position = position % duration

        position = self.state.set_position(position)
        logger.debug(f"Tick: +{elapsed:.3f}s -> {position:.3f}s")

        if self._on_tick:
            try:
                self._on_tick(position)
            except Exception as e:
                logger.error(f"Error in tick callback: {e}")

        return position

    def close(self):
        """Stop playback and detach from the shared state."""
        self.pause()
        self._cancel_scheduled()
        self.state.unsubscribe_playing(self._on_playing_changed)
        self._closed = True

    # === Private Methods ===

    def _on_playing_changed(self, playing: bool):
        if playing:
            self._last_tick_time = time.time()
            self._schedule_next()
        else:
            self._cancel_scheduled()

        if self._on_state_change:
            self._on_state_change(self.clock_state)

    def _resolve_loop(self) -> Optional[asyncio.AbstractEventLoop]:
        if self._loop is not None:
            return self._loop
        try:
            return asyncio.get_running_loop()
        except RuntimeError:
            return None

    def _schedule_next(self):
        if self._handle is not None:
            return

        loop = self._resolve_loop()
        if loop is None:
            logger.debug("No event loop bound, expecting external tick() calls")
            return

        self._handle = loop.call_later(self.frame_interval, self._on_frame)

    def _cancel_scheduled(self):
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _on_frame(self):
        self._handle = None
        if not self.state.is_playing:
            return
        try:
            self.tick()
        except Exception as e:
            logger.error(
                f"Error advancing timeline: {e}",
                extra=timeline_context(position=self.state.current_position, driver=ActiveDriver.CLOCK)
            )
        if self.state.is_playing:
            self._schedule_next()
