"""
Shared timeline state for ChronoCanvas.

Owns the current position, play flag, speed, derived duration and markers.
The playback clock, the zine scroll handler and manual scrubbing all write
the position through set_position(); only the active driver advances it.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional

from ..config import TimelineConfig
from ..logging_config import timeline_context
from .keyframes import keyframe_marker_id
from .models import (
    CanvasElement,
    Keyframe,
    PropertySnapshot,
    create_timeline_data,
)
from .visibility import PhaseKind, TransitionPhase, transition_phase

logger = logging.getLogger('timeline')


class ActiveDriver(Enum):
    CLOCK = "clock"     # Playback clock advancing every frame
    SCROLL = "scroll"   # Zine view scroll offset
    MANUAL = "manual"   # Direct scrubbing in the editor


@dataclass
class TimelineMarker:
    """A named position on the timeline."""
    id: str
    position: float
    name: str
    color: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "position": self.position,
            "name": self.name,
            "color": self.color
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'TimelineMarker':
        return cls(
            id=data["id"],
            position=float(data.get("position", 0.0)),
            name=data.get("name", ""),
            color=data.get("color")
        )


def compute_duration(elements: Iterable[CanvasElement], min_duration: float = 60.0,
                     buffer: float = 10.0) -> float:
    """
    Timeline length needed to show every exit and keyframe.

    max(min_duration, exit + buffer, last keyframe + buffer) over all elements.
    """
    duration = min_duration
    for element in elements:
        timeline = element.timeline
        if timeline is None:
            continue
        if timeline.exit_point is not None:
            duration = max(duration, timeline.exit_point + buffer)
        last_keyframe = timeline.last_keyframe_time
        if last_keyframe is not None:
            duration = max(duration, last_keyframe + buffer)
    return duration


class TimelineState:
    """
    Single owner of playback position and timeline-wide settings.

    Invariant: 0 <= current_position <= duration after every write.
    """

    def __init__(self, config: Optional[TimelineConfig] = None):
        self.config = config or TimelineConfig()

        self._position: float = 0.0
        self._playing: bool = False
        self._speed: float = 1.0
        self._duration: float = self.config.min_duration
        self._driver: ActiveDriver = ActiveDriver.MANUAL

        self.markers: List[TimelineMarker] = []

        # Callbacks
        self._on_position_change: Optional[Callable[[float], None]] = None
        self._on_driver_change: Optional[Callable[[ActiveDriver], None]] = None
        self._playing_listeners: List[Callable[[bool], None]] = []

    def set_callbacks(
        self,
        on_position_change: Optional[Callable[[float], None]] = None,
        on_driver_change: Optional[Callable[[ActiveDriver], None]] = None
    ):
        """Set callback functions for state changes."""
        self._on_position_change = on_position_change
        self._on_driver_change = on_driver_change

    def subscribe_playing(self, listener: Callable[[bool], None]):
        """Register a listener for play/pause changes."""
        if listener not in self._playing_listeners:
            self._playing_listeners.append(listener)

    def unsubscribe_playing(self, listener: Callable[[bool], None]):
        if listener in self._playing_listeners:
            self._playing_listeners.remove(listener)

    # === Properties ===

    @property
    def current_position(self) -> float:
        return self._position

    @property
    def is_playing(self) -> bool:
        return self._playing

    @property
    def speed(self) -> float:
        return self._speed

    @property
    def duration(self) -> float:
        return self._duration

    @property
    def active_driver(self) -> ActiveDriver:
        return self._driver

    # === Setters ===

    def set_position(self, position: float) -> float:
        """Set the timeline position, clamped to [0, duration]."""
        self._position = max(0.0, min(position, self._duration))
        if self._on_position_change:
            self._on_position_change(self._position)
        return self._position

    def set_playing(self, playing: bool):
        """Start or stop the play flag. Only the clock driver may play."""
        if playing and self._driver != ActiveDriver.CLOCK:
            self.set_active_driver(ActiveDriver.CLOCK)

        if playing == self._playing:
            return

        self._playing = playing
        logger.info(
            f"{'Playing' if playing else 'Paused'} at {self._position:.2f}s",
            extra=timeline_context(position=self._position, driver=self._driver)
        )
        for listener in list(self._playing_listeners):
            listener(playing)

    def set_speed(self, speed: float) -> float:
        """Set the playback multiplier; non-positive speeds clamp to min_speed."""
        if speed <= 0:
            logger.warning(f"Unsupported playback speed {speed}, using {self.config.min_speed}")
        self._speed = max(speed, self.config.min_speed)
        return self._speed

    def set_active_driver(self, driver: ActiveDriver):
        """Switch which input drives the position. Leaving CLOCK pauses playback."""
        if driver == self._driver:
            return

        previous = self._driver
        self._driver = driver
        logger.info(
            f"Active driver: {previous.value} -> {driver.value}",
            extra=timeline_context(position=self._position, driver=driver)
        )

        if driver != ActiveDriver.CLOCK and self._playing:
            self.set_playing(False)

        if self._on_driver_change:
            self._on_driver_change(driver)

    def recompute_duration(self, elements: Iterable[CanvasElement]) -> float:
        """
        Recompute the derived duration from element timeline data.

        Call when timeline data changes, not on every position update.
        """
        duration = compute_duration(
            elements,
            min_duration=self.config.min_duration,
            buffer=self.config.duration_buffer
        )
        if duration != self._duration:
            logger.debug(f"Duration {self._duration:.1f}s -> {duration:.1f}s")
        self._duration = duration

        if self._position > duration:
            self.set_position(duration)
        return duration

    # === Markers ===

    def add_marker(self, marker: TimelineMarker):
        """Add a marker, replacing one with the same id."""
        self.markers = [m for m in self.markers if m.id != marker.id]
        self.markers.append(marker)
        self.markers.sort(key=lambda m: m.position)

    def remove_marker(self, marker_id: str) -> bool:
        """Remove a marker by ID."""
        for i, marker in enumerate(self.markers):
            if marker.id == marker_id:
                self.markers.pop(i)
                return True
        return False

    def seek_to_marker(self, marker_id: str) -> bool:
        """Move the position to a marker."""
        for marker in self.markers:
            if marker.id == marker_id:
                self.set_position(marker.position)
                return True
        logger.warning(f"Marker not found: {marker_id}")
        return False

    # === Element editing ===

    def add_keyframe(
        self,
        element: CanvasElement,
        properties: Optional[PropertySnapshot] = None,
        easing: str = "linear",
        elements: Optional[Iterable[CanvasElement]] = None
    ) -> Keyframe:
        """
        Record a keyframe for an element at the current position.

        Creates the element's timeline data on first use. Without explicit
        properties the element's current static values are captured.

        Args:
            element: Element to keyframe
            properties: Snapshot to store
            easing: Easing curve for the segment starting at this keyframe
            elements: Full element collection, for recomputing the duration
        """
        if element.timeline is None:
            element.timeline = create_timeline_data(
                self._position, exit_span=self.config.default_exit_span
            )
            logger.info(
                f"Created timeline data for {element.id} at {self._position:.2f}s",
                extra=timeline_context(element_id=element.id, position=self._position)
            )

        replaced = element.timeline.keyframe_at(self._position, epsilon=self.config.keyframe_epsilon)
        if replaced is not None:
            self.remove_marker(keyframe_marker_id(element.id, replaced.time))

        keyframe = Keyframe(
            time=self._position,
            properties=properties if properties is not None else element.static_properties(),
            easing=easing
        )
        element.timeline.add_keyframe(keyframe, epsilon=self.config.keyframe_epsilon)

        self.add_marker(TimelineMarker(
            id=keyframe_marker_id(element.id, keyframe.time),
            position=keyframe.time,
            name=f"{element.kind.value.capitalize()} Keyframe",
            color="#F26D5B"
        ))

        self._refresh_duration(element, elements)
        return keyframe

    def remove_keyframe(
        self,
        element: CanvasElement,
        time: float,
        elements: Optional[Iterable[CanvasElement]] = None
    ) -> bool:
        """Remove an element's keyframe near time, with its marker."""
        if element.timeline is None:
            return False

        existing = element.timeline.keyframe_at(time, epsilon=self.config.keyframe_epsilon)
        if existing is None:
            return False

        element.timeline.remove_keyframe(existing.time, epsilon=self.config.keyframe_epsilon)
        self.remove_marker(keyframe_marker_id(element.id, existing.time))
        self._refresh_duration(element, elements)
        return True

    def set_element_window(
        self,
        element: CanvasElement,
        entry_point: Optional[float],
        exit_point: Optional[float],
        persist: Optional[bool] = None,
        elements: Optional[Iterable[CanvasElement]] = None
    ):
        """
        Edit an element's entry/exit window.

        Raises:
            InvalidTimelineError: If exit_point <= entry_point
        """
        if element.timeline is None:
            element.timeline = create_timeline_data(
                self._position, exit_span=self.config.default_exit_span
            )
        element.timeline.set_window(entry_point, exit_point)
        if persist is not None:
            element.timeline.persist = persist
        self._refresh_duration(element, elements)

    def transition_phase(self, element: CanvasElement,
                         time: Optional[float] = None) -> TransitionPhase:
        """
        Entry/exit animation phase of an element, using the configured
        animation lengths. Defaults to the current position.
        """
        if time is None:
            time = self._position
        if element.timeline is None:
            return TransitionPhase(PhaseKind.STEADY, 1.0)
        return transition_phase(
            element.timeline,
            time,
            entry_duration=self.config.entry_duration,
            exit_duration=self.config.exit_duration
        )

    def _refresh_duration(self, element: CanvasElement,
                          elements: Optional[Iterable[CanvasElement]]):
        if elements is not None:
            self.recompute_duration(elements)
            return
        # Without the full collection the duration can only grow
        grown = compute_duration(
            [element],
            min_duration=self._duration,
            buffer=self.config.duration_buffer
        )
        self._duration = grown

    def get_status(self) -> Dict[str, Any]:
        """Get current timeline status for the UI."""
        return {
            "position": self._position,
            "is_playing": self._playing,
            "speed": self._speed,
            "duration": self._duration,
            "driver": self._driver.value,
            "markers": [m.to_dict() for m in self.markers]
        }
