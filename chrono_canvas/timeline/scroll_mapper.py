"""
Scroll-to-time mapping for the zine view.

In zine mode the scroll offset of the page replaces the playback clock as
the source of the timeline position.
"""

import logging
from typing import Optional

from ..logging_config import timeline_context
from .timeline_state import ActiveDriver, TimelineState

logger = logging.getLogger('scroll_mapper')

DEFAULT_PIXELS_PER_SECOND = 100.0


def map_scroll_to_time(scroll_pixels: float,
                       pixels_per_second: float = DEFAULT_PIXELS_PER_SECOND) -> float:
    """Convert a scroll offset in pixels to a timeline position in seconds."""
    return scroll_pixels / pixels_per_second


def scroll_extent(duration: float,
                  pixels_per_second: float = DEFAULT_PIXELS_PER_SECOND) -> float:
    """Total scroll height needed to reach the end of the timeline."""
    return duration * pixels_per_second


def parallax_offset(scroll_pixels: float, speed_factor: float) -> float:
    """
    Vertical parallax offset for a layer.

    Args:
        scroll_pixels: Current scroll offset
        speed_factor: 0 (no movement) to 1 (full movement), clamped

    Returns:
        Offset in pixels
    """
    factor = max(0.0, min(1.0, speed_factor))
    return -scroll_pixels * factor * 0.5


def section_index(scroll_pixels: float, section_seconds: float = 10.0,
                  pixels_per_second: float = DEFAULT_PIXELS_PER_SECOND) -> int:
    """Index of the zine section a scroll offset falls into."""
    section_pixels = section_seconds * pixels_per_second
    if section_pixels <= 0:
        return 0
    return max(0, int(scroll_pixels // section_pixels))


class ScrollTimeMapper:
    """
    Feeds zine scroll events into the shared timeline state.

    Scroll only moves the position while SCROLL is the active driver.
    Updates happen synchronously inside the scroll handler.
    """

    def __init__(self, state: TimelineState, pixels_per_second: Optional[float] = None):
        self.state = state
        self.pixels_per_second = pixels_per_second or state.config.pixels_per_second
        self.scroll_position: float = 0.0

    def activate(self):
        """Make scroll the active driver (entering zine mode)."""
        self.state.set_active_driver(ActiveDriver.SCROLL)
        logger.info(
            f"Scroll driving timeline at {self.pixels_per_second:.0f}px/s",
            extra=timeline_context(driver=ActiveDriver.SCROLL)
        )
        self.state.set_position(map_scroll_to_time(self.scroll_position, self.pixels_per_second))

    def on_scroll(self, scroll_pixels: float) -> Optional[float]:
        """
        Handle a scroll event.

        Returns:
            The new timeline position, or None when scroll is not driving
        """
        self.scroll_position = max(0.0, scroll_pixels)
        if self.state.active_driver != ActiveDriver.SCROLL:
            return None

        return self.state.set_position(map_scroll_to_time(self.scroll_position, self.pixels_per_second))

    @property
    def extent(self) -> float:
        """Scroll height for the current timeline duration."""
        return scroll_extent(self.state.duration, self.pixels_per_second)

    @property
    def current_section(self) -> int:
        return section_index(self.scroll_position, pixels_per_second=self.pixels_per_second)
