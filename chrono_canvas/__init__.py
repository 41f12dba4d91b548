"""
ChronoCanvas
Timeline evaluation engine for the canvas/timeline editor.
"""

from .config import TimelineConfig, load_config
from .timeline import TimelineState, PlaybackClock, ScrollTimeMapper, evaluate

__all__ = [
    'TimelineConfig',
    'load_config',
    'TimelineState',
    'PlaybackClock',
    'ScrollTimeMapper',
    'evaluate',
]
