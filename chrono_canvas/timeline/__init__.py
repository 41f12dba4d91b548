"""
Timeline module for ChronoCanvas.
Provides keyframe evaluation, visibility rules, playback and scroll drivers.
"""

from .easing import EASING_FUNCTIONS, get_easing, list_easings
from .interpolation import interpolate, interpolate_snapshot
from .keyframes import KeyframeSpan, resolve_keyframe, upsert_keyframe, remove_keyframe
from .visibility import is_visible, transition_phase, PhaseKind, TransitionPhase
from .evaluator import evaluate, evaluate_all, bake_track, BakedTrack
from .playback_clock import PlaybackClock, ClockState
from .scroll_mapper import ScrollTimeMapper, map_scroll_to_time, parallax_offset
from .timeline_state import TimelineState, TimelineMarker, ActiveDriver, compute_duration
from .models import (
    CanvasElement,
    ElementKind,
    EvaluationResult,
    ImageElement,
    InvalidTimelineError,
    Keyframe,
    MediaElement,
    Point,
    PropertySnapshot,
    ShapeElement,
    Size,
    StickerElement,
    TextElement,
    TimelineData,
    create_timeline_data,
    element_from_dict,
)

__all__ = [
    'EASING_FUNCTIONS',
    'get_easing',
    'list_easings',
    'interpolate',
    'interpolate_snapshot',
    'KeyframeSpan',
    'resolve_keyframe',
    'upsert_keyframe',
    'remove_keyframe',
    'is_visible',
    'transition_phase',
    'PhaseKind',
    'TransitionPhase',
    'evaluate',
    'evaluate_all',
    'bake_track',
    'BakedTrack',
    'PlaybackClock',
    'ClockState',
    'ScrollTimeMapper',
    'map_scroll_to_time',
    'parallax_offset',
    'TimelineState',
    'TimelineMarker',
    'ActiveDriver',
    'compute_duration',
    'CanvasElement',
    'ElementKind',
    'EvaluationResult',
    'ImageElement',
    'InvalidTimelineError',
    'Keyframe',
    'MediaElement',
    'Point',
    'PropertySnapshot',
    'ShapeElement',
    'Size',
    'StickerElement',
    'TextElement',
    'TimelineData',
    'create_timeline_data',
    'element_from_dict',
]
