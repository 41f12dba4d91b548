"""
Timeline Evaluator for ChronoCanvas.

Computes, for one element at one instant, whether it is visible and the
value of each animatable property. Every driver (playback clock, scrubbing,
zine scroll) funnels its time value through evaluate().
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Optional

import numpy as np

from ..logging_config import timeline_context
from .interpolation import interpolate_snapshot
from .keyframes import resolve_keyframe
from .models import CanvasElement, EvaluationResult, PropertySnapshot
from .visibility import is_visible

logger = logging.getLogger('timeline')


def _keyframed_properties(element: CanvasElement, time: float) -> Optional[PropertySnapshot]:
    """Properties contributed by keyframes at time, or None without keyframes."""
    span = resolve_keyframe(element.timeline.keyframes, time)

    if span.is_empty:
        return None
    if span.is_between:
        return interpolate_snapshot(
            span.prev.properties,
            span.next.properties,
            span.local_progress,
            span.prev.easing
        )
    if span.prev is not None:
        # Past the last keyframe: hold it
        return span.prev.properties
    # Before the first keyframe: the element already shows it
    return span.next.properties


def evaluate(element: CanvasElement, time: float) -> EvaluationResult:
    """
    Evaluate an element at a timeline position.

    Args:
        element: Canvas element, with or without timeline data
        time: Timeline position in seconds

    Returns:
        EvaluationResult. Hidden elements carry empty properties and must
        not be rendered.
    """
    static = element.static_properties()
    timeline = element.timeline

    if timeline is None:
        return EvaluationResult(visible=True, properties=static)

    if timeline.exit_point is not None and timeline.exit_point <= (timeline.entry_point or 0.0):
        logger.warning(
            f"Empty entry/exit window on {element.id}, evaluating as stored",
            extra=timeline_context(element_id=element.id, position=time)
        )

    if not is_visible(timeline, time):
        return EvaluationResult(visible=False)

    # A persisting element is frozen at its state on the exit point
    query_time = time
    if timeline.exit_point is not None and time > timeline.exit_point:
        query_time = timeline.exit_point

    keyframed = _keyframed_properties(element, query_time)
    if keyframed is None:
        return EvaluationResult(visible=True, properties=static)

    return EvaluationResult(visible=True, properties=keyframed.merged_over(static))


def evaluate_all(elements: Iterable[CanvasElement], time: float) -> Dict[str, EvaluationResult]:
    """Evaluate every element for one render pass, keyed by element id."""
    return {element.id: evaluate(element, time) for element in elements}


@dataclass
class BakedTrack:
    """Element properties sampled over an array of times. NaN where hidden."""
    times: np.ndarray
    visible: np.ndarray
    x: np.ndarray
    y: np.ndarray
    width: np.ndarray
    height: np.ndarray
    rotation: np.ndarray
    opacity: np.ndarray

    def visible_ranges(self) -> list:
        """(start, end) time pairs of contiguous visible samples."""
        ranges = []
        if not len(self.times):
            return ranges
        edges = np.diff(self.visible.astype(np.int8))
        starts = list(np.nonzero(edges == 1)[0] + 1)
        ends = list(np.nonzero(edges == -1)[0])
        if self.visible[0]:
            starts.insert(0, 0)
        if self.visible[-1]:
            ends.append(len(self.times) - 1)
        for start, end in zip(starts, ends):
            ranges.append((float(self.times[start]), float(self.times[end])))
        return ranges


def bake_track(element: CanvasElement, times) -> BakedTrack:
    """
    Sample an element over many times, e.g. for timeline thumbnails.

    Args:
        element: Element to sample
        times: Array-like of timeline positions in seconds

    Returns:
        BakedTrack with one entry per time
    """
    times = np.asarray(times, dtype=np.float64)
    n = len(times)
    visible = np.zeros(n, dtype=bool)
    channels = {name: np.full(n, np.nan) for name in
                ("x", "y", "width", "height", "rotation", "opacity")}

    for i, t in enumerate(times):
        result = evaluate(element, float(t))
        if not result.visible:
            continue
        visible[i] = True
        props = result.properties
        channels["x"][i] = props.position.x
        channels["y"][i] = props.position.y
        channels["width"][i] = props.size.width
        channels["height"][i] = props.size.height
        channels["rotation"][i] = props.rotation
        channels["opacity"][i] = props.opacity

    logger.debug(f"Baked {n} samples for {element.id} ({int(visible.sum())} visible)")
    return BakedTrack(times=times, visible=visible, **channels)
