"""
Keyframe lookup and editing.

resolve_keyframe() finds the keyframes bounding a query time. The editing
helpers keep a keyframe list time-sorted and time-unique.
"""

import bisect
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .models import Keyframe

logger = logging.getLogger('keyframes')

KEYFRAME_EPSILON = 0.1  # seconds; keyframes closer than this are the same keyframe


@dataclass(frozen=True)
class KeyframeSpan:
    """
    Keyframes bounding a query time.

    prev is the keyframe with the greatest time <= query, next the one with
    the smallest time > query. local_progress is only meaningful when both
    are present.
    """
    prev: Optional[Keyframe] = None
    next: Optional[Keyframe] = None
    local_progress: float = 0.0

    @property
    def is_empty(self) -> bool:
        return self.prev is None and self.next is None

    @property
    def is_between(self) -> bool:
        return self.prev is not None and self.next is not None


def _ensure_sorted(keyframes: Sequence[Keyframe]) -> Sequence[Keyframe]:
    for a, b in zip(keyframes, keyframes[1:]):
        if a.time > b.time:
            logger.warning("Keyframes out of order, sorting before lookup")
            return sorted(keyframes, key=lambda kf: kf.time)
    return keyframes


def resolve_keyframe(keyframes: Sequence[Keyframe], time: float) -> KeyframeSpan:
    """
    Find the keyframes surrounding a time.

    Args:
        keyframes: Keyframes of one element, expected in ascending time order
        time: Query time in seconds

    Returns:
        KeyframeSpan; empty when there are no keyframes
    """
    if not keyframes:
        return KeyframeSpan()

    ordered = _ensure_sorted(keyframes)
    times = [kf.time for kf in ordered]

    # bisect_right puts every keyframe with time <= query to the left
    idx = bisect.bisect_right(times, time)
    prev = ordered[idx - 1] if idx > 0 else None
    nxt = ordered[idx] if idx < len(ordered) else None

    if prev is None or nxt is None:
        return KeyframeSpan(prev=prev, next=nxt)

    span = nxt.time - prev.time
    if span <= 0:
        # Duplicate times slipped past the uniqueness rule; snap to next
        return KeyframeSpan(prev=prev, next=nxt, local_progress=1.0)

    return KeyframeSpan(prev=prev, next=nxt, local_progress=(time - prev.time) / span)


def upsert_keyframe(keyframes: Sequence[Keyframe], keyframe: Keyframe,
                    epsilon: float = KEYFRAME_EPSILON) -> List[Keyframe]:
    """
    Insert a keyframe, replacing one within epsilon seconds of it.

    Returns:
        New time-sorted keyframe list
    """
    result = []
    replaced = False
    for existing in keyframes:
        if not replaced and abs(existing.time - keyframe.time) < epsilon:
            logger.debug(f"Replacing keyframe at {existing.time:.2f}s with {keyframe.time:.2f}s")
            result.append(keyframe)
            replaced = True
        else:
            result.append(existing)

    if not replaced:
        result.append(keyframe)

    result.sort(key=lambda kf: kf.time)
    return result


def remove_keyframe(keyframes: Sequence[Keyframe], time: float,
                    epsilon: float = KEYFRAME_EPSILON) -> List[Keyframe]:
    """Return the keyframes without the one within epsilon seconds of time."""
    for i, keyframe in enumerate(keyframes):
        if abs(keyframe.time - time) < epsilon:
            return list(keyframes[:i]) + list(keyframes[i + 1:])
    return list(keyframes)


def keyframe_marker_id(element_id: str, time: float) -> str:
    """Stable timeline marker id for an element's keyframe."""
    return f"keyframe-{element_id}-{time:.3f}"
