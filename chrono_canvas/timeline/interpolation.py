"""
Value interpolation between keyframes.
"""

from .easing import DEFAULT_EASING, get_easing
from .models import Point, PropertySnapshot, Size


def interpolate(from_value: float, to_value: float, progress: float,
                easing: str = DEFAULT_EASING) -> float:
    """
    Interpolate between two values.

    Progress is clamped to [0, 1] before easing. The easing curve itself may
    overshoot (back, elastic), which is kept.

    Args:
        from_value: Starting value
        to_value: Ending value
        progress: Progress between 0 and 1
        easing: Easing curve name, 'standard' if unknown

    Returns:
        Interpolated value
    """
    clamped = max(0.0, min(1.0, progress))
    eased = get_easing(easing)(clamped)
    return from_value + (to_value - from_value) * eased


def interpolate_point(a: Point, b: Point, progress: float,
                      easing: str = DEFAULT_EASING) -> Point:
    return Point(
        x=interpolate(a.x, b.x, progress, easing),
        y=interpolate(a.y, b.y, progress, easing)
    )


def interpolate_size(a: Size, b: Size, progress: float,
                     easing: str = DEFAULT_EASING) -> Size:
    return Size(
        width=interpolate(a.width, b.width, progress, easing),
        height=interpolate(a.height, b.height, progress, easing)
    )


def _blend(a, b, progress: float, easing: str, fn):
    # Fields present on only one side pass through unchanged
    if a is None:
        return b
    if b is None:
        return a
    return fn(a, b, progress, easing)


def interpolate_snapshot(prev: PropertySnapshot, next: PropertySnapshot,
                         progress: float, easing: str = DEFAULT_EASING,
                         ) -> PropertySnapshot:
    """Interpolate two property snapshots field by field."""
    return PropertySnapshot(
        position=_blend(prev.position, next.position, progress, easing, interpolate_point),
        size=_blend(prev.size, next.size, progress, easing, interpolate_size),
        rotation=_blend(prev.rotation, next.rotation, progress, easing, interpolate),
        opacity=_blend(prev.opacity, next.opacity, progress, easing, interpolate),
    )
