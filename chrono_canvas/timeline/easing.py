"""
Easing curves for keyframe interpolation.
Each curve maps normalized progress t in [0, 1] to eased progress.
"""

import math
from typing import Callable, Dict, List

EasingFn = Callable[[float], float]

# Overshoot constants shared by the back-style curves
BACK_C1 = 1.70158
BACK_C3 = BACK_C1 + 1

ELASTIC_C4 = (2 * math.pi) / 3

BOUNCE_N1 = 7.5625
BOUNCE_D1 = 2.75


def _ease_linear(t: float) -> float:
    return t


def _ease_standard(t: float) -> float:
    # Symmetric cubic ease-in-out
    if t < 0.5:
        return 4 * t * t * t
    return 1 - math.pow(-2 * t + 2, 3) / 2


def _ease_emphasized(t: float) -> float:
    # Back ease-out, overshoots slightly above 1 before settling
    return 1 + BACK_C3 * math.pow(t - 1, 3) + BACK_C1 * math.pow(t - 1, 2)


def _ease_emphasized_decelerate(t: float) -> float:
    return 1 - (1 - t) * (1 - t)


def _ease_emphasized_accelerate(t: float) -> float:
    return t * t


def _ease_out_elastic(t: float) -> float:
    if t == 0:
        return 0.0
    if t == 1:
        return 1.0
    return math.pow(2, -10 * t) * math.sin((t * 10 - 0.75) * ELASTIC_C4) + 1


def _ease_out_bounce(t: float) -> float:
    if t < 1 / BOUNCE_D1:
        return BOUNCE_N1 * t * t
    if t < 2 / BOUNCE_D1:
        t -= 1.5 / BOUNCE_D1
        return BOUNCE_N1 * t * t + 0.75
    if t < 2.5 / BOUNCE_D1:
        t -= 2.25 / BOUNCE_D1
        return BOUNCE_N1 * t * t + 0.9375
    t -= 2.625 / BOUNCE_D1
    return BOUNCE_N1 * t * t + 0.984375


EASING_FUNCTIONS: Dict[str, EasingFn] = {
    "linear": _ease_linear,
    "standard": _ease_standard,
    "emphasized": _ease_emphasized,
    "emphasized_decelerate": _ease_emphasized_decelerate,
    "emphasized_accelerate": _ease_emphasized_accelerate,
    "ease_out_elastic": _ease_out_elastic,
    "ease_out_bounce": _ease_out_bounce,
}

# Alternate names used by the editor and by older project data
EASING_ALIASES: Dict[str, str] = {
    "ease_in_out_cubic": "standard",
    "easeInOutCubic": "standard",
    "ease_out_back": "emphasized",
    "easeOutBack": "emphasized",
    "ease_out_quad": "emphasized_decelerate",
    "easeOutQuad": "emphasized_decelerate",
    "emphasizedDecelerate": "emphasized_decelerate",
    "emphasizedAccelerate": "emphasized_accelerate",
    "easeOutElastic": "ease_out_elastic",
    "easeOutBounce": "ease_out_bounce",
}

DEFAULT_EASING = "standard"


def get_easing(name: str) -> EasingFn:
    """Look up an easing curve by name, falling back to 'standard'."""
    if not name:
        return EASING_FUNCTIONS[DEFAULT_EASING]
    name = EASING_ALIASES.get(name, name)
    return EASING_FUNCTIONS.get(name, EASING_FUNCTIONS[DEFAULT_EASING])


def list_easings() -> List[str]:
    """List canonical easing names."""
    return list(EASING_FUNCTIONS.keys())
