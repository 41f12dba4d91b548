"""
Entry/exit visibility rules for timeline elements.
"""

from dataclasses import dataclass
from enum import Enum

from .models import TimelineData


class PhaseKind(Enum):
    HIDDEN = "hidden"
    ENTERING = "entering"
    STEADY = "steady"
    EXITING = "exiting"


@dataclass(frozen=True)
class TransitionPhase:
    """Where an element is in its entry/exit animation."""
    kind: PhaseKind
    progress: float = 1.0  # 0-1 within ENTERING/EXITING


def is_visible(timeline: TimelineData, time: float) -> bool:
    """
    Decide whether an element exists at a time.

    A missing entry point counts as 0. persist keeps the element visible
    after its exit point. A window with exit <= entry is evaluated as-is.
    """
    entry = timeline.entry_point if timeline.entry_point is not None else 0.0
    exit_point = timeline.exit_point

    after_entry = time >= entry
    before_exit = exit_point is None or time <= exit_point or timeline.persist
    return after_entry and before_exit


def transition_phase(timeline: TimelineData, time: float,
                     entry_duration: float = 0.4,
                     exit_duration: float = 0.35) -> TransitionPhase:
    """
    Classify a visible element into its entry, steady or exit phase.

    Entry takes precedence when the two animation windows overlap. A
    persisting element past its exit point is STEADY (frozen).
    """
    if not is_visible(timeline, time):
        return TransitionPhase(PhaseKind.HIDDEN, 0.0)

    entry = timeline.entry_point if timeline.entry_point is not None else 0.0
    exit_point = timeline.exit_point

    if entry_duration > 0 and time <= entry + entry_duration:
        return TransitionPhase(PhaseKind.ENTERING, (time - entry) / entry_duration)

    if (exit_point is not None and exit_duration > 0
            and exit_point - exit_duration <= time <= exit_point):
        return TransitionPhase(PhaseKind.EXITING, 1 - (exit_point - time) / exit_duration)

    return TransitionPhase(PhaseKind.STEADY, 1.0)
