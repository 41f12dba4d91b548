"""
ChronoCanvas Configuration - Centralized configuration management.

Provides:
- Type-safe timeline configuration dataclass
- Loading from environment variables
- Loading/saving from JSON
"""

import json
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional


@dataclass
class TimelineConfig:
    """Timeline engine configuration."""

    # Zine view: scroll pixels per timeline second
    pixels_per_second: float = 100.0

    # Duration derivation
    min_duration: float = 60.0  # Floor for the timeline length (s)
    duration_buffer: float = 10.0  # Added after the last exit/keyframe (s)

    # Keyframes closer than this are treated as the same keyframe (s)
    keyframe_epsilon: float = 0.1

    # Lazily created timeline data exits this long after entry (s)
    default_exit_span: float = 30.0

    # Playback
    min_speed: float = 0.1  # Speeds at or below zero clamp to this
    frame_interval: float = 1 / 60  # Scheduling step (s)

    # Entry/exit animation lengths for renderers (s)
    entry_duration: float = 0.4
    exit_duration: float = 0.35

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "TimelineConfig":
        """Create from dictionary."""
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})

    @classmethod
    def from_env(cls) -> "TimelineConfig":
        """Load configuration from environment variables."""
        defaults = cls()
        return cls(
            pixels_per_second=float(os.environ.get("CHRONO_PIXELS_PER_SECOND", defaults.pixels_per_second)),
            min_duration=float(os.environ.get("CHRONO_MIN_DURATION", defaults.min_duration)),
            duration_buffer=float(os.environ.get("CHRONO_DURATION_BUFFER", defaults.duration_buffer)),
            keyframe_epsilon=float(os.environ.get("CHRONO_KEYFRAME_EPSILON", defaults.keyframe_epsilon)),
            default_exit_span=float(os.environ.get("CHRONO_DEFAULT_EXIT_SPAN", defaults.default_exit_span)),
            min_speed=float(os.environ.get("CHRONO_MIN_SPEED", defaults.min_speed)),
            frame_interval=float(os.environ.get("CHRONO_FRAME_INTERVAL", defaults.frame_interval)),
            entry_duration=float(os.environ.get("CHRONO_ENTRY_DURATION", defaults.entry_duration)),
            exit_duration=float(os.environ.get("CHRONO_EXIT_DURATION", defaults.exit_duration)),
        )

    def save(self, path: Path) -> None:
        """Save configuration to JSON file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump({"timeline": self.to_dict()}, f, indent=2)

    @classmethod
    def load(cls, path: Path) -> "TimelineConfig":
        """Load configuration from JSON file."""
        if not path.exists():
            return cls()

        with open(path) as f:
            data = json.load(f)

        return cls.from_dict(data.get("timeline", {}))


# Default config file location
DEFAULT_CONFIG_PATH = Path.home() / ".config" / "chrono_canvas" / "config.json"


def load_config(path: Optional[Path] = None) -> TimelineConfig:
    """Load configuration from file or return defaults."""
    if path is None:
        path = DEFAULT_CONFIG_PATH
    return TimelineConfig.load(path)


def save_config(config: TimelineConfig, path: Optional[Path] = None) -> None:
    """Save configuration to file."""
    if path is None:
        path = DEFAULT_CONFIG_PATH
    config.save(path)
