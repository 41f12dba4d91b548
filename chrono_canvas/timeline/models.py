"""
Data models for the timeline system.
"""

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Optional
from enum import Enum
import uuid


class InvalidTimelineError(ValueError):
    """Raised when timeline data is rejected at write time."""


class ElementKind(Enum):
    IMAGE = "image"
    TEXT = "text"
    SHAPE = "shape"
    STICKER = "sticker"
    MEDIA = "media"


@dataclass(frozen=True)
class Point:
    x: float = 0.0
    y: float = 0.0

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict) -> 'Point':
        return cls(x=float(data.get("x", 0.0)), y=float(data.get("y", 0.0)))


@dataclass(frozen=True)
class Size:
    width: float = 100.0
    height: float = 100.0

    def to_dict(self) -> dict:
        return {"width": self.width, "height": self.height}

    @classmethod
    def from_dict(cls, data: dict) -> 'Size':
        return cls(
            width=float(data.get("width", 100.0)),
            height=float(data.get("height", 100.0))
        )


@dataclass(frozen=True)
class PropertySnapshot:
    """
    Partial record of animatable properties.

    Any subset of fields may be present; absent fields are None.
    """
    position: Optional[Point] = None
    size: Optional[Size] = None
    rotation: Optional[float] = None   # degrees
    opacity: Optional[float] = None    # 0-1

    FIELDS: ClassVar[tuple] = ("position", "size", "rotation", "opacity")

    def fields_present(self) -> List[str]:
        return [name for name in self.FIELDS if getattr(self, name) is not None]

    @property
    def is_empty(self) -> bool:
        return not self.fields_present()

    def merged_over(self, base: 'PropertySnapshot') -> 'PropertySnapshot':
        """Fill fields missing here with the values from base."""
        return PropertySnapshot(**{
            name: getattr(self, name) if getattr(self, name) is not None else getattr(base, name)
            for name in self.FIELDS
        })

    def to_dict(self) -> dict:
        result = {}
        if self.position is not None:
            result["position"] = self.position.to_dict()
        if self.size is not None:
            result["size"] = self.size.to_dict()
        if self.rotation is not None:
            result["rotation"] = self.rotation
        if self.opacity is not None:
            result["opacity"] = self.opacity
        return result

    @classmethod
    def from_dict(cls, data: dict) -> 'PropertySnapshot':
        position = data.get("position")
        size = data.get("size")
        rotation = data.get("rotation")
        opacity = data.get("opacity")
        return cls(
            position=Point.from_dict(position) if position is not None else None,
            size=Size.from_dict(size) if size is not None else None,
            rotation=float(rotation) if rotation is not None else None,
            opacity=float(opacity) if opacity is not None else None
        )


@dataclass(frozen=True)
class Keyframe:
    """A timestamped snapshot of animatable properties for one element."""
    time: float                 # seconds
    properties: PropertySnapshot = field(default_factory=PropertySnapshot)
    easing: str = "linear"      # curve for the segment starting here

    def __post_init__(self):
        if self.time < 0:
            raise InvalidTimelineError(f"Keyframe time must be >= 0, got {self.time}")

    def to_dict(self) -> dict:
        return {
            "time": self.time,
            "properties": self.properties.to_dict(),
            "easing": self.easing
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Keyframe':
        return cls(
            time=float(data.get("time", 0.0)),
            properties=PropertySnapshot.from_dict(data.get("properties", {})),
            easing=data.get("easing", "linear")
        )


@dataclass
class TimelineData:
    """
    Entry/exit window and keyframes for one element.

    exit_point=None means the element never exits. persist=True keeps the
    element visible, frozen at its last state, after exit_point.
    """
    entry_point: Optional[float] = 0.0
    exit_point: Optional[float] = None
    persist: bool = False
    keyframes: List[Keyframe] = field(default_factory=list)

    def __post_init__(self):
        _validate_window(self.entry_point, self.exit_point)
        self.keyframes = sorted(self.keyframes, key=lambda kf: kf.time)

    def set_window(self, entry_point: Optional[float], exit_point: Optional[float]):
        """Set entry/exit points, rejecting an empty window."""
        _validate_window(entry_point, exit_point)
        self.entry_point = entry_point
        self.exit_point = exit_point

    def add_keyframe(self, keyframe: Keyframe, epsilon: float = 0.1) -> Keyframe:
        """Add a keyframe, replacing any existing one within epsilon seconds."""
        from .keyframes import upsert_keyframe
        self.keyframes = upsert_keyframe(self.keyframes, keyframe, epsilon)
        return keyframe

    def remove_keyframe(self, time: float, epsilon: float = 0.1) -> bool:
        """Remove the keyframe within epsilon seconds of time."""
        from .keyframes import remove_keyframe
        remaining = remove_keyframe(self.keyframes, time, epsilon)
        removed = len(remaining) != len(self.keyframes)
        self.keyframes = remaining
        return removed

    def keyframe_at(self, time: float, epsilon: float = 0.1) -> Optional[Keyframe]:
        for keyframe in self.keyframes:
            if abs(keyframe.time - time) < epsilon:
                return keyframe
        return None

    @property
    def last_keyframe_time(self) -> Optional[float]:
        if not self.keyframes:
            return None
        return max(kf.time for kf in self.keyframes)

    def to_dict(self) -> dict:
        return {
            "entry_point": self.entry_point,
            "exit_point": self.exit_point,
            "persist": self.persist,
            "keyframes": [kf.to_dict() for kf in self.keyframes]
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'TimelineData':
        return cls(
            entry_point=data.get("entry_point", 0.0),
            exit_point=data.get("exit_point"),
            persist=data.get("persist", False),
            keyframes=[Keyframe.from_dict(kf) for kf in data.get("keyframes", [])]
        )


def _validate_window(entry_point: Optional[float], exit_point: Optional[float]):
    if exit_point is None:
        return
    entry = entry_point if entry_point is not None else 0.0
    if exit_point <= entry:
        raise InvalidTimelineError(
            f"exit_point ({exit_point}) must be greater than entry_point ({entry})"
        )


def create_timeline_data(current_position: float, exit_span: float = 30.0,
                         persist: bool = True) -> TimelineData:
    """Create timeline data lazily, on the first keyframe or window edit."""
    entry = max(0.0, current_position)
    return TimelineData(entry_point=entry, exit_point=entry + exit_span, persist=persist)


def _new_element_id() -> str:
    return f"element-{str(uuid.uuid4())[:8]}"


@dataclass
class CanvasElement:
    """
    Shared fields of every element placed on the canvas.

    An element without timeline data is always visible.
    """
    id: str = field(default_factory=_new_element_id)
    position: Point = field(default_factory=lambda: Point(100.0, 100.0))
    size: Size = field(default_factory=Size)
    rotation: float = 0.0
    opacity: float = 1.0
    z_index: int = 0
    timeline: Optional[TimelineData] = None

    kind: ClassVar[ElementKind] = ElementKind.SHAPE

    def static_properties(self) -> PropertySnapshot:
        """Current non-keyframed property values."""
        return PropertySnapshot(
            position=self.position,
            size=self.size,
            rotation=self.rotation,
            opacity=self.opacity
        )

    def content_dict(self) -> Dict[str, Any]:
        """Kind-specific payload fields."""
        return {}

    def to_dict(self) -> dict:
        result = {
            "id": self.id,
            "type": self.kind.value,
            "position": self.position.to_dict(),
            "size": self.size.to_dict(),
            "rotation": self.rotation,
            "opacity": self.opacity,
            "z_index": self.z_index,
            "timeline": self.timeline.to_dict() if self.timeline else None
        }
        result.update(self.content_dict())
        return result


@dataclass
class ImageElement(CanvasElement):
    src: str = ""
    alt: str = ""

    kind: ClassVar[ElementKind] = ElementKind.IMAGE

    def content_dict(self) -> Dict[str, Any]:
        return {"src": self.src, "alt": self.alt}


@dataclass
class TextElement(CanvasElement):
    content: str = ""
    font_size: str = "16px"
    font_weight: str = "normal"
    color: str = "#000000"
    text_align: str = "left"

    kind: ClassVar[ElementKind] = ElementKind.TEXT

    def content_dict(self) -> Dict[str, Any]:
        return {
            "content": self.content,
            "font_size": self.font_size,
            "font_weight": self.font_weight,
            "color": self.color,
            "text_align": self.text_align
        }


@dataclass
class ShapeElement(CanvasElement):
    shape: str = "rectangle"
    background_color: str = "#4CAF50"
    border_radius: str = "0"

    kind: ClassVar[ElementKind] = ElementKind.SHAPE

    def content_dict(self) -> Dict[str, Any]:
        return {
            "shape": self.shape,
            "background_color": self.background_color,
            "border_radius": self.border_radius
        }


@dataclass
class StickerElement(CanvasElement):
    emoji: str = ""

    kind: ClassVar[ElementKind] = ElementKind.STICKER

    def content_dict(self) -> Dict[str, Any]:
        return {"emoji": self.emoji}


@dataclass
class MediaElement(CanvasElement):
    """Audio or video clip; audio markers use media_type='audio'."""
    src: str = ""
    media_type: str = "audio"

    kind: ClassVar[ElementKind] = ElementKind.MEDIA

    def content_dict(self) -> Dict[str, Any]:
        return {"src": self.src, "media_type": self.media_type}


ELEMENT_TYPES = {
    ElementKind.IMAGE: ImageElement,
    ElementKind.TEXT: TextElement,
    ElementKind.SHAPE: ShapeElement,
    ElementKind.STICKER: StickerElement,
    ElementKind.MEDIA: MediaElement,
}


def element_from_dict(data: dict) -> CanvasElement:
    """Build the element variant named by data['type']."""
    try:
        kind = ElementKind(data.get("type"))
    except ValueError:
        raise ValueError(f"Unknown element type: {data.get('type')}")

    element_cls = ELEMENT_TYPES[kind]
    timeline = data.get("timeline")
    kwargs = {
        "id": data.get("id") or _new_element_id(),
        "position": Point.from_dict(data.get("position", {"x": 100.0, "y": 100.0})),
        "size": Size.from_dict(data.get("size", {})),
        "rotation": float(data.get("rotation", 0.0)),
        "opacity": float(data.get("opacity", 1.0)),
        "z_index": int(data.get("z_index", 0)),
        "timeline": TimelineData.from_dict(timeline) if timeline else None,
    }
    for name in element_cls().content_dict():
        if name in data:
            kwargs[name] = data[name]
    return element_cls(**kwargs)


@dataclass(frozen=True)
class EvaluationResult:
    """Visibility and property values of one element at one instant."""
    visible: bool
    properties: PropertySnapshot = field(default_factory=PropertySnapshot)

    def to_dict(self) -> dict:
        return {"visible": self.visible, "properties": self.properties.to_dict()}
