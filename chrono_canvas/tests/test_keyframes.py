"""
Tests for keyframe lookup, keyframe editing and the timeline data model.
"""

import math

import pytest

from chrono_canvas.timeline.keyframes import (
    keyframe_marker_id,
    remove_keyframe,
    resolve_keyframe,
    upsert_keyframe,
)
from chrono_canvas.timeline.models import (
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


def _kf(time, opacity=None, **kwargs):
    return Keyframe(time, PropertySnapshot(opacity=opacity, **kwargs))


class TestResolveKeyframe:
    """Bounding-pair search over sorted keyframes."""

    def test_empty_list(self):
        for t in [-1.0, 0.0, 5.0, 1000.0]:
            span = resolve_keyframe([], t)
            assert span.prev is None
            assert span.next is None
            assert span.is_empty

    def test_between_two_keyframes(self):
        a, b = _kf(0.0, 0.0), _kf(10.0, 1.0)
        span = resolve_keyframe([a, b], 2.5)
        assert span.prev is a
        assert span.next is b
        assert span.local_progress == pytest.approx(0.25)
        assert span.is_between

    def test_exactly_on_keyframe_is_prev(self):
        """A keyframe at the query time counts as prev (time <= t)."""
        a, b, c = _kf(0.0), _kf(5.0), _kf(10.0)
        span = resolve_keyframe([a, b, c], 5.0)
        assert span.prev is b
        assert span.next is c
        assert span.local_progress == pytest.approx(0.0)

    def test_after_last_keyframe(self):
        a, b = _kf(0.0), _kf(10.0)
        span = resolve_keyframe([a, b], 12.0)
        assert span.prev is b
        assert span.next is None

    def test_before_first_keyframe(self):
        a, b = _kf(3.0), _kf(10.0)
        span = resolve_keyframe([a, b], 1.0)
        assert span.prev is None
        assert span.next is a

    def test_unsorted_input_sorted_defensively(self):
        a, b, c = _kf(0.0), _kf(5.0), _kf(10.0)
        span = resolve_keyframe([c, a, b], 7.5)
        assert span.prev is b
        assert span.next is c
        assert span.local_progress == pytest.approx(0.5)

    def test_does_not_mutate_input(self):
        keyframes = [_kf(10.0), _kf(0.0)]
        resolve_keyframe(keyframes, 5.0)
        assert [kf.time for kf in keyframes] == [10.0, 0.0]

    def test_duplicate_times_never_produce_nan(self):
        """Keyframes sharing a time must not divide by zero; the later one wins."""
        a, b = _kf(5.0, 0.0), _kf(5.0, 1.0)
        c = _kf(0.0, 0.5)
        for t in [4.0, 5.0, 6.0]:
            span = resolve_keyframe([c, a, b], t)
            assert not math.isnan(span.local_progress)
        assert resolve_keyframe([c, a, b], 5.0).prev is b
        assert resolve_keyframe([c, a, b], 4.0).local_progress == pytest.approx(0.8)


class TestKeyframeEditing:
    """Uniqueness and ordering of keyframe lists."""

    def test_upsert_inserts_sorted(self):
        keyframes = [_kf(0.0), _kf(10.0)]
        result = upsert_keyframe(keyframes, _kf(5.0))
        assert [kf.time for kf in result] == [0.0, 5.0, 10.0]

    def test_upsert_replaces_within_epsilon(self):
        keyframes = [_kf(0.0, 0.0), _kf(5.0, 0.2)]
        replacement = _kf(5.05, 0.9)
        result = upsert_keyframe(keyframes, replacement)
        assert len(result) == 2
        assert result[1] is replacement

    def test_upsert_outside_epsilon_adds(self):
        result = upsert_keyframe([_kf(5.0)], _kf(5.2))
        assert len(result) == 2

    def test_upsert_does_not_mutate_input(self):
        keyframes = [_kf(0.0)]
        upsert_keyframe(keyframes, _kf(1.0))
        assert len(keyframes) == 1

    def test_remove_keyframe(self):
        keyframes = [_kf(0.0), _kf(5.0), _kf(10.0)]
        result = remove_keyframe(keyframes, 5.02)
        assert [kf.time for kf in result] == [0.0, 10.0]

    def test_remove_missing_keyframe_is_noop(self):
        keyframes = [_kf(0.0)]
        assert remove_keyframe(keyframes, 3.0) == keyframes

    def test_marker_id_is_stable(self):
        assert keyframe_marker_id("image-1", 2.0) == "keyframe-image-1-2.000"
        assert keyframe_marker_id("image-1", 2.0001) == keyframe_marker_id("image-1", 2.0)

    def test_marker_ids_distinct_for_keyframes_kept_apart(self):
        """Keyframes at least epsilon apart never share a marker id."""
        assert keyframe_marker_id("image-1", 0.05) != keyframe_marker_id("image-1", 0.15)


class TestTimelineData:
    """TimelineData validation and helpers."""

    def test_keyframes_sorted_on_creation(self):
        data = TimelineData(keyframes=[_kf(10.0), _kf(1.0)])
        assert [kf.time for kf in data.keyframes] == [1.0, 10.0]

    def test_empty_window_rejected(self):
        with pytest.raises(InvalidTimelineError):
            TimelineData(entry_point=10.0, exit_point=5.0)
        with pytest.raises(InvalidTimelineError):
            TimelineData(entry_point=5.0, exit_point=5.0)

    def test_set_window_rejected_keeps_old_values(self):
        data = TimelineData(entry_point=0.0, exit_point=10.0)
        with pytest.raises(InvalidTimelineError):
            data.set_window(20.0, 15.0)
        assert data.entry_point == 0.0
        assert data.exit_point == 10.0

    def test_invalid_timeline_error_is_value_error(self):
        with pytest.raises(ValueError):
            TimelineData(entry_point=3.0, exit_point=1.0)

    def test_negative_keyframe_time_rejected(self):
        with pytest.raises(InvalidTimelineError):
            Keyframe(-1.0)

    def test_add_and_remove_keyframe(self):
        data = TimelineData()
        data.add_keyframe(_kf(4.0, 0.5))
        data.add_keyframe(_kf(4.05, 0.7))
        assert len(data.keyframes) == 1
        assert data.keyframes[0].properties.opacity == 0.7
        assert data.remove_keyframe(4.0) is True
        assert data.remove_keyframe(4.0) is False

    def test_last_keyframe_time(self):
        assert TimelineData().last_keyframe_time is None
        assert TimelineData(keyframes=[_kf(3.0), _kf(70.0)]).last_keyframe_time == 70.0

    def test_create_timeline_data_defaults(self):
        data = create_timeline_data(12.0)
        assert data.entry_point == 12.0
        assert data.exit_point == 42.0
        assert data.keyframes == []

    def test_dict_conversion(self):
        data = TimelineData(
            entry_point=1.0,
            exit_point=9.0,
            persist=True,
            keyframes=[Keyframe(2.0, PropertySnapshot(position=Point(1, 2)), easing="standard")]
        )
        assert TimelineData.from_dict(data.to_dict()) == data


class TestElements:
    """Closed element variants."""

    def test_static_properties(self):
        element = ShapeElement(position=Point(5, 6), size=Size(7, 8), rotation=30.0, opacity=0.4)
        props = element.static_properties()
        assert props == PropertySnapshot(Point(5, 6), Size(7, 8), 30.0, 0.4)

    @pytest.mark.parametrize("element_cls,kind", [
        (ImageElement, "image"),
        (TextElement, "text"),
        (ShapeElement, "shape"),
        (StickerElement, "sticker"),
        (MediaElement, "media"),
    ])
    def test_from_dict_dispatches_on_type(self, element_cls, kind):
        element = element_cls(id=f"{kind}-1")
        restored = element_from_dict(element.to_dict())
        assert type(restored) is element_cls
        assert restored.id == f"{kind}-1"

    def test_from_dict_keeps_payload_and_timeline(self):
        data = {
            "id": "title",
            "type": "text",
            "content": "Hello",
            "position": {"x": 10, "y": 20},
            "timeline": {"entry_point": 2.0, "exit_point": 4.0, "keyframes": []},
        }
        element = element_from_dict(data)
        assert element.content == "Hello"
        assert element.position == Point(10, 20)
        assert element.timeline.exit_point == 4.0

    def test_unknown_type_raises(self):
        with pytest.raises(ValueError, match="Unknown element type"):
            element_from_dict({"type": "hologram"})

    def test_generated_ids_unique(self):
        assert ImageElement().id != ImageElement().id
