import math

import pytest

from pygame import Rect

from gestures import GestureClassifier
from models import GestureKind

PET = Rect(100, 100, 100, 100)  # center (150, 150)


def _kinds(signals):
    return [s.kind for s in signals]


def _trace_loop(clf, total_angle, start=1.0, points=10, radius=80):
    emitted = []
    for k in range(points):
        theta = total_angle * k / (points - 1)
        x = 150 + radius * math.cos(theta)
        y = 150 + radius * math.sin(theta)
        emitted += clf.pointer_move(x, y, start + k * 0.1)
    return emitted


def test_clockwise_loop_emits_once():
    clf = GestureClassifier(PET)
    emitted = _trace_loop(clf, -2.1 * math.pi)
    assert _kinds(emitted) == [GestureKind.CIRCLE_CLOCKWISE]
    assert emitted[0].direction == 'clockwise'
    assert emitted[0].animation == 'circle-clockwise-animation'
    assert clf._circling_samples == []


def test_counterclockwise_loop():
    clf = GestureClassifier(PET)
    emitted = _trace_loop(clf, 2.1 * math.pi)
    assert _kinds(emitted) == [GestureKind.CIRCLE_COUNTERCLOCKWISE]


def test_loop_far_from_pet_is_not_circling():
    clf = GestureClassifier(PET)
    emitted = []
    for k in range(10):
        theta = -2.1 * math.pi * k / 9
        emitted += clf.pointer_move(400 + 80 * math.cos(theta), 400 + 80 * math.sin(theta), 1.0 + k * 0.1)
    assert emitted == []


def test_half_loop_is_not_circling():
    clf = GestureClassifier(PET)
    assert _trace_loop(clf, -1.0 * math.pi) == []


def test_click_and_double_click():
    clf = GestureClassifier(PET)
    clf.pointer_down(150, 150, 0.0)
    assert _kinds(clf.pointer_up(151, 150, 0.1)) == [GestureKind.CLICK]

    clf.pointer_down(150, 150, 0.2)
    assert _kinds(clf.pointer_up(150, 150, 0.25)) == [GestureKind.DOUBLE_CLICK]
    assert clf.active_gesture(0.3).kind is GestureKind.DOUBLE_CLICK


def test_slow_release_is_not_a_click():
    clf = GestureClassifier(PET)
    clf.pointer_down(150, 150, 0.0)
    assert clf.pointer_up(150, 150, 0.4) == []


def test_long_press_fires_from_poll():
    clf = GestureClassifier(PET)
    clf.pointer_down(150, 150, 0.0)
    assert clf.poll(0.5) == []
    signals = clf.poll(0.65)
    assert _kinds(signals) == [GestureKind.LONG_PRESS]
    assert signals[0].duration == pytest.approx(0.9)
    assert clf.pointer_up(150, 150, 0.8) == []


def test_double_click_cancels_pending_long_press():
    clf = GestureClassifier(PET)
    clf.pointer_down(150, 150, 0.0)
    clf.pointer_up(150, 150, 0.1)
    clf.pointer_down(150, 150, 0.2)
    assert clf.poll(1.0) == []


def test_drag_cancels_long_press():
    clf = GestureClassifier(PET)
    clf.pointer_down(150, 150, 0.0)
    assert _kinds(clf.pointer_move(160, 150, 0.1)) == [GestureKind.DRAG_START]
    assert clf.dragging
    assert clf.poll(1.0) == []
    assert _kinds(clf.pointer_up(200, 150, 1.1)) == [GestureKind.DRAG_END]
    assert not clf.dragging


def test_small_jitter_is_not_a_drag():
    clf = GestureClassifier(PET)
    clf.pointer_down(150, 150, 0.0)
    assert clf.pointer_move(152, 151, 0.05) == []
    assert _kinds(clf.pointer_up(152, 151, 0.1)) == [GestureKind.CLICK]


def test_fast_flick_preempts_active_reaction():
    clf = GestureClassifier(PET)
    clf.pointer_enter(150, 150, 0.0)
    assert _kinds(clf.poll(0.35)) == [GestureKind.HOVER_TILT]

    clf.pointer_move(150, 150, 0.4)
    signals = clf.pointer_move(250, 150, 0.45)
    assert _kinds(signals) == [GestureKind.FAST_FLICK]
    assert signals[0].speed > 800
    assert clf.active_gesture(0.5).kind is GestureKind.FAST_FLICK


def test_new_gesture_does_not_preempt_playing_one():
    clf = GestureClassifier(PET)
    clf.pointer_down(150, 150, 0.0)
    clf.pointer_up(150, 150, 0.05)
    clf.pointer_down(150, 150, 0.1)
    clf.pointer_up(150, 150, 0.15)  # double-click, plays until 0.75

    emitted = []
    for k in range(6):
        emitted += clf.pointer_move(110 + 15 * k, 150, 0.2 + 0.1 * k)
    assert emitted == []
    assert clf.active_gesture(0.7).kind is GestureKind.DOUBLE_CLICK


def _stroke(clf, y, start=2.0):
    emitted = []
    for k in range(5):
        emitted += clf.pointer_move(110 + 14 * k, y, start + 0.06 * k)
    return emitted


def test_slow_stroke_is_petting():
    clf = GestureClassifier(PET)
    emitted = _stroke(clf, 150)
    assert _kinds(emitted) == [GestureKind.PETTING]
    assert clf._petting_samples == []


def test_stroke_beside_the_pet_is_not_petting():
    clf = GestureClassifier(PET)
    assert _stroke(clf, 5) == []
    assert _stroke(clf, 80, start=3.0) == []
    assert clf._petting_samples == []


def test_stroke_leaving_the_pet_starts_over():
    clf = GestureClassifier(PET)
    emitted = []
    for k, y in enumerate([105, 105, 105, 99, 105, 105]):
        emitted += clf.pointer_move(110 + 14 * k, y, 2.0 + 0.06 * k)
    assert emitted == []


def test_hover_needs_pointer_over_pet():
    clf = GestureClassifier(PET)
    clf.pointer_enter(20, 20, 0.0)
    assert clf.poll(0.5) == []

    clf.pointer_move(150, 150, 1.0)
    assert _kinds(clf.poll(1.31)) == [GestureKind.HOVER_TILT]


def test_leaving_clears_reaction():
    clf = GestureClassifier(PET)
    clf.pointer_enter(150, 150, 0.0)
    clf.poll(0.35)
    clf.pointer_leave(0.4)
    assert clf.active_gesture(0.45) is None


def test_eye_direction_buckets():
    clf = GestureClassifier(PET)
    expected = [
        ((300, 150), 'right'),
        ((150, 300), 'down'),
        ((150, 0), 'up'),
        ((0, 150), 'left'),
        ((0, 0), 'up-left'),
        ((300, 300), 'down-right'),
        ((155, 152), 'center'),
    ]
    for i, ((x, y), direction) in enumerate(expected):
        clf.pointer_move(x, y, 10.0 * (i + 1))
        assert clf.eye_direction(10.0 * (i + 1)) == direction


def test_eye_direction_centered_while_dragging_or_untracked():
    clf = GestureClassifier(PET)
    clf.pointer_move(300, 150, 1.0)
    assert clf.eye_direction(1.0, tracking=False) == 'center'

    clf.pointer_down(300, 150, 2.0)
    clf.pointer_move(320, 150, 2.1)
    assert clf.eye_direction(2.1) == 'center'
