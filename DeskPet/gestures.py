"""
Turns a raw pointer stream into discrete gestures and an eye-direction bucket.

Timestamps are passed in by the caller (seconds, monotonic) so the classifier
never reads a clock itself. Every handler returns the list of signals it emitted.
A signal being emitted and a signal becoming the *active* reaction are separate:
clicks and presses are always reported, but only fast-flick may replace a
reaction that is still playing.
"""
import math

from pygame import Rect
from pygame.math import Vector2

from constants import (
    CIRCLING_MIN_ANGLE, CIRCLING_MIN_POINTS, CIRCLING_REACH, CIRCLING_WINDOW, CLICK_JITTER,
    CLICK_MAX_DURATION, DOUBLE_CLICK_WINDOW, EYE_DEAD_ZONE, FAST_MOVE_SPEED, FAST_REACTION_DURATION,
    HOVER_CANCEL_SPEED, HOVER_DELAY, LONG_PRESS_DELAY, LONG_REACTION_FACTOR, MIN_SPEED_DT, PET_SIZE,
    PETTING_MAX_DISTANCE, PETTING_MIN_DISTANCE, PETTING_MIN_POINTS, PETTING_WINDOW, REACTION_DURATION,
    SLOW_MOVE_SPEED, SPEED_WINDOW,
)
from models import GestureKind, GestureSignal, PointerSample

EYE_BUCKETS = ['right', 'down-right', 'down', 'down-left', 'left', 'up-left', 'up', 'up-right']

REACTION_LENGTHS = {
    GestureKind.FAST_FLICK: FAST_REACTION_DURATION,
    GestureKind.LONG_PRESS: REACTION_DURATION * LONG_REACTION_FACTOR,
    GestureKind.CIRCLE_CLOCKWISE: REACTION_DURATION * LONG_REACTION_FACTOR,
    GestureKind.CIRCLE_COUNTERCLOCKWISE: REACTION_DURATION * LONG_REACTION_FACTOR,
}


def _prune(samples, now, window):
    return [s for s in samples if now - s.t <= window]


def wrap_angle(delta):
    while delta > math.pi:
        delta -= 2 * math.pi
    while delta < -math.pi:
        delta += 2 * math.pi
    return delta


class GestureClassifier:
    def __init__(self, pet_rect=None):
        self.pet_rect = Rect(pet_rect) if pet_rect is not None else Rect((0, 0), PET_SIZE)
        self.pointer = None
        self.hovering = False
        self.pressed = False
        self.dragging = False
        self.speed = 0.0

        self._press_pos = Vector2()
        self._press_time = 0.0
        self._long_press_due = None
        self._long_press_fired = False
        self._last_click_press = None
        self._double_pending = False
        self._hover_due = None

        self._speed_samples = []
        self._petting_samples = []
        self._circling_samples = []

        self._active = None
        self._active_until = 0.0

    def set_pet_rect(self, rect):
        self.pet_rect = Rect(rect)

    # --- ACTIVE REACTION ---
    def active_gesture(self, now):
        if self._active is not None and now >= self._active_until:
            self._active = None
        return self._active

    def clear_reaction(self):
        self._active = None

    def _signal(self, kind, now, **kwargs):
        return GestureSignal(kind, now, duration=REACTION_LENGTHS.get(kind, REACTION_DURATION), **kwargs)

    def _activate(self, signal, now, preempt=False):
        if self.active_gesture(now) is not None and not preempt:
            return False
        self._active = signal
        self._active_until = now + signal.duration
        return True

    def _reset_windows(self):
        self._speed_samples = []
        self._petting_samples = []
        self._circling_samples = []
        self.speed = 0.0

    # --- POINTER HANDLERS ---
    def pointer_enter(self, x, y, now):
        signals = self.poll(now)
        self.pointer = Vector2(x, y)
        self._reset_windows()
        self.hovering = False
        self._track_hover(x, y, now)
        return signals

    def pointer_leave(self, now):
        signals = self.poll(now)
        self.pointer = None
        self.hovering = False
        self._hover_due = None
        self._reset_windows()
        self._active = None
        return signals

    def pointer_down(self, x, y, now):
        signals = self.poll(now)
        self.pointer = Vector2(x, y)
        self.pressed = True
        self.dragging = False
        self._press_pos = Vector2(x, y)
        self._press_time = now
        self._long_press_fired = False
        self._long_press_due = now + LONG_PRESS_DELAY
        self._hover_due = None
        if self._last_click_press is not None and now - self._last_click_press < DOUBLE_CLICK_WINDOW:
            # Second tap: a double-click can never also become a long-press.
            self._double_pending = True
            self._long_press_due = None
        return signals

    def pointer_move(self, x, y, now):
        signals = self.poll(now)
        self.pointer = Vector2(x, y)
        self._track_hover(x, y, now)

        if self.pressed:
            if not self.dragging and self._jittered(x, y):
                self.dragging = True
                self._long_press_due = None
                self._double_pending = False
                self._active = None
                self._reset_windows()
                signals.append(GestureSignal(GestureKind.DRAG_START, now))
            return signals

        sample = PointerSample(x, y, now)
        self._speed_samples = _prune(self._speed_samples + [sample], now, SPEED_WINDOW)
        self.speed = self._window_speed()
        if self.speed > HOVER_CANCEL_SPEED:
            self._hover_due = None

        if self.speed > FAST_MOVE_SPEED:
            flick = self._signal(GestureKind.FAST_FLICK, now, speed=self.speed)
            self._activate(flick, now, preempt=True)
            self._petting_samples = []
            self._circling_samples = []
            signals.append(flick)
            return signals

        if self.active_gesture(now) is not None:
            self._petting_samples = []
            self._circling_samples = []
            return signals

        # Strokes must land on the pet; loops may trace just outside it.
        if self.hovering:
            self._petting_samples = _prune(self._petting_samples + [sample], now, PETTING_WINDOW)
        else:
            self._petting_samples = []
        if self._circling_area().collidepoint(int(x), int(y)):
            self._circling_samples = _prune(self._circling_samples + [sample], now, CIRCLING_WINDOW)
        else:
            self._circling_samples = []

        if self._is_petting():
            self._petting_samples = []
            signal = self._signal(GestureKind.PETTING, now)
            self._activate(signal, now)
            signals.append(signal)
            return signals

        angle = self._circling_angle()
        if len(self._circling_samples) >= CIRCLING_MIN_POINTS and abs(angle) > CIRCLING_MIN_ANGLE * math.pi:
            self._circling_samples = []
            if angle < 0:
                kind, direction = GestureKind.CIRCLE_CLOCKWISE, 'clockwise'
            else:
                kind, direction = GestureKind.CIRCLE_COUNTERCLOCKWISE, 'counterclockwise'
            signal = self._signal(kind, now, direction=direction)
            self._activate(signal, now)
            signals.append(signal)
        return signals

    def pointer_up(self, x, y, now):
        signals = self.poll(now)
        self.pointer = Vector2(x, y)
        if not self.pressed:
            return signals
        self.pressed = False
        self._long_press_due = None
        double_pending, self._double_pending = self._double_pending, False

        if self.dragging:
            self.dragging = False
            signals.append(GestureSignal(GestureKind.DRAG_END, now))
            return signals

        held = now - self._press_time
        if self._long_press_fired or held >= CLICK_MAX_DURATION or self._jittered(x, y):
            self._last_click_press = None
            return signals

        if double_pending:
            self._last_click_press = None
            signal = self._signal(GestureKind.DOUBLE_CLICK, now)
            self._activate(signal, now)
        else:
            self._last_click_press = self._press_time
            signal = GestureSignal(GestureKind.CLICK, now, duration=held)
        signals.append(signal)
        return signals

    def poll(self, now):
        """Fire time-based gestures (long-press, hover-tilt) that are due."""
        signals = []
        if self._long_press_due is not None and now >= self._long_press_due:
            self._long_press_due = None
            if self.pressed and not self.dragging:
                self._long_press_fired = True
                signal = self._signal(GestureKind.LONG_PRESS, now)
                self._activate(signal, now)
                signals.append(signal)

        if self._hover_due is not None and now >= self._hover_due:
            self._hover_due = None
            if (self.hovering and not self.pressed and self.speed < SLOW_MOVE_SPEED
                    and self.active_gesture(now) is None):
                signal = self._signal(GestureKind.HOVER_TILT, now)
                self._activate(signal, now)
                signals.append(signal)
        return signals

    # --- DETECTORS ---
    def _jittered(self, x, y):
        return abs(x - self._press_pos.x) > CLICK_JITTER or abs(y - self._press_pos.y) > CLICK_JITTER

    def _start_hover(self, now):
        self.hovering = True
        self._hover_due = now + HOVER_DELAY

    def _track_hover(self, x, y, now):
        over = self.pet_rect.collidepoint(int(x), int(y))
        if over and not self.hovering:
            self._start_hover(now)
        elif not over and self.hovering:
            self.hovering = False
            self._hover_due = None

    def _window_speed(self):
        if len(self._speed_samples) < 2:
            return 0.0
        first, last = self._speed_samples[0], self._speed_samples[-1]
        dt = last.t - first.t
        if dt <= MIN_SPEED_DT:
            return self.speed
        return first.pos.distance_to(last.pos) / dt

    def _is_petting(self):
        samples = self._petting_samples
        if len(samples) < PETTING_MIN_POINTS:
            return False
        distance = 0.0
        for a, b in zip(samples, samples[1:]):
            step = a.pos.distance_to(b.pos)
            dt = b.t - a.t
            if dt > 0 and step / dt >= SLOW_MOVE_SPEED:
                return False
            distance += step
        return PETTING_MIN_DISTANCE <= distance <= PETTING_MAX_DISTANCE

    def _circling_area(self):
        rect = self.pet_rect
        grow = CIRCLING_REACH - 1
        return rect.inflate(int(rect.width * grow), int(rect.height * grow))

    def _circling_angle(self):
        center = Vector2(self.pet_rect.center)
        total = 0.0
        previous = None
        for sample in self._circling_samples:
            offset = sample.pos - center
            if offset.length_squared() == 0:
                continue
            angle = math.radians(offset.as_polar()[1])
            if previous is not None:
                total += wrap_angle(angle - previous)
            previous = angle
        return total

    # --- EYES ---
    def eye_direction(self, now, tracking=True):
        """One of EYE_BUCKETS or 'center'. Screen y grows downward."""
        if not tracking or self.pointer is None or self.dragging or self.active_gesture(now) is not None:
            return 'center'
        offset = self.pointer - Vector2(self.pet_rect.center)
        if offset.length() < EYE_DEAD_ZONE * self.pet_rect.width:
            return 'center'
        _, phi = offset.as_polar()
        return EYE_BUCKETS[int((phi + 22.5) // 45) % 8]
