"""
Virtual-clock timers and the autonomous behaviour built on them.

Nothing here sleeps or reads the wall clock: the engine calls
TimerScheduler.advance_to(now) from its loop and tests fast-forward the
same way.
"""
import heapq
import logging
from dataclasses import dataclass, field
from typing import Callable

from pygame.math import Vector2

from constants import (
    ANIMATION_DURATIONS, BASE_IDLE_POSES, BLINK_INTERVAL, BLINK_MIN_STAT, BLINK_RETRY, CHASE_COOLDOWN,
    CHASE_DETECTION_RADIUS, CHASE_DURATION, CHASE_MAX_STEP, CHASE_MIN_DISTANCE, CHASE_STEP_FRACTION,
    CHASE_TRIGGER_SPEED, EDGE_PADDING, HAPPY_MOOD, IDLE_DELAY, IDLE_DELAY_HAPPY, IDLE_DELAY_LOW,
    IDLE_HAPPY_FLOOR, IDLE_LOW_CEILING, IDLE_MIN_STAT, IDLE_POOLS, NEED_BUBBLE_CHANCE, NEED_MESSAGES,
    RELOCATE_DISTANCE, RELOCATE_DURATION, RELOCATE_INTERVAL, RELOCATE_JITTER, TICK_INTERVAL, TIRED_ENERGY,
    WARNING_BUBBLE_CHANCE, WARNING_MESSAGES,
)

logger = logging.getLogger(__name__)


@dataclass(order=True)
class Timer:
    due: float
    seq: int
    name: str = field(compare=False, default="")
    callback: Callable = field(compare=False, default=None)
    cancelled: bool = field(compare=False, default=False)


class TimerScheduler:
    def __init__(self, now=0.0):
        self.now = now
        self._queue = []
        self._seq = 0

    def reset(self, now=0.0):
        self.now = now
        self._queue = []

    def call_at(self, due, name, callback):
        self._seq += 1
        timer = Timer(due, self._seq, name, callback)
        heapq.heappush(self._queue, timer)
        return timer

    def call_later(self, delay, name, callback):
        return self.call_at(self.now + delay, name, callback)

    def cancel(self, timer):
        timer.cancelled = True

    def pending(self):
        return sorted(t for t in self._queue if not t.cancelled)

    def advance_to(self, now):
        """Fire every timer due by `now`, in due order. Returns how many fired."""
        fired = 0
        while self._queue and self._queue[0].due <= now:
            timer = heapq.heappop(self._queue)
            if timer.cancelled:
                continue
            # Callbacks that reschedule see the timer's own due time as "now".
            self.now = max(self.now, timer.due)
            timer.callback()
            fired += 1
        self.now = max(self.now, now)
        return fired

    def advance(self, seconds):
        return self.advance_to(self.now + seconds)


def smoothstep(t):
    return t * t * (3 - 2 * t)


def ease_out_cubic(t):
    return 1 - (1 - t) ** 3


@dataclass
class Relocation:
    start: Vector2
    target: Vector2
    started: float
    duration: float = RELOCATE_DURATION
    ease: Callable = smoothstep

    def position_at(self, now):
        t = min(1.0, max(0.0, (now - self.started) / self.duration))
        return self.start.lerp(self.target, self.ease(t))


class AutonomousScheduler:
    """Tick, idle-pose, blink, relocation and chase timers for one engine."""

    def __init__(self, engine):
        self.engine = engine
        self.running = False
        self.relocation = None
        self._timers = {}
        self._last_tick = 0.0
        self._last_chase = None

    @property
    def clock(self):
        return self.engine.timers

    @property
    def rng(self):
        return self.engine.rng

    @property
    def status(self):
        return self.engine.simulator.status

    def start(self):
        self.running = True
        self._last_tick = self.clock.now
        self._schedule('tick', TICK_INTERVAL, self._on_tick)
        self._schedule_idle()
        self._schedule_blink()
        self._schedule_relocation()

    def stop(self):
        for name in list(self._timers):
            self._cancel(name)
        self.relocation = None
        self.running = False

    def is_scheduled(self, name):
        return name in self._timers

    def _schedule(self, name, delay, callback):
        self._cancel(name)

        def fire():
            self._timers.pop(name, None)
            callback()

        self._timers[name] = self.clock.call_later(delay, name, fire)

    def _cancel(self, name):
        timer = self._timers.pop(name, None)
        if timer is not None:
            self.clock.cancel(timer)

    def state_changed(self):
        """Drag or menu toggled: suspend or resume whatever they gate."""
        if not self.running:
            return
        self._cancel('relocate')
        self._cancel('relocate_end')
        self.relocation = None
        arbiter = self.engine.arbiter
        if self.engine.dragging:
            for name in ('idle', 'idle_end', 'blink', 'blink_end'):
                self._cancel(name)
            arbiter.set_idle_pose(None)
            arbiter.set_blink(False)
            return
        if self.engine.menu_open:
            self._cancel('idle')
            self._cancel('idle_end')
            arbiter.set_idle_pose(None)
        elif not (self.is_scheduled('idle') or self.is_scheduled('idle_end')):
            self._schedule_idle()
        if not (self.is_scheduled('blink') or self.is_scheduled('blink_end')):
            self._schedule_blink()
        self._schedule_relocation()

    def update(self, now):
        if self.relocation is not None:
            self.engine.move_to(self.relocation.position_at(now))

    # --- TICK ---
    def _on_tick(self):
        now = self.clock.now
        elapsed = now - self._last_tick
        self._last_tick = now
        result = self.engine.simulator.tick(elapsed, now=now, hour=self.engine.current_hour())
        if result.event is not None and result.event.expression:
            self.engine.arbiter.override_expression(result.event.expression, now)
        self.engine.save()
        self.warning_bubble(now)
        if self.rng.random() < NEED_BUBBLE_CHANCE:
            self.need_bubble(now)
        self._schedule('tick', TICK_INTERVAL, self._on_tick)

    def need_bubble(self, now):
        need = self.engine.simulator.current_need()
        if need is None or self.status.bubble.active:
            return None
        text = self.rng.choice(NEED_MESSAGES[need])
        if self.engine.simulator.show_bubble(text, now):
            self.engine.notify(text)
            return text
        return None

    def warning_bubble(self, now):
        """Maybe voice one severe lack. Each low stat gets its own roll and the first pass wins."""
        if self.status.bubble.active:
            return None
        flags = self.status.low_flags()
        for stat, messages in WARNING_MESSAGES.items():
            if not flags[stat] or self.rng.random() >= WARNING_BUBBLE_CHANCE:
                continue
            text = self.rng.choice(messages)
            if self.engine.simulator.show_bubble(text, now):
                self.engine.notify(text)
                return text
            return None
        return None

    # --- IDLE POSES ---
    def idle_delay(self):
        status = self.status
        if status.mood > IDLE_HAPPY_FLOOR and status.energy > IDLE_HAPPY_FLOOR:
            low, high = IDLE_DELAY_HAPPY
        elif status.mood < IDLE_LOW_CEILING or status.energy < IDLE_LOW_CEILING:
            low, high = IDLE_DELAY_LOW
        else:
            low, high = IDLE_DELAY
        return self.rng.uniform(low, high)

    def choose_idle_pose(self):
        status = self.status
        unlocked = sorted(status.unlocked_idle_animations)
        available = BASE_IDLE_POSES + unlocked
        if status.energy < TIRED_ENERGY:
            pool = IDLE_POOLS['tired']
        elif status.mood > HAPPY_MOOD:
            pool = IDLE_POOLS['happy'] + unlocked
        else:
            pool = IDLE_POOLS['neutral']
        choices = [pose for pose in pool if pose in available] or available
        return self.rng.choice(choices)

    def _schedule_idle(self):
        if self.engine.dragging or self.engine.menu_open:
            return
        self._schedule('idle', self.idle_delay(), self._on_idle)

    def _on_idle(self):
        status = self.status
        if status.energy <= IDLE_MIN_STAT or status.mood <= IDLE_MIN_STAT:
            self._schedule_idle()
            return
        pose = self.choose_idle_pose()
        self.engine.arbiter.set_idle_pose(pose)
        self._schedule('idle_end', ANIMATION_DURATIONS.get(pose, 1.0), self._end_idle)

    def _end_idle(self):
        self.engine.arbiter.set_idle_pose(None)
        self._schedule_idle()

    # --- BLINK ---
    def _schedule_blink(self):
        if self.engine.dragging:
            return
        self._schedule('blink', self.rng.uniform(*BLINK_INTERVAL), self._on_blink)

    def _on_blink(self):
        arbiter = self.engine.arbiter
        if arbiter.idle_pose is not None:
            self._schedule('blink', BLINK_RETRY, self._on_blink)
            return
        status = self.status
        if (status.energy > BLINK_MIN_STAT and status.mood > BLINK_MIN_STAT
                and not any(status.low_flags().values())):
            arbiter.set_blink(True)
            self._schedule('blink_end', ANIMATION_DURATIONS['blink-animation'], self._end_blink)
        else:
            self._schedule_blink()

    def _end_blink(self):
        self.engine.arbiter.set_blink(False)
        self._schedule_blink()

    # --- RELOCATION ---
    def _schedule_relocation(self):
        if self.engine.dragging or self.engine.menu_open:
            return
        delay = RELOCATE_INTERVAL * self.rng.uniform(1 - RELOCATE_JITTER, 1 + RELOCATE_JITTER)
        self._schedule('relocate', delay, self._on_relocate)

    def _wander_area(self):
        pet = self.engine.pet_rect
        area = self.engine.viewport.inflate(-2 * EDGE_PADDING, -2 * EDGE_PADDING)
        if area.width < pet.width or area.height < pet.height:
            logger.warning("Viewport %s too small to wander in", self.engine.viewport)
            return None
        return area

    def pick_target(self):
        """A random nearby top-left that keeps the pet inside the padded viewport."""
        pet = self.engine.pet_rect
        area = self._wander_area()
        if area is None:
            return None
        offset = Vector2(self.rng.uniform(*RELOCATE_DISTANCE), 0).rotate(self.rng.uniform(0, 360))
        moved = pet.move(round(offset.x), round(offset.y)).clamp(area)
        return Vector2(moved.topleft)

    def _on_relocate(self):
        target = self.pick_target()
        if target is None:
            self._schedule_relocation()
            return
        self.relocation = Relocation(Vector2(self.engine.position), target, self.clock.now)
        self._schedule('relocate_end', RELOCATE_DURATION, self._finish_relocation)

    def _finish_relocation(self):
        if self.relocation is not None:
            self.engine.move_to(self.relocation.target)
            self.relocation = None
        self._schedule_relocation()

    # --- CHASE ---
    def chase(self, pointer, speed, now):
        """Dart part of the way toward a fast pointer nearby. Returns True if a chase started."""
        engine = self.engine
        if not self.running or engine.dragging or engine.menu_open or self.relocation is not None:
            return False
        if speed <= CHASE_TRIGGER_SPEED:
            return False
        if self._last_chase is not None and now - self._last_chase < CHASE_COOLDOWN:
            return False
        pet = engine.pet_rect
        offset = Vector2(pointer) - Vector2(pet.center)
        distance = offset.length()
        if not CHASE_MIN_DISTANCE <= distance <= CHASE_DETECTION_RADIUS:
            return False
        area = self._wander_area()
        if area is None:
            return False

        step = offset.normalize() * min(distance * CHASE_STEP_FRACTION, CHASE_MAX_STEP)
        moved = pet.move(round(step.x), round(step.y)).clamp(area)
        self._last_chase = now
        self._cancel('relocate')
        self.relocation = Relocation(Vector2(engine.position), Vector2(moved.topleft), now,
                                     CHASE_DURATION, ease_out_cubic)
        self._schedule('relocate_end', max(0.0, now + CHASE_DURATION - self.clock.now),
                       self._finish_relocation)
        return True
