"""Chooses the one animation token and the expression shown at any instant."""
import random
from dataclasses import dataclass
from typing import Optional

from constants import (
    ANIMATION_DURATIONS, DEFAULT_PET_TYPE, DEFAULT_PULSE_DURATION, EXPRESSION_OVERRIDE_DURATION,
    FLAVOR_CHANCE, FLAVOR_TIERS, HAPPY_MOOD, INTERACTIONS, LANDED_DURATION, PET_TYPES, RECOVERY_ANIMATION,
    STATUS_CHANGE_ANIMATIONS, STATUS_CHANGE_DURATION,
)


@dataclass(frozen=True)
class Frame:
    animation: Optional[str]
    source: Optional[str]  # drag, reaction, pulse, idle, blink
    expression: str
    blink: bool = False  # eyelid overlay on top of an idle pose
    status_change: Optional[str] = None  # status-meter flash


class AnimationArbiter:
    def __init__(self, rng=None, pet_type=DEFAULT_PET_TYPE):
        self.rng = rng if rng is not None else random.Random()
        self.pet_type = pet_type if pet_type in PET_TYPES else DEFAULT_PET_TYPE
        self.idle_pose = None
        self.blinking = False
        self._drag_token = None
        self._drag_until = None
        self._pulse = None
        self._pulse_until = 0.0
        self._override = None
        self._override_until = 0.0
        self._flavor_key = None
        self._flavor = None
        self._status_change = None
        self._status_change_until = 0.0
        self._low_flags = None

    # --- INPUTS ---
    def start_drag(self, now):
        self._drag_token = 'picked-up'
        self._drag_until = None
        self.idle_pose = None
        self.blinking = False

    def end_drag(self, now):
        self._drag_token = 'landed'
        self._drag_until = now + LANDED_DURATION

    def pulse(self, interaction, now):
        token = INTERACTIONS.get(interaction, {}).get('pulse', 'pulse-animation')
        self._pulse = token
        self._pulse_until = now + ANIMATION_DURATIONS.get(token, DEFAULT_PULSE_DURATION)

    def status_change(self, interaction, now):
        token = STATUS_CHANGE_ANIMATIONS.get(interaction)
        if token is not None:
            self._flash(token, now)

    def track_flags(self, flags, now):
        """Flash a recovery when any low flag clears, unless a flash is already showing."""
        previous, self._low_flags = self._low_flags, dict(flags)
        if previous is None or self.select_status_change(now) is not None:
            return
        if any(was and not flags.get(stat, False) for stat, was in previous.items()):
            self._flash(RECOVERY_ANIMATION, now)

    def _flash(self, token, now):
        self._status_change = token
        self._status_change_until = now + STATUS_CHANGE_DURATION

    def set_idle_pose(self, token):
        self.idle_pose = token

    def set_blink(self, on):
        self.blinking = on

    def override_expression(self, key, now, duration=EXPRESSION_OVERRIDE_DURATION):
        self._override = key
        self._override_until = now + duration

    # --- SELECTION ---
    def select_animation(self, now, reaction=None):
        """Returns (token, source) by strict priority."""
        if self._drag_token is not None and self._drag_until is not None and now >= self._drag_until:
            self._drag_token = None
        if self._drag_token is not None:
            return self._drag_token, 'drag'
        if reaction is not None and reaction.animation:
            return reaction.animation, 'reaction'
        if self._pulse is not None and now < self._pulse_until:
            return self._pulse, 'pulse'
        self._pulse = None
        if self.idle_pose is not None:
            return self.idle_pose, 'idle'
        if self.blinking:
            return 'blink-animation', 'blink'
        return None, None

    def select_expression(self, status, now, eye='center', tracking=True, dragging=False, reaction=None):
        if self._override is not None and now < self._override_until:
            return self._resolve(self._override)
        self._override = None

        if tracking and not dragging and reaction is None and eye != 'center':
            look = 'look_' + eye.replace('-', '_')
            # Pet types without look faces fall through to the status faces.
            if look in PET_TYPES[self.pet_type]['expressions']:
                return look

        flags = status.low_flags()
        if flags['hunger']:
            return self._resolve('hungry')
        if flags['energy']:
            return self._resolve('sleepy')

        if status.mood > HAPPY_MOOD:
            return self._resolve(self._flavor_for(status.level))
        return 'normal'

    def select_status_change(self, now):
        if self._status_change is not None and now >= self._status_change_until:
            self._status_change = None
        return self._status_change

    def _flavor_for(self, level):
        # Rolled once per level so the face does not flicker every frame.
        if self._flavor_key != level:
            self._flavor_key = level
            self._flavor = 'happy'
            # Higher levels get more rolls, one per tier reached.
            for floor, key in FLAVOR_TIERS:
                if level >= floor and self.rng.random() < FLAVOR_CHANCE:
                    self._flavor = key
                    break
        return self._flavor

    def _resolve(self, key):
        expressions = PET_TYPES[self.pet_type]['expressions']
        return key if key in expressions else 'normal'

    def frame(self, status, now, eye='center', tracking=True, dragging=False, reaction=None):
        animation, source = self.select_animation(now, reaction)
        expression = self.select_expression(status, now, eye, tracking, dragging, reaction)
        return Frame(animation, source, expression, blink=self.blinking and source == 'idle',
                     status_change=self.select_status_change(now))
