"""
Periodic decay / special-event engine plus the interaction mutator.
Owns the PetStatus value; every write goes through StatusSimulator.
"""
import datetime
import logging
import random
from dataclasses import dataclass, field
from typing import Callable, Optional

from constants import (
    CAP_GAIN_PER_LEVEL, CAP_NAMES, DAY_END_HOUR, DAY_MULTIPLIERS, DAY_START_HOUR,
    DECAY_RATES, ENERGY_NEED, EVENT_BUBBLE_DURATION, EVENT_CHANCES, EXERCISE_MIN_ENERGY,
    EXP_PER_TICK, HUNGER_CRITICAL, HUNGER_NEED, INTERACTIONS, ITEMS, LEVEL_UNLOCKS,
    MODIFIER_BASE_CHANCE, MODIFIER_NEED_CHANCE, MODIFIER_RELIEF, MODIFIER_STRAIN,
    MODIFIER_WORST_BIAS, MOOD_NEED, NEED_FLOOR, NIGHT_MULTIPLIERS, SICKNESS_CLEANLINESS,
    STAT_NAMES, TICK_INTERVAL, TREASURE_ITEM_CHANCE, BUBBLE_DURATION,
)
from errors import PreconditionFailure, ValidationFailure
from inventory import Inventory
from models import InteractionType, ItemKind, PetStatus
from progression import AchievementTracker, TaskTracker
from thought_bubble import ThoughtBubble

logger = logging.getLogger(__name__)


def exp_to_next(level):
    return 100 + level * 50


def is_daytime(hour):
    return DAY_START_HOUR <= hour < DAY_END_HOUR


@dataclass(frozen=True)
class SpecialEvent:
    name: str
    probability: float
    effect: Callable  # (status, inventory, rng) -> bubble text
    predicate: Callable = lambda status: True
    expression: Optional[str] = None


def _mood_boost(status, inventory, rng):
    status.mood += 50
    return "Something wonderful happened!"


def _self_learning(status, inventory, rng):
    gain = rng.randint(10, 24)
    status.exp += gain
    status.energy -= 10
    return f"I studied by myself! +{gain} exp"


def _exercise(status, inventory, rng):
    gain = rng.randint(8, 17)
    status.exp += gain
    status.energy -= 15
    status.max_energy += 1
    return f"Did some exercise! +{gain} exp"


def _treasure(status, inventory, rng):
    gain = rng.randint(15, 34)
    status.exp += gain
    message = f"Found a treasure! +{gain} exp"
    if rng.random() < TREASURE_ITEM_CHANCE:
        item_id = rng.choice(sorted(ITEMS))
        if inventory.add_item(item_id, 1):
            message += f" and a {ITEMS[item_id]['name']}"
    return message


def _social(status, inventory, rng):
    gain = rng.randint(12, 19)
    status.exp += gain
    status.mood += 20
    return f"Made a new friend! +{gain} exp"


def _inspiration(status, inventory, rng):
    gain = rng.randint(18, 29)
    status.exp += gain
    return f"I had a brilliant idea! +{gain} exp"


def _sickness(status, inventory, rng):
    status.mood -= 30
    status.energy -= 40
    return "I don't feel so good..."


# Checked in order; the first one that passes its predicate and its roll wins.
SPECIAL_EVENTS = [
    SpecialEvent('mood_boost', EVENT_CHANCES['mood_boost'], _mood_boost, expression='happy'),
    SpecialEvent('self_learning', EVENT_CHANCES['self_learning'], _self_learning),
    SpecialEvent('exercise', EVENT_CHANCES['exercise'], _exercise,
                 predicate=lambda s: s.energy > EXERCISE_MIN_ENERGY),
    SpecialEvent('treasure', EVENT_CHANCES['treasure'], _treasure, expression='happy'),
    SpecialEvent('social', EVENT_CHANCES['social'], _social, expression='happy'),
    SpecialEvent('inspiration', EVENT_CHANCES['inspiration'], _inspiration),
    SpecialEvent('sickness', EVENT_CHANCES['sickness'], _sickness,
                 predicate=lambda s: s.cleanliness < SICKNESS_CLEANLINESS, expression='sick'),
]


@dataclass
class TickResult:
    event: Optional[SpecialEvent] = None
    levels_gained: int = 0
    messages: list = field(default_factory=list)


class StatusSimulator:
    def __init__(self, status=None, rng=None, message_callback=None, events=None):
        self.status = status if status is not None else PetStatus()
        self.rng = rng if rng is not None else random.Random()
        self.message_callback = message_callback
        self.events = SPECIAL_EVENTS if events is None else events
        self.inventory = Inventory(self.status)
        self.achievements = AchievementTracker(self.inventory)
        self.tasks = TaskTracker(self.inventory)
        self.bubble = ThoughtBubble(self.status)

        # Older saves may predate the unlock set
        for level, names in LEVEL_UNLOCKS.items():
            if self.status.level >= level:
                self.status.unlocked_interactions.update(names)

    # --- TICK ---
    def tick(self, elapsed, now=None, hour=None):
        """Advance the status by `elapsed` seconds of decay plus one tick of exp."""
        if hour is None:
            hour = datetime.datetime.now().hour
        result = TickResult()
        if elapsed > 0:
            self._apply_decay(elapsed, hour)
        self.status.exp += EXP_PER_TICK
        if elapsed > 0:
            result.event = self._roll_special_event(now)
        self.status.clamp_stats()
        level_before = self.status.level
        result.messages = self._settle(now)
        result.levels_gained = self.status.level - level_before
        return result

    def _apply_decay(self, elapsed, hour):
        status = self.status
        scale = elapsed / TICK_INTERVAL
        multipliers = DAY_MULTIPLIERS if is_daytime(hour) else NIGHT_MULTIPLIERS
        amounts = {stat: DECAY_RATES[stat] * multipliers.get(stat, 1.0) * scale for stat in STAT_NAMES}

        target, factor = self._pick_modifier()
        if target is not None:
            amounts[target] *= factor

        status.mood -= amounts['mood']
        status.cleanliness -= amounts['cleanliness']
        status.hunger += amounts['hunger']
        status.energy -= amounts['energy']

    def _pick_modifier(self):
        """Maybe slow down (relief) or speed up (strain) one stat's decay."""
        status = self.status
        worst = min(STAT_NAMES, key=status.wellness)
        chance = MODIFIER_BASE_CHANCE + MODIFIER_NEED_CHANCE * (1.0 - status.wellness(worst))
        if self.rng.random() >= chance:
            return None, 1.0
        if self.rng.random() < MODIFIER_WORST_BIAS:
            target = worst
        else:
            target = self.rng.choice(STAT_NAMES)
        improve_chance = 0.7 - status.wellness(target) / 2
        factor = MODIFIER_RELIEF if self.rng.random() < improve_chance else MODIFIER_STRAIN
        return target, factor

    def _roll_special_event(self, now):
        for event in self.events:
            if not event.predicate(self.status):
                continue
            if self.rng.random() >= event.probability:
                continue
            message = event.effect(self.status, self.inventory, self.rng)
            logger.info("Special event: %s", event.name)
            if now is not None and message:
                self.bubble.show_message(message, now, EVENT_BUBBLE_DURATION, kind='event')
            return event
        return None

    # --- INTERACTIONS ---
    def interact(self, interaction, magnitude=0, required_item_kind=None, now=None):
        """Validate, then apply. Returns False with no mutation on any failure."""
        try:
            name, effect, item_id = self._check_interaction(interaction, magnitude, required_item_kind)
        except (ValidationFailure, PreconditionFailure) as exc:
            logger.info("Interaction %r refused: %s", interaction, exc)
            return False

        status = self.status
        if item_id is not None:
            self.inventory.remove_item(item_id, 1)

        delta = magnitude * effect['scale']
        if effect['scaled'] == 'exp':
            status.exp += int(delta)
        else:
            setattr(status, effect['scaled'], getattr(status, effect['scaled']) + delta)
        for stat in STAT_NAMES:
            status_delta = effect.get(stat, 0)
            if status_delta:
                setattr(status, stat, getattr(status, stat) + status_delta)
        status.exp += effect.get('exp', 0)
        status.energy -= effect['energy_cost']
        status.clamp_stats()

        status.interaction_counts[name] = status.interaction_counts.get(name, 0) + 1
        self._settle(now)
        return True

    def _check_interaction(self, interaction, magnitude, required_item_kind):
        try:
            name = InteractionType(interaction).value
        except ValueError:
            raise ValidationFailure(f"unknown interaction {interaction!r}")
        if magnitude < 0:
            raise ValidationFailure(f"negative magnitude {magnitude}")
        effect = INTERACTIONS[name]
        status = self.status

        if effect['unlock_level'] > 1 and name not in status.unlocked_interactions:
            raise PreconditionFailure(f"{name} unlocks at level {effect['unlock_level']}")

        item_id = None
        if required_item_kind is not None:
            try:
                kind = ItemKind(required_item_kind)
            except ValueError:
                raise ValidationFailure(f"unknown item kind {required_item_kind!r}")
            item_id = self.inventory.first_of_kind(kind)
            if item_id is None:
                raise PreconditionFailure(f"no {kind.value} in inventory")

        if status.energy < effect['energy_cost']:
            raise PreconditionFailure(f"energy {status.energy:.0f} below {effect['energy_cost']}")
        return name, effect, item_id

    def accept_task(self, task_id, now=None):
        accepted = self.tasks.accept(self.status, task_id)
        if accepted:
            self._settle(now)
        return accepted

    def give_item(self, item_id, qty=1, now=None):
        added = self.inventory.add_item(item_id, qty)
        if added:
            self._settle(now)
        return added

    # --- PROGRESSION ---
    def _settle(self, now):
        """Level up and re-run trackers until nothing else unlocks."""
        messages = []
        while True:
            messages.extend(self._level_up())
            unlocked = self.tasks.evaluate(self.status, now) + self.achievements.evaluate(self.status)
            if not unlocked:
                break
            messages.extend(unlocked)
        self.status.clamp_stats()
        for message in messages:
            self._notify(message)
        return messages

    def _level_up(self):
        status = self.status
        messages = []
        while status.exp >= exp_to_next(status.level):
            status.exp -= exp_to_next(status.level)
            status.level += 1
            for cap_name in CAP_NAMES.values():
                setattr(status, cap_name, getattr(status, cap_name) + CAP_GAIN_PER_LEVEL)
            messages.append(f"Level up! Now level {status.level}")
            for name in LEVEL_UNLOCKS.get(status.level, []):
                status.unlocked_interactions.add(name)
                messages.append(f"Unlocked interaction: {name}")
        return messages

    def _notify(self, message):
        logger.info(message)
        if self.message_callback:
            self.message_callback(message)

    # --- BUBBLES / QUERIES ---
    def current_need(self):
        """The most pressing moderate need, or None. Severe lacks raise warning bubbles instead."""
        status = self.status
        if HUNGER_NEED <= status.hunger < HUNGER_CRITICAL:
            return 'hunger'
        if NEED_FLOOR < status.energy <= ENERGY_NEED:
            return 'energy'
        if NEED_FLOOR < status.mood <= MOOD_NEED:
            return 'mood'
        return None

    def show_bubble(self, text, now, duration=BUBBLE_DURATION, kind='thought'):
        return self.bubble.show_message(text, now, duration, kind)

    def update(self, now):
        self.bubble.update(now)

    def snapshot(self):
        return self.status.copy()
