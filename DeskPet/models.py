import copy
import logging
import math
from enum import Enum
from dataclasses import dataclass, field, asdict
from typing import Optional

from pygame.math import Vector2

from constants import (
    ACHIEVEMENTS, BASE_CAP, CAP_NAMES, DEFAULT_STATUS, HUNGER_CRITICAL, ITEMS, LOW_STAT,
    REACTION_ANIMATIONS, STAT_NAMES, TASKS,
)
from errors import InvariantViolation

logger = logging.getLogger(__name__)


class InteractionType(Enum):
    """
    Every interaction the pet understands.
    Accepts legacy spellings ('pet', 'Feed', 'pet-ting') from older callers.
    """
    FEED = 'feed'
    CLEAN = 'clean'
    PLAY = 'play'
    TRAIN = 'train'
    LEARN = 'learn'
    PETTING = 'petting'
    SPECIAL = 'special'

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            normalized = value.replace('-', '').replace('_', '').lower()
            if normalized == 'pet':
                return cls.PETTING
            for member in cls:
                if member.value == normalized:
                    return member
        return super()._missing_(value)


class ItemKind(Enum):
    FOOD = 'food'
    CLEANING_SUPPLY = 'cleaning_supply'
    TOY = 'toy'


class GestureKind(Enum):
    CLICK = 'click'
    DOUBLE_CLICK = 'double-click'
    LONG_PRESS = 'long-press'
    CIRCLE_CLOCKWISE = 'circle-clockwise'
    CIRCLE_COUNTERCLOCKWISE = 'circle-counterclockwise'
    PETTING = 'petting'
    FAST_FLICK = 'fast-flick'
    HOVER_TILT = 'hover-tilt'
    # Pointer state changes, never an active reaction
    DRAG_START = 'drag-start'
    DRAG_END = 'drag-end'


@dataclass(frozen=True)
class Item:
    id: str
    kind: ItemKind
    name: str = ""
    description: str = ""

    @classmethod
    def lookup(cls, item_id):
        entry = ITEMS.get(item_id)
        if entry is None:
            return None
        return cls(item_id, ItemKind(entry['kind']), entry['name'], entry['description'])


@dataclass(frozen=True)
class PointerSample:
    x: float
    y: float
    t: float

    @property
    def pos(self) -> Vector2:
        return Vector2(self.x, self.y)


@dataclass(frozen=True)
class GestureSignal:
    kind: GestureKind
    timestamp: float
    duration: float = 0.0  # reaction length, or press length for clicks
    direction: Optional[str] = None
    speed: float = 0.0

    @property
    def animation(self) -> Optional[str]:
        return REACTION_ANIMATIONS.get(self.kind.value)

    @property
    def is_reaction(self) -> bool:
        return self.animation is not None


@dataclass
class Bubble:
    active: bool = False
    text: str = ""
    kind: str = 'thought'
    expiry: float = 0.0


@dataclass
class PetStatus:
    """The single mutable pet state. Only StatusSimulator writes to it."""
    mood: float = DEFAULT_STATUS['mood']
    cleanliness: float = DEFAULT_STATUS['cleanliness']
    hunger: float = DEFAULT_STATUS['hunger']  # 0 = full
    energy: float = DEFAULT_STATUS['energy']
    max_mood: float = BASE_CAP
    max_cleanliness: float = BASE_CAP
    max_hunger: float = BASE_CAP
    max_energy: float = BASE_CAP
    exp: int = DEFAULT_STATUS['exp']
    level: int = DEFAULT_STATUS['level']
    interaction_counts: dict = field(default_factory=dict)
    unlocked_achievements: set = field(default_factory=set)
    active_tasks: set = field(default_factory=set)
    completed_tasks: set = field(default_factory=set)
    unlocked_idle_animations: set = field(default_factory=set)
    unlocked_interactions: set = field(default_factory=set)
    unlocks: set = field(default_factory=set)
    inventory: dict = field(default_factory=dict)
    bubble: Bubble = field(default_factory=Bubble)

    def cap(self, stat):
        return getattr(self, CAP_NAMES[stat])

    def clamp(self, value, upper):
        return max(0.0, min(upper, value))

    def clamp_stats(self):
        for stat in STAT_NAMES:
            value = getattr(self, stat)
            if not math.isfinite(value):
                logger.warning("%s", InvariantViolation(f"{stat} was {value}, resetting to 0"))
                value = 0.0
            setattr(self, stat, self.clamp(value, self.cap(stat)))

    def wellness(self, stat):
        """0..1 where 1 is best. Hunger is inverted: a full pet is well."""
        value = getattr(self, stat) / self.cap(stat)
        return 1.0 - value if stat == 'hunger' else value

    def total_interactions(self):
        return sum(self.interaction_counts.values())

    def count(self, interaction):
        if interaction == 'any':
            return self.total_interactions()
        return self.interaction_counts.get(interaction, 0)

    def low_flags(self):
        return {
            'mood': self.mood < LOW_STAT,
            'cleanliness': self.cleanliness < LOW_STAT,
            'hunger': self.hunger > HUNGER_CRITICAL,
            'energy': self.energy < LOW_STAT,
        }

    def copy(self):
        return copy.deepcopy(self)

    def to_dict(self):
        data = asdict(self)
        for key, value in data.items():
            if isinstance(value, set):
                data[key] = sorted(value)
        return data

    @classmethod
    def from_dict(cls, data):
        """Merge a saved status over defaults, dropping anything unknown."""
        status = cls()
        if not isinstance(data, dict):
            return status

        def get_num(key, default):
            value = data.get(key, default)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                return default
            return value

        for stat in STAT_NAMES:
            setattr(status, stat, float(get_num(stat, getattr(status, stat))))
            cap_name = CAP_NAMES[stat]
            setattr(status, cap_name, float(get_num(cap_name, BASE_CAP)))
        status.exp = int(get_num('exp', status.exp))
        status.level = max(1, int(get_num('level', status.level)))

        counts = data.get('interaction_counts') or {}
        for key, value in counts.items():
            try:
                name = InteractionType(key).value
            except ValueError:
                logger.warning("Dropping count for unknown interaction %r", key)
                continue
            if isinstance(value, int) and value > 0:
                status.interaction_counts[name] = status.interaction_counts.get(name, 0) + value

        status.unlocked_achievements = _known(data.get('unlocked_achievements'), ACHIEVEMENTS, "achievement")
        status.active_tasks = _known(data.get('active_tasks'), TASKS, "task")
        status.completed_tasks = _known(data.get('completed_tasks'), TASKS, "task")
        status.active_tasks -= {t for t in status.completed_tasks if not TASKS[t].get('repeatable')}
        status.unlocked_idle_animations = set(data.get('unlocked_idle_animations') or [])
        status.unlocked_interactions = set(data.get('unlocked_interactions') or [])
        status.unlocks = set(data.get('unlocks') or [])

        for item_id, qty in (data.get('inventory') or {}).items():
            if item_id not in ITEMS:
                logger.warning("Dropping unknown item %r from saved inventory", item_id)
            elif isinstance(qty, int) and qty > 0:
                status.inventory[item_id] = qty

        status.clamp_stats()
        return status


def _known(values, table, label):
    result = set()
    for value in values or []:
        if value in table:
            result.add(value)
        else:
            logger.warning("Dropping unknown %s %r from save", label, value)
    return result
