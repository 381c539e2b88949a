"""
PetEngine: one explicit instance that owns the pet status and every timer.

Collaborators are plain callables supplied by the host:
    renderer(expression_key, animation_token, status_snapshot, inventory_snapshot)
    notify(text, min_duration)
    shell(command_name)
and `store`, an object with load() / save(snapshot) such as JsonSaveStore.
"""
import datetime
import logging
import random

from pygame import Rect
from pygame.math import Vector2

from arbiter import AnimationArbiter
from constants import (
    DEFAULT_PET_TYPE, GESTURE_INTERACTIONS, NOTIFY_DURATION, PET_SIZE, PET_TYPES, RNG_SEED,
    SCREEN_HEIGHT, SCREEN_WIDTH, SHELL_COMMANDS, STARTER_TASKS,
)
from errors import PersistenceFailure, ValidationFailure
from gestures import GestureClassifier
from models import GestureKind, InteractionType, PetStatus
from scheduler import AutonomousScheduler, TimerScheduler
from simulator import StatusSimulator

logger = logging.getLogger(__name__)


def make_rng():
    return random.Random(int(RNG_SEED)) if RNG_SEED else random.Random()


class PetEngine:
    def __init__(self, store=None, renderer=None, notify=None, shell=None, rng=None,
                 viewport=None, pet_size=PET_SIZE, clock_hour=None):
        self.store = store
        self.renderer = renderer
        self.notify_sink = notify
        self.shell = shell
        self.rng = rng if rng is not None else make_rng()
        self.viewport = Rect(viewport) if viewport is not None else Rect(0, 0, SCREEN_WIDTH, SCREEN_HEIGHT)
        self.pet_size = tuple(pet_size)
        self.clock_hour = clock_hour or (lambda: datetime.datetime.now().hour)

        self.running = False
        self.dragging = False
        self.menu_open = False
        self.tracking = True
        self._drag_offset = Vector2()

        self.timers = TimerScheduler()
        status, self.pet_type, self.position = self._restore()
        self.simulator = StatusSimulator(status, self.rng, message_callback=self.notify)
        self.classifier = GestureClassifier(self.pet_rect)
        self.arbiter = AnimationArbiter(self.rng, self.pet_type)
        self.autonomy = AutonomousScheduler(self)

    # --- PERSISTENCE ---
    def _restore(self):
        data = None
        if self.store is not None:
            try:
                data = self.store.load()
            except PersistenceFailure as e:
                logger.warning("Starting from defaults: %s", e)

        if data is None:
            status = PetStatus()
            status.active_tasks = set(STARTER_TASKS)
            return status, DEFAULT_PET_TYPE, self._centered()

        status = PetStatus.from_dict(data.get('status'))
        pet_type = data.get('petTypeId')
        if pet_type not in PET_TYPES:
            if pet_type is not None:
                logger.warning("Unknown pet type %r, using %r", pet_type, DEFAULT_PET_TYPE)
            pet_type = DEFAULT_PET_TYPE
        return status, pet_type, self._valid_position(data.get('position'))

    def _centered(self):
        rect = Rect((0, 0), self.pet_size)
        rect.center = self.viewport.center
        return Vector2(rect.topleft)

    def _valid_position(self, position):
        if not isinstance(position, dict):
            return self._centered()
        x, y = position.get('x'), position.get('y')
        if not all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in (x, y)):
            logger.warning("Ignoring saved position %r", position)
            return self._centered()
        rect = Rect((round(x), round(y)), self.pet_size).clamp(self.viewport)
        return Vector2(rect.topleft)

    def snapshot(self):
        return {
            'status': self.simulator.snapshot().to_dict(),
            'petTypeId': self.pet_type,
            'position': {'x': self.position.x, 'y': self.position.y},
        }

    def save(self):
        """Fire-and-forget. A failed save is simply tried again on the next tick."""
        if self.store is None:
            return False
        try:
            self.store.save(self.snapshot())
        except PersistenceFailure as e:
            logger.warning("Save failed: %s", e)
            return False
        return True

    # --- LIFECYCLE ---
    def start(self, now=0.0):
        if self.running:
            return
        self.timers.reset(now)
        self.running = True
        self.autonomy.start()
        logger.info("Pet engine started (level %d)", self.simulator.status.level)

    def stop(self):
        if not self.running:
            return
        self.autonomy.stop()
        self.running = False
        self.save()
        logger.info("Pet engine stopped")

    def poll(self, now):
        """Advance the virtual clock to `now` and render one frame."""
        if not self.running:
            return None
        self.timers.advance_to(now)
        self._dispatch(self.classifier.poll(now), now)
        self.autonomy.update(now)
        self.simulator.update(now)
        self.arbiter.track_flags(self.simulator.status.low_flags(), now)
        return self.render(now)

    def render(self, now):
        reaction = self.classifier.active_gesture(now)
        eye = self.classifier.eye_direction(now, self.tracking)
        frame = self.arbiter.frame(self.simulator.status, now, eye, self.tracking, self.dragging, reaction)
        if self.renderer is not None:
            self.renderer(frame.expression, frame.animation,
                          self.simulator.snapshot(), self.simulator.inventory.snapshot())
        return frame

    def current_hour(self):
        return self.clock_hour()

    # --- POSITION ---
    @property
    def pet_rect(self):
        return Rect((round(self.position.x), round(self.position.y)), self.pet_size)

    def move_to(self, position):
        self.position = Vector2(position)
        self.classifier.set_pet_rect(self.pet_rect)

    # --- POINTER ---
    def pointer_enter(self, x, y, now):
        self._dispatch(self.classifier.pointer_enter(x, y, now), now)

    def pointer_leave(self, now):
        self._dispatch(self.classifier.pointer_leave(now), now)

    def pointer_down(self, x, y, now):
        """Presses only count on the pet itself. Returns False for a miss."""
        if not self.pet_rect.collidepoint(int(x), int(y)):
            return False
        self._drag_offset = Vector2(x, y) - self.position
        self._dispatch(self.classifier.pointer_down(x, y, now), now)
        return True

    def pointer_move(self, x, y, now):
        self._dispatch(self.classifier.pointer_move(x, y, now), now)
        if self.dragging:
            target = Vector2(x, y) - self._drag_offset
            rect = Rect((round(target.x), round(target.y)), self.pet_size).clamp(self.viewport)
            self.move_to(rect.topleft)
        elif not self.classifier.pressed:
            self.autonomy.chase((x, y), self.classifier.speed, now)

    def pointer_up(self, x, y, now):
        self._dispatch(self.classifier.pointer_up(x, y, now), now)

    def _dispatch(self, signals, now):
        for signal in signals:
            if signal.kind is GestureKind.DRAG_START:
                self.dragging = True
                self.arbiter.start_drag(now)
                self.autonomy.state_changed()
            elif signal.kind is GestureKind.DRAG_END:
                self.dragging = False
                self.arbiter.end_drag(now)
                self.autonomy.state_changed()
                self.save()
            elif signal.kind.value in GESTURE_INTERACTIONS:
                interaction, magnitude = GESTURE_INTERACTIONS[signal.kind.value]
                self.interact(interaction, magnitude, now=now)

    # --- COMMANDS ---
    def interact(self, interaction, magnitude=0, required_item_kind=None, now=None):
        now = self.timers.now if now is None else now
        if not self.simulator.interact(interaction, magnitude, required_item_kind, now=now):
            return False
        name = InteractionType(interaction).value
        self.arbiter.pulse(name, now)
        self.arbiter.status_change(name, now)
        self.arbiter.override_expression('happy', now)
        return True

    def accept_task(self, task_id):
        return self.simulator.accept_task(task_id, now=self.timers.now)

    def give_item(self, item_id, qty=1):
        return self.simulator.give_item(item_id, qty, now=self.timers.now)

    def set_menu_open(self, is_open):
        if self.menu_open == is_open:
            return
        self.menu_open = is_open
        self.autonomy.state_changed()

    def set_tracking(self, enabled):
        self.tracking = enabled

    def set_pet_type(self, pet_type):
        if pet_type not in PET_TYPES:
            logger.warning("set_pet_type ignored: %s", ValidationFailure(f"unknown pet type {pet_type!r}"))
            return False
        self.pet_type = pet_type
        self.arbiter.pet_type = pet_type
        self.save()
        return True

    def command(self, name):
        """Forward a host command verbatim. The pet status is never touched."""
        if name not in SHELL_COMMANDS:
            logger.warning("command ignored: %s", ValidationFailure(f"unknown command {name!r}"))
            return False
        if name == 'exit':
            self.save()
        logger.info("Shell command: %s", name)
        if self.shell is not None:
            self.shell(name)
        return True

    def notify(self, message, duration=NOTIFY_DURATION):
        if self.notify_sink is not None:
            self.notify_sink(message, duration)
