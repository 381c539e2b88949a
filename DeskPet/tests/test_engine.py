import json

import pygame

from constants import NOTIFY_DURATION, STARTER_TASKS
from engine import PetEngine
from errors import PersistenceFailure
from pointer_input import PointerInput
from save_store import JsonSaveStore


def test_save_and_reload_round_trip(tmp_path):
    store = JsonSaveStore(tmp_path / "pet_save.json")
    engine = PetEngine(store=store)
    engine.give_item('soap', 2)
    engine.move_to((50, 60))
    assert engine.set_pet_type('leafy')

    reloaded = PetEngine(store=store)
    assert reloaded.simulator.status.inventory == {'soap': 2}
    assert reloaded.pet_type == 'leafy'
    assert reloaded.pet_rect.topleft == (50, 60)
    assert reloaded.simulator.status.active_tasks == engine.simulator.status.active_tasks
    assert reloaded.simulator.status.exp == engine.simulator.status.exp


def test_corrupt_save_falls_back_to_defaults(tmp_path):
    path = tmp_path / "pet_save.json"
    path.write_text("{not json")
    engine = PetEngine(store=JsonSaveStore(path))
    status = engine.simulator.status
    assert (status.mood, status.hunger, status.level) == (80, 20, 1)
    assert status.active_tasks == set(STARTER_TASKS)


def test_invalid_fields_are_replaced(tmp_path):
    path = tmp_path / "pet_save.json"
    path.write_text(json.dumps({
        'status': {'mood': 'x', 'hunger': 50, 'inventory': {'soap': 1, 'laser': 3}},
        'petTypeId': 'dragon',
        'position': {'x': 'left'},
    }))
    engine = PetEngine(store=JsonSaveStore(path))
    status = engine.simulator.status
    assert status.mood == 80
    assert status.hunger == 50
    assert status.inventory == {'soap': 1}
    assert engine.pet_type == 'default'
    assert engine.pet_rect.center == engine.viewport.center


def test_failed_save_is_only_logged():
    class BrokenStore:
        def load(self):
            raise PersistenceFailure("disk on fire")

        def save(self, snapshot):
            raise PersistenceFailure("disk on fire")

    engine = PetEngine(store=BrokenStore())
    assert engine.save() is False
    engine.start(0.0)
    engine.poll(61.0)
    engine.stop()


def test_commands_are_forwarded_without_touching_status():
    sent = []
    engine = PetEngine(shell=sent.append)
    before = engine.simulator.status.to_dict()
    for name in ('take-photo', 'open-settings', 'minimize', 'exit'):
        assert engine.command(name)
    assert engine.command('self-destruct') is False
    assert sent == ['take-photo', 'open-settings', 'minimize', 'exit']
    assert engine.simulator.status.to_dict() == before


def test_unlocks_reach_the_notification_sink():
    toasts = []
    engine = PetEngine(notify=lambda text, duration: toasts.append((text, duration)))
    engine.give_item('basic_food')
    assert engine.interact('feed', 20, 'food')
    assert ("Achievement unlocked: First Contact", NOTIFY_DURATION) in toasts
    assert ("Task complete: First Meal", NOTIFY_DURATION) in toasts


def test_interaction_pulses_animation_and_renders():
    frames = []
    engine = PetEngine(renderer=lambda *args: frames.append(args), clock_hour=lambda: 12)
    engine.start(0.0)
    engine.give_item('ball')
    assert engine.interact('play', 10, 'toy', now=0.5)
    frame = engine.poll(0.6)
    assert frame.animation == 'play-animation'
    assert frame.expression == 'happy'
    expression, animation, status, inventory = frames[-1]
    assert animation == 'play-animation'
    assert inventory == {}
    assert status is not engine.simulator.status


def test_click_on_pet_counts_as_petting():
    engine = PetEngine(clock_hour=lambda: 12)
    engine.start(0.0)
    cx, cy = engine.pet_rect.center
    engine.pointer_down(cx, cy, 1.0)
    engine.pointer_up(cx, cy, 1.1)
    assert engine.simulator.status.interaction_counts == {'petting': 1}


def test_press_beside_pet_neither_drags_nor_pets():
    engine = PetEngine(clock_hour=lambda: 12)
    engine.start(0.0)
    start = engine.pet_rect.topleft
    assert engine.pointer_down(5, 5, 1.0) is False
    engine.pointer_move(60, 40, 1.1)
    engine.pointer_up(60, 40, 1.2)
    assert not engine.dragging
    assert engine.pet_rect.topleft == start

    engine.pointer_down(5, 5, 2.0)
    engine.pointer_up(5, 5, 2.1)
    assert engine.simulator.status.interaction_counts == {}


def test_stroke_beside_pet_is_not_petting():
    engine = PetEngine(clock_hour=lambda: 12)
    engine.start(0.0)
    for k in range(8):
        engine.pointer_move(20 + 14 * k, 5, 1.0 + 0.06 * k)
    assert engine.simulator.status.interaction_counts == {}

    top = engine.pet_rect.top + 50
    for k in range(5):
        engine.pointer_move(200 + 14 * k, top, 3.0 + 0.06 * k)
    assert engine.simulator.status.interaction_counts == {'petting': 1}


def test_pointer_input_translates_pygame_events():
    engine = PetEngine(clock_hour=lambda: 12)
    engine.start(0.0)
    pointer = PointerInput(engine, clock=lambda: 0.0)
    cx, cy = engine.pet_rect.center

    assert pointer.handle_event(pygame.event.Event(pygame.MOUSEMOTION, {'pos': (cx, cy)}), 1.0)
    assert pointer.inside
    pointer.handle_event(pygame.event.Event(pygame.MOUSEBUTTONDOWN, {'pos': (cx, cy), 'button': 1}), 2.0)
    pointer.handle_event(pygame.event.Event(pygame.MOUSEBUTTONUP, {'pos': (cx, cy), 'button': 1}), 2.1)
    assert engine.simulator.status.interaction_counts == {'petting': 1}

    assert pointer.handle_event(pygame.event.Event(pygame.MOUSEBUTTONDOWN, {'pos': (5, 5), 'button': 1}), 2.5) is False
    assert not engine.classifier.pressed
    assert pointer.handle_event(pygame.event.Event(pygame.MOUSEBUTTONDOWN, {'pos': (5, 5), 'button': 3}), 2.6) is False
    assert not engine.menu_open

    pointer.handle_event(pygame.event.Event(pygame.MOUSEBUTTONDOWN, {'pos': (cx, cy), 'button': 3}), 3.0)
    assert engine.menu_open
    assert not engine.autonomy.is_scheduled('idle')

    assert pointer.handle_event(pygame.event.Event(pygame.WINDOWLEAVE, {}), 4.0)
    assert not pointer.inside
    assert pointer.handle_event(pygame.event.Event(pygame.KEYDOWN, {'key': pygame.K_a}), 5.0) is False


def test_recovering_from_a_low_stat_flashes_the_meter():
    engine = PetEngine(clock_hour=lambda: 12)
    engine.simulator.status.mood = 10
    engine.start(0.0)
    assert engine.poll(0.1).status_change is None
    engine.give_item('ball')
    assert engine.interact('play', 30, 'toy', now=0.2)
    assert engine.poll(0.3).status_change == 'recovery-positive'
    assert engine.poll(1.0).status_change is None

    engine.simulator.status.hunger = 90
    engine.poll(1.1)
    engine.give_item('basic_food')
    assert engine.interact('feed', 30, 'food', now=1.2)
    assert engine.poll(1.3).status_change == 'increase-positive'
