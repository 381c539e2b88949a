import random

from models import PetStatus
from simulator import StatusSimulator


def _sim(status, messages=None):
    callback = messages.append if messages is not None else None
    return StatusSimulator(status, random.Random(0), message_callback=callback)


def test_tenth_feed_unlocks_achievement_once():
    messages = []
    status = PetStatus(mood=10)
    sim = _sim(status, messages)
    sim.inventory.add_item('basic_food', 10)

    for _ in range(9):
        assert sim.interact('feed', 30, 'food')
    assert 'feed10' not in status.unlocked_achievements

    assert sim.interact('feed', 30, 'food')
    assert 'feed10' in status.unlocked_achievements
    # 10 feeds * 2 + firstInteraction 10 + feed10 50 + interactionNovice 20
    assert status.exp == 100

    for _ in range(3):
        sim.tick(0, hour=12)
    assert status.exp == 103
    assert messages.count("Achievement unlocked: Little Gourmet") == 1


def test_feed_task_completes_and_rewards():
    status = PetStatus(active_tasks={'task_feed_1'})
    sim = _sim(status)
    sim.inventory.add_item('basic_food', 1)

    assert sim.interact('feed', 10, 'food')
    assert 'task_feed_1' in status.completed_tasks
    assert 'task_feed_1' not in status.active_tasks
    assert status.exp == 2 + 10 + 10


def test_task_item_rewards_go_to_inventory():
    status = PetStatus(active_tasks={'task_foodie_5'})
    sim = _sim(status)
    sim.inventory.add_item('basic_food', 5)
    for _ in range(5):
        sim.interact('feed', 5, 'food')
    assert status.inventory == {'tasty_snack': 1}


def test_tasks_sharing_a_goal_complete_together():
    status = PetStatus(active_tasks={'task_play_3', 'task_playtime_10'}, interaction_counts={'play': 9})
    sim = _sim(status)
    assert sim.interact('play', 5)
    assert {'task_play_3', 'task_playtime_10'} <= status.completed_tasks
    assert status.inventory == {'ball': 1, 'feather_wand': 1}


def test_prerequisites_gate_available_tasks():
    status = PetStatus()
    sim = _sim(status)
    available = sim.tasks.available_tasks(status)
    assert 'task_reach_level_2' in available
    assert 'task_reach_level_3' not in available

    assert sim.accept_task('task_reach_level_3') is False
    assert sim.accept_task('task_does_not_exist') is False
    assert sim.accept_task('task_reach_level_2') is True
    assert 'task_reach_level_2' in status.active_tasks


def test_level_task_unlocks_reward():
    status = PetStatus(exp=149, active_tasks={'task_reach_level_2'})
    sim = _sim(status)
    sim.tick(0, hour=12)
    assert 'task_reach_level_2' in status.completed_tasks
    assert 'expression_happy_lvl2' in status.unlocks
    assert status.exp == 100


def test_maintain_goal_needs_the_full_duration():
    status = PetStatus(cleanliness=90)
    sim = _sim(status)
    assert sim.accept_task('task_stay_clean', now=0.0)

    sim.tick(0, now=300.0, hour=12)
    assert 'task_stay_clean' in status.active_tasks

    sim.tick(0, now=600.0, hour=12)
    assert 'task_stay_clean' in status.completed_tasks
    assert status.inventory == {'soap': 1}


def test_maintain_goal_restarts_when_condition_breaks():
    status = PetStatus(cleanliness=90)
    sim = _sim(status)
    sim.accept_task('task_stay_clean', now=0.0)
    status.cleanliness = 10
    sim.tick(0, now=100.0, hour=12)
    status.cleanliness = 90
    sim.tick(0, now=200.0, hour=12)
    sim.tick(0, now=700.0, hour=12)
    assert 'task_stay_clean' in status.active_tasks
    sim.tick(0, now=800.0, hour=12)
    assert 'task_stay_clean' in status.completed_tasks


def test_max_stat_achievement_uses_current_cap_and_unlocks_once():
    messages = []
    status = PetStatus(mood=100, level=1)
    sim = _sim(status, messages)
    sim.tick(0, hour=12)
    assert 'maxMood' in status.unlocked_achievements

    status.exp = 200  # level 2 raises max_mood to 105
    sim.tick(0, hour=12)
    status.mood = 105
    sim.tick(0, hour=12)
    assert messages.count("Achievement unlocked: Pure Joy") == 1
