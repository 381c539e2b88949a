import pytest

from models import InteractionType, PetStatus


def test_legacy_interaction_names():
    assert InteractionType('pet') is InteractionType.PETTING
    assert InteractionType('Feed') is InteractionType.FEED
    with pytest.raises(ValueError):
        InteractionType('juggle')


def test_non_finite_stat_is_reset():
    status = PetStatus(energy=float('nan'), mood=250)
    status.clamp_stats()
    assert status.energy == 0
    assert status.mood == 100


def test_from_dict_merges_over_defaults():
    status = PetStatus.from_dict({
        'level': 4,
        'max_mood': 115,
        'mood': 112,
        'interaction_counts': {'pet': 3, 'feed': 2, 'juggle': 9},
        'unlocked_achievements': ['feed10', 'bogus'],
        'completed_tasks': ['task_feed_1'],
        'active_tasks': ['task_feed_1', 'task_play_3'],
    })
    assert status.level == 4
    assert status.mood == 112
    assert status.max_energy == 100
    assert status.interaction_counts == {'petting': 3, 'feed': 2}
    assert status.unlocked_achievements == {'feed10'}
    assert status.active_tasks == {'task_play_3'}


def test_to_dict_is_json_friendly():
    data = PetStatus(active_tasks={'b', 'a'}).to_dict()
    assert data['active_tasks'] == ['a', 'b']
    assert data['bubble'] == {'active': False, 'text': '', 'kind': 'thought', 'expiry': 0.0}
