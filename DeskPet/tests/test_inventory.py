from inventory import Inventory
from models import ItemKind, PetStatus


def test_add_then_remove_restores_absence():
    status = PetStatus()
    inv = Inventory(status)
    assert inv.add_item('soap', 3)
    assert inv.remove_item('soap', 3) == 3
    assert status.inventory == {}


def test_add_then_remove_restores_existing_entry():
    status = PetStatus(inventory={'ball': 2})
    inv = Inventory(status)
    inv.add_item('ball', 4)
    assert inv.remove_item('ball', 4)
    assert status.inventory == {'ball': 2}


def test_unknown_item_is_a_noop():
    status = PetStatus()
    inv = Inventory(status)
    assert inv.add_item('golden_apple', 1) is False
    assert inv.add_item('soap', 0) is False
    assert status.inventory == {}


def test_remove_clamps_to_stock():
    status = PetStatus(inventory={'tasty_snack': 2})
    inv = Inventory(status)
    assert inv.remove_item('tasty_snack', 5) == 2
    assert 'tasty_snack' not in status.inventory
    assert inv.remove_item('tasty_snack', 1) == 0


def test_first_of_kind_skips_other_kinds():
    status = PetStatus(inventory={'ball': 1, 'soap': 1, 'bubble_bath': 2})
    inv = Inventory(status)
    assert inv.first_of_kind('cleaning_supply') == 'soap'
    assert inv.first_of_kind(ItemKind.TOY) == 'ball'
    assert inv.first_of_kind('food') is None
