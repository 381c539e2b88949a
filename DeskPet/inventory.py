import logging

from constants import ITEMS
from errors import ValidationFailure
from models import Item, ItemKind

logger = logging.getLogger(__name__)


class Inventory:
    """Quantity map stored on the pet status. Zero-quantity keys are removed."""

    def __init__(self, status):
        self.status = status

    @property
    def items(self):
        return self.status.inventory

    def quantity(self, item_id):
        return self.items.get(item_id, 0)

    def add_item(self, item_id, qty=1):
        try:
            if item_id not in ITEMS:
                raise ValidationFailure(f"unknown item {item_id!r}")
            if qty <= 0:
                raise ValidationFailure(f"cannot add {qty} of {item_id!r}")
        except ValidationFailure as exc:
            logger.warning("add_item ignored: %s", exc)
            return False
        self.items[item_id] = self.items.get(item_id, 0) + qty
        return True

    def remove_item(self, item_id, qty=1):
        """Remove up to qty units and return how many were actually removed."""
        available = self.items.get(item_id, 0)
        removed = max(0, min(qty, available))
        if removed == 0:
            return 0
        if available - removed == 0:
            del self.items[item_id]
        else:
            self.items[item_id] = available - removed
        return removed

    def first_of_kind(self, kind):
        """First item id in stock whose catalog kind matches."""
        kind = ItemKind(kind)
        for item_id, qty in self.items.items():
            item = Item.lookup(item_id)
            if qty > 0 and item is not None and item.kind == kind:
                return item_id
        return None

    def snapshot(self):
        return dict(self.items)
