import logging

from django.db import transaction

from floor.exceptions import NotFound
from .exceptions import InsufficientStock
from .models import InventoryItem

logger = logging.getLogger(__name__)


def adjust_stock(item_id, delta, reason=''):
    """
    Apply a signed stock movement (deliveries positive, usage and waste negative).

    The row is locked for the read-modify-write so concurrent adjustments
    cannot drive the stock below zero.
    """
    with transaction.atomic():
        try:
            item = InventoryItem.objects.select_for_update().get(pk=item_id)
        except InventoryItem.DoesNotExist:
            raise NotFound(f"Inventory item {item_id} not found", item_id=item_id)

        new_stock = item.stock + delta
        if new_stock < 0:
            raise InsufficientStock(
                f"Cannot remove {-delta} {item.unit} of {item.name}: only {item.stock} in stock",
                item_id=item.id,
                available=str(item.stock),
                requested=str(-delta),
            )
        item.stock = new_stock
        item.save(update_fields=['stock', 'last_updated'])

    logger.info(f"Stock of {item.name} adjusted by {delta} to {item.stock}" + (f" ({reason})" if reason else ''))
    if item.is_low:
        logger.warning(f"{item.name} is low on stock: {item.stock} {item.unit}")
    return item
