"""
Turns floor domain events into stored notifications for the staff screens.
"""
import logging

from django.dispatch import receiver

from floor.events import order_created, order_status_changed, table_status_changed, payment_recorded
from floor.models import CafeSettings
from .models import Notification

logger = logging.getLogger(__name__)

STATUS_NOTIFICATIONS = {
    'preparing': ('order_confirmed', 'Order Confirmed', 'Order for Table {table_id} has been confirmed and sent to kitchen', 'medium'),
    'ready': ('order_ready', 'Order Ready!', 'Table {table_id} order is ready for serving', 'high'),
    'cancelled': ('order_cancelled', 'Order Cancelled', 'Order {order_id} for Table {table_id} was cancelled', 'low'),
}


def money(amount):
    return f"{CafeSettings.load().currency} {amount:.2f}"


@receiver(order_created)
def notify_order_placed(sender, table_id, order_id, total, item_count, **kwargs):
    Notification.objects.create(
        kind='order_placed',
        title='New Order Placed',
        message=f"Table {table_id} placed an order with {item_count} items ({money(total)})",
        priority='medium',
        table_id=table_id,
        order_id=order_id,
    )


@receiver(order_status_changed)
def notify_order_status(sender, table_id, order_id, to_status, **kwargs):
    template = STATUS_NOTIFICATIONS.get(to_status)
    if template is None:
        return
    kind, title, message, priority = template
    Notification.objects.create(
        kind=kind,
        title=title,
        message=message.format(table_id=table_id, order_id=order_id),
        priority=priority,
        table_id=table_id,
        order_id=order_id,
    )


@receiver(table_status_changed)
def notify_table_billing(sender, table_id, to_status, **kwargs):
    if to_status != 'billing':
        return
    Notification.objects.create(
        kind='payment_pending',
        title='Payment Pending',
        message=f"Table {table_id} bill ready for payment",
        priority='medium',
        table_id=table_id,
    )


@receiver(payment_recorded)
def notify_payment_received(sender, table_id, order_id, amount, method, **kwargs):
    scope = f"Order {order_id} at Table {table_id}" if order_id else f"Table {table_id}"
    Notification.objects.create(
        kind='payment_received',
        title='Payment Received',
        message=f"{scope} paid {money(amount)} by {method}",
        priority='low',
        table_id=table_id,
        order_id=order_id,
    )
    logger.info(f"Payment notification stored for table {table_id}")
