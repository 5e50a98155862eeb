"""
Domain events published by the lifecycle service.

The service hands every event to a publisher object. The default publisher
forwards them to the Django signals below once the surrounding database
transaction commits, so receivers never see state that was rolled back.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict

from django.db import transaction
from django.dispatch import Signal
from django.utils import timezone

logger = logging.getLogger(__name__)

ORDER_CREATED = 'order.created'
ORDER_STATUS_CHANGED = 'order.statusChanged'
TABLE_STATUS_CHANGED = 'table.statusChanged'
PAYMENT_RECORDED = 'payment.recorded'

# Receivers get ``event`` plus the payload keys as keyword arguments
order_created = Signal()
order_status_changed = Signal()
table_status_changed = Signal()
payment_recorded = Signal()

SIGNALS = {
    ORDER_CREATED: order_created,
    ORDER_STATUS_CHANGED: order_status_changed,
    TABLE_STATUS_CHANGED: table_status_changed,
    PAYMENT_RECORDED: payment_recorded,
}


@dataclass(frozen=True)
class DomainEvent:
    name: str
    payload: Dict[str, Any]
    occurred_at: Any = field(default_factory=timezone.now)


class SignalEventPublisher:
    """Publishes domain events as Django signals after commit"""

    def publish(self, event: DomainEvent):
        if transaction.get_connection().in_atomic_block:
            transaction.on_commit(lambda: self._send(event))
        else:
            self._send(event)

    def _send(self, event: DomainEvent):
        signal = SIGNALS.get(event.name)
        if signal is None:
            logger.warning(f"No signal registered for event {event.name}")
            return
        logger.info(f"Publishing {event.name}: {event.payload}")
        for receiver, response in signal.send_robust(sender=DomainEvent, event=event, **event.payload):
            if isinstance(response, Exception):
                logger.error(f"Receiver {getattr(receiver, '__name__', receiver)} failed on {event.name}: {response}", exc_info=response)


class RecordingEventPublisher:
    """Keeps published events in memory for assertions in tests"""

    def __init__(self):
        self.events = []

    def publish(self, event: DomainEvent):
        self.events.append(event)

    def names(self):
        return [event.name for event in self.events]
