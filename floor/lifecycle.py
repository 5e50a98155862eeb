"""
Order and table lifecycle for the cafe floor.

LifecycleService keeps three tightly coupled concerns in one place:

* order status transitions and the stored-total invariant,
* table status transitions gated on the orders sitting at the table,
* billing: table and per-order payments recorded as immutable transactions.

Every status write is a compare-and-swap against the status that was read,
so two tills acting on the same table cannot silently overwrite each other.
Domain events go to an injected publisher; nothing here depends on anyone
listening.
"""
import logging
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.db import transaction
from django.utils import timezone

from menu.models import MenuItem
from payment.models import Transaction
from .events import (
    DomainEvent, SignalEventPublisher,
    ORDER_CREATED, ORDER_STATUS_CHANGED, TABLE_STATUS_CHANGED, PAYMENT_RECORDED,
)
from .exceptions import (
    AmountMismatch, ConcurrentUpdate, InvalidOrder, InvalidPayment, InvalidTransition,
    NotFound, TableHasOpenOrders, TotalMismatch,
)
from .models import CafeSettings, Order, OrderLineItem, Table

logger = logging.getLogger(__name__)

CENT = Decimal('0.01')

ORDER_TRANSITIONS = {
    'pending': ('preparing', 'cancelled'),
    'preparing': ('ready', 'cancelled'),
    'ready': ('completed',),
    'completed': (),
    'cancelled': (),
}

# Statuses an order may be billed from; the active subset comes from settings
BILLABLE_CANDIDATES = ('ready', 'completed')


def quantize(amount) -> Decimal:
    return Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass
class Bill:
    subtotal: Decimal
    tax: Decimal
    service_charge: Decimal
    total: Decimal
    currency: str
    orders: List[Order] = field(default_factory=list)

    @property
    def order_ids(self):
        return [order.pk for order in self.orders]


class LifecycleService:

    def __init__(self, events=None, billing_statuses=BILLABLE_CANDIDATES,
                 auto_mark_billing=False, tolerance=CENT):
        billing_statuses = tuple(billing_statuses)
        unknown = [s for s in billing_statuses if s not in BILLABLE_CANDIDATES]
        if not billing_statuses or unknown:
            raise ImproperlyConfigured(
                f"Billing-eligible statuses must be drawn from {BILLABLE_CANDIDATES}, got {billing_statuses}"
            )
        self.events = events or SignalEventPublisher()
        self.billing_statuses = billing_statuses
        self.auto_mark_billing = auto_mark_billing
        self.tolerance = Decimal(tolerance)

    @classmethod
    def from_settings(cls, events=None):
        return cls(
            events=events,
            billing_statuses=getattr(settings, 'POS_BILLING_ELIGIBLE_STATUSES', BILLABLE_CANDIDATES),
            auto_mark_billing=getattr(settings, 'POS_AUTO_MARK_BILLING', False),
            tolerance=getattr(settings, 'POS_TOTAL_TOLERANCE', CENT),
        )

    # --- lookups -----------------------------------------------------------

    def _get_table(self, table_id) -> Table:
        try:
            return Table.objects.get(pk=table_id)
        except Table.DoesNotExist:
            raise NotFound(f"Table {table_id} not found", table_id=table_id)

    def _get_order(self, order_id) -> Order:
        try:
            return Order.objects.get(pk=order_id)
        except Order.DoesNotExist:
            raise NotFound(f"Order {order_id} not found", order_id=order_id)

    def billable_orders(self, table_id):
        return Order.objects.for_table(table_id).billable(self.billing_statuses)

    def outstanding_orders(self, table_id):
        """Unpaid orders that keep a table from being released"""
        statuses = set(Order.OPEN_STATUSES) | set(self.billing_statuses)
        return Order.objects.for_table(table_id).unsettled().filter(status__in=statuses)

    def is_billable(self, order) -> bool:
        return order.status in self.billing_statuses and not order.is_settled

    def _publish(self, name, **payload):
        self.events.publish(DomainEvent(name=name, payload=payload))

    # --- order lifecycle ---------------------------------------------------

    def create_order(self, table_id, line_items, notes='') -> Order:
        """
        Place an order for a table.

        ``line_items`` is a list of ``{'menu_item': <id or MenuItem>, 'quantity': n}``.
        Prices are captured from the menu now and never looked up again.
        """
        if not line_items:
            raise InvalidOrder("An order needs at least one line item", table_id=table_id)

        with transaction.atomic():
            table = self._get_table(table_id)
            if table.status == 'disabled':
                raise InvalidTransition(
                    f"Table {table.pk} is disabled and cannot take orders",
                    table_id=table.pk, status=table.status,
                )

            lines = [self._snapshot_line(line) for line in line_items]
            order = Order.objects.create(
                table=table,
                notes=notes,
                total_amount=self._sum_lines(lines),
            )
            for line in lines:
                line.order = order
            OrderLineItem.objects.bulk_create(lines)

            if table.status in ('available', 'reserved'):
                self._swap_table_status(table, 'occupied')

            # Counts units, not lines
            item_count = sum(line.quantity for line in lines)
            logger.info(f"Order {order.pk} placed for table {table.pk}: {item_count} items, total {order.total_amount}")
            self._publish(
                ORDER_CREATED,
                order_id=order.pk, table_id=table.pk,
                total=order.total_amount, item_count=item_count,
            )
        return order

    def _snapshot_line(self, line) -> OrderLineItem:
        menu_item = line.get('menu_item')
        menu_item_id = getattr(menu_item, 'pk', menu_item)
        quantity = line.get('quantity')

        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise InvalidOrder(
                f"Quantity for menu item {menu_item_id} must be a positive integer",
                menu_item_id=menu_item_id, quantity=quantity,
            )

        item = MenuItem.objects.filter(pk=menu_item_id).first()
        if item is None:
            raise NotFound(f"Menu item {menu_item_id} not found", menu_item_id=menu_item_id)
        if not item.in_stock:
            raise InvalidOrder(f"{item.name} is out of stock", menu_item_id=item.pk)

        return OrderLineItem(menu_item=item, name=item.name, price=item.price, quantity=quantity)

    @staticmethod
    def _sum_lines(lines) -> Decimal:
        return quantize(sum((line.price * line.quantity for line in lines), Decimal('0')))

    def advance_status(self, order_id, new_status) -> Order:
        if new_status not in ORDER_TRANSITIONS:
            raise InvalidTransition(
                f"'{new_status}' is not a valid order status",
                order_id=order_id, to_status=new_status,
            )

        with transaction.atomic():
            order = self._get_order(order_id)
            previous = order.status
            if new_status not in ORDER_TRANSITIONS[previous]:
                raise InvalidTransition(
                    f"Cannot move order {order.pk} from {previous} to {new_status}",
                    order_id=order.pk, from_status=previous, to_status=new_status,
                )

            updated = Order.objects.filter(pk=order.pk, status=previous).update(
                status=new_status, updated_at=timezone.now()
            )
            if not updated:
                raise ConcurrentUpdate(
                    f"Order {order.pk} changed status while moving it from {previous} to {new_status}",
                    order_id=order.pk, expected=previous,
                )
            order.status = new_status
            logger.info(f"Order {order.pk}: {previous} -> {new_status}")
            self._publish(
                ORDER_STATUS_CHANGED,
                order_id=order.pk, table_id=order.table_id,
                from_status=previous, to_status=new_status,
            )

            if self.is_billable(order):
                self._on_billing_eligible(order)
            self.reconcile(order.table_id)
        return order

    def approve_order(self, order_id) -> Order:
        """Staff approval sends a pending order to the kitchen."""
        return self.advance_status(order_id, 'preparing')

    def reject_order(self, order_id) -> Order:
        return self.advance_status(order_id, 'cancelled')

    def _on_billing_eligible(self, order):
        logger.info(f"Table {order.table_id} has a billable order ({order.pk})")
        if not self.auto_mark_billing:
            return
        table = self._get_table(order.table_id)
        if table.status == 'occupied':
            self._swap_table_status(table, 'billing')

    def recompute_total(self, order) -> Decimal:
        """Sum of quantity x captured price over the order's line items. No writes."""
        if not isinstance(order, Order):
            order = self._get_order(order)
        return self._sum_lines(order.items.all())

    def check_total(self, order) -> Optional[TotalMismatch]:
        """
        Read-path validation: returns a TotalMismatch describing the defect
        (and logs it) instead of raising, so reads are never blocked.
        """
        recomputed = self.recompute_total(order)
        if abs(order.total_amount - recomputed) <= self.tolerance:
            return None
        mismatch = TotalMismatch(
            f"Order {order.pk} stored total {order.total_amount} does not match its line items ({recomputed})",
            order_id=order.pk, table_id=order.table_id,
            stored=order.total_amount, recomputed=recomputed,
        )
        logger.warning(mismatch.message)
        return mismatch

    def verify_total(self, order) -> Decimal:
        """Write-path validation: raises TotalMismatch."""
        mismatch = self.check_total(order)
        if mismatch is not None:
            raise mismatch
        return order.total_amount

    # --- table lifecycle ---------------------------------------------------

    def _swap_table_status(self, table, new_status) -> Table:
        previous = table.status
        updated = Table.objects.filter(pk=table.pk, status=previous).update(
            status=new_status, updated_at=timezone.now()
        )
        if not updated:
            raise ConcurrentUpdate(
                f"Table {table.pk} changed status while moving it from {previous} to {new_status}",
                table_id=table.pk, expected=previous,
            )
        table.status = new_status
        logger.info(f"Table {table.pk}: {previous} -> {new_status}")
        self._publish(TABLE_STATUS_CHANGED, table_id=table.pk, from_status=previous, to_status=new_status)
        return table

    def _refuse(self, table, target):
        return InvalidTransition(
            f"Table {table.pk} is {table.status} and cannot move to {target}",
            table_id=table.pk, from_status=table.status, to_status=target,
        )

    def mark_occupied(self, table_id) -> Table:
        with transaction.atomic():
            table = self._get_table(table_id)
            if table.status == 'occupied':
                return table
            if table.status not in ('available', 'reserved'):
                raise self._refuse(table, 'occupied')
            return self._swap_table_status(table, 'occupied')

    def mark_billing(self, table_id) -> Table:
        with transaction.atomic():
            table = self._get_table(table_id)
            if table.status not in ('occupied', 'billing'):
                raise self._refuse(table, 'billing')
            if not self.billable_orders(table.pk).exists():
                raise InvalidTransition(
                    f"Table {table.pk} has no orders ready for billing",
                    table_id=table.pk, billing_statuses=list(self.billing_statuses),
                )
            if table.status == 'billing':
                return table
            return self._swap_table_status(table, 'billing')

    def mark_available(self, table_id) -> Table:
        with transaction.atomic():
            table = self._get_table(table_id)
            blocking = list(self.outstanding_orders(table.pk).values_list('pk', flat=True))
            if blocking:
                raise TableHasOpenOrders(
                    f"Table {table.pk} still has unpaid orders",
                    table_id=table.pk, order_ids=blocking,
                )
            if table.status == 'available':
                return table
            return self._swap_table_status(table, 'available')

    def reserve_table(self, table_id) -> Table:
        with transaction.atomic():
            table = self._get_table(table_id)
            if table.status == 'reserved':
                return table
            if table.status != 'available':
                raise self._refuse(table, 'reserved')
            return self._swap_table_status(table, 'reserved')

    def disable_table(self, table_id) -> Table:
        with transaction.atomic():
            table = self._get_table(table_id)
            if table.status == 'disabled':
                return table
            if table.status not in ('available', 'reserved'):
                raise self._refuse(table, 'disabled')
            return self._swap_table_status(table, 'disabled')

    def reconcile(self, table_id) -> Table:
        """
        Reset a table stuck in billing with nothing left to bill: back to
        occupied while an open order remains, otherwise available.
        No-op once the table is consistent.
        """
        with transaction.atomic():
            table = self._get_table(table_id)
            if table.status != 'billing':
                return table
            if self.billable_orders(table.pk).exists():
                return table
            target = 'occupied' if Order.objects.for_table(table.pk).open().exists() else 'available'
            logger.info(f"Table {table.pk} is billing with nothing to bill, resetting to {target}")
            return self._swap_table_status(table, target)

    def reconcile_all(self) -> List[Table]:
        changed = []
        for table_id in Table.objects.filter(status='billing').values_list('pk', flat=True):
            table = self.reconcile(table_id)
            if table.status != 'billing':
                changed.append(table)
        return changed

    # --- billing -----------------------------------------------------------

    def _build_bill(self, orders, apply_tax) -> Bill:
        cafe = CafeSettings.load()
        subtotal = quantize(sum((order.total_amount for order in orders), Decimal('0')))
        tax = quantize(subtotal * cafe.tax_rate) if apply_tax else quantize(0)
        service_charge = quantize(subtotal * cafe.service_charge_rate)
        return Bill(
            subtotal=subtotal,
            tax=tax,
            service_charge=service_charge,
            total=subtotal + tax + service_charge,
            currency=cafe.currency,
            orders=list(orders),
        )

    def compute_table_total(self, table_id, apply_tax=False) -> Bill:
        table = self._get_table(table_id)
        return self._build_bill(self.billable_orders(table.pk), apply_tax)

    def compute_order_total(self, order_id, apply_tax=False) -> Bill:
        order = self._get_order(order_id)
        return self._order_bill(order, apply_tax)

    def _order_bill(self, order, apply_tax) -> Bill:
        if not self.is_billable(order):
            raise InvalidTransition(
                f"Order {order.pk} is not ready for billing",
                order_id=order.pk, status=order.status, settled=order.is_settled,
            )
        return self._build_bill([order], apply_tax)

    def _payable_amount(self, bill, amount, override, **scope) -> Decimal:
        if amount is None:
            return bill.total
        amount = quantize(amount)
        if amount < 0:
            raise AmountMismatch("Payment amount cannot be negative", expected=bill.total, actual=amount, **scope)
        if abs(amount - bill.total) > self.tolerance and not override:
            raise AmountMismatch(
                f"Payment of {amount} does not match the bill total of {bill.total}",
                expected=bill.total, actual=amount, **scope,
            )
        return amount

    def _check_method(self, method):
        if method not in dict(Transaction.METHOD_CHOICES):
            raise InvalidPayment(f"Unknown payment method '{method}'", method=method)

    def _settle(self, orders, txn):
        order_ids = [order.pk for order in orders]
        settled = Order.objects.filter(pk__in=order_ids, settled_by__isnull=True).update(
            settled_by=txn, updated_at=timezone.now()
        )
        if settled != len(order_ids):
            raise ConcurrentUpdate(
                "One or more orders were paid by another transaction",
                order_ids=order_ids,
            )
        for order in orders:
            order.settled_by = txn

    def _release_after_payment(self, table_id) -> Table:
        """
        Free a table once nothing is left to pay, whether or not it was moved
        to billing first. Otherwise fall back to reconcile.
        """
        table = self._get_table(table_id)
        if table.status in ('occupied', 'billing') and not self.outstanding_orders(table.pk).exists():
            return self._swap_table_status(table, 'available')
        return self.reconcile(table.pk)

    def record_payment(self, table_id, amount, method, apply_tax=False, override=False, notes='') -> Transaction:
        """
        Take one payment for everything billable at a table.

        ``amount=None`` charges the computed total. A differing amount needs
        ``override`` (manual discounts and the like).
        """
        self._check_method(method)
        with transaction.atomic():
            table = self._get_table(table_id)
            bill = self._build_bill(self.billable_orders(table.pk), apply_tax)
            if not bill.orders:
                raise InvalidTransition(
                    f"Table {table.pk} has no orders ready for billing",
                    table_id=table.pk, billing_statuses=list(self.billing_statuses),
                )
            for order in bill.orders:
                self.verify_total(order)
            amount = self._payable_amount(bill, amount, override, table_id=table.pk)

            txn = Transaction.objects.create(
                table=table,
                amount=amount,
                method=method,
                subtotal=bill.subtotal,
                tax=bill.tax,
                service_charge=bill.service_charge,
                override=bool(override) and amount != bill.total,
                notes=notes,
            )
            self._settle(bill.orders, txn)
            logger.info(f"Payment {txn.pk}: table {table.pk} paid {amount} by {method} for orders {bill.order_ids}")
            self._publish(
                PAYMENT_RECORDED,
                table_id=table.pk, order_id=None, transaction_id=txn.pk,
                amount=txn.amount, method=method,
            )
            self._release_after_payment(table.pk)
        return txn

    def record_individual_order_payment(self, order_id, amount, method, apply_tax=False,
                                        override=False, notes='') -> Transaction:
        """Pay a single order when diners split the bill per order."""
        self._check_method(method)
        with transaction.atomic():
            order = self._get_order(order_id)
            bill = self._order_bill(order, apply_tax)
            self.verify_total(order)
            amount = self._payable_amount(bill, amount, override, order_id=order.pk)

            txn = Transaction.objects.create(
                table_id=order.table_id,
                order=order,
                amount=amount,
                method=method,
                subtotal=bill.subtotal,
                tax=bill.tax,
                service_charge=bill.service_charge,
                override=bool(override) and amount != bill.total,
                notes=notes,
            )
            self._settle([order], txn)
            logger.info(f"Payment {txn.pk}: order {order.pk} (table {order.table_id}) paid {amount} by {method}")
            self._publish(
                PAYMENT_RECORDED,
                table_id=order.table_id, order_id=order.pk, transaction_id=txn.pk,
                amount=txn.amount, method=method,
            )
            self._release_after_payment(order.table_id)
        return txn
