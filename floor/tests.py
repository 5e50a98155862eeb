from decimal import Decimal
from io import StringIO
from unittest import mock

from django.core.exceptions import ImproperlyConfigured
from django.core.management import call_command
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from menu.models import MenuItem
from payment.models import Transaction
from .events import (
    RecordingEventPublisher, order_status_changed,
    ORDER_CREATED, ORDER_STATUS_CHANGED, TABLE_STATUS_CHANGED, PAYMENT_RECORDED,
)
from .exceptions import (
    AmountMismatch, ConcurrentUpdate, InvalidOrder, InvalidPayment, InvalidTransition, NotFound,
    TableHasOpenOrders, TotalMismatch,
)
from .lifecycle import LifecycleService
from .models import Table, Order, OrderLineItem, CafeSettings


class LifecycleTestCase(TestCase):
    """Table 3 with a pizza (299.00) and an iced tea (120.00) on the menu"""

    def setUp(self):
        self.events = RecordingEventPublisher()
        self.service = LifecycleService(events=self.events)
        self.table = Table.objects.create(id=3, name='Table 3')
        self.pizza = MenuItem.objects.create(name='Margherita Pizza', price=Decimal('299.00'), category='pizza')
        self.tea = MenuItem.objects.create(name='Iced Tea', price=Decimal('120.00'), category='drinks')

    def place_order(self, table=None):
        return self.service.create_order(
            (table or self.table).id,
            [{'menu_item': self.pizza.id, 'quantity': 1}, {'menu_item': self.tea, 'quantity': 2}],
        )

    def advance(self, order, *statuses):
        for new_status in statuses:
            order = self.service.advance_status(order.id, new_status)
        return order

    def table_status(self):
        self.table.refresh_from_db()
        return self.table.status


class CreateOrderTests(LifecycleTestCase):

    def test_create_order_captures_prices_and_total(self):
        """Placing an order stores the menu prices and the summed total"""
        order = self.place_order()

        self.assertEqual(order.status, 'pending')
        self.assertEqual(order.total_amount, Decimal('539.00'))
        self.assertEqual(order.items.count(), 2)
        tea_line = order.items.get(menu_item=self.tea)
        self.assertEqual(tea_line.price, Decimal('120.00'))
        self.assertEqual(tea_line.name, 'Iced Tea')

    def test_create_order_occupies_available_table(self):
        self.place_order()

        self.assertEqual(self.table_status(), 'occupied')
        self.assertEqual(self.events.names(), [TABLE_STATUS_CHANGED, ORDER_CREATED])
        created = self.events.events[1].payload
        self.assertEqual(created['table_id'], 3)
        self.assertEqual(created['item_count'], 3)
        self.assertEqual(created['total'], Decimal('539.00'))

    def test_create_order_occupies_reserved_table(self):
        self.service.reserve_table(self.table.id)
        self.place_order()

        self.assertEqual(self.table_status(), 'occupied')

    def test_price_change_does_not_touch_existing_order(self):
        """Later menu price changes leave captured prices alone"""
        order = self.place_order()
        self.pizza.price = Decimal('350.00')
        self.pizza.save()

        order.refresh_from_db()
        self.assertEqual(order.total_amount, Decimal('539.00'))
        self.assertEqual(self.service.recompute_total(order), Decimal('539.00'))

    def test_empty_order_rejected(self):
        with self.assertRaises(InvalidOrder):
            self.service.create_order(self.table.id, [])
        self.assertEqual(Order.objects.count(), 0)

    def test_invalid_quantity_rejected(self):
        for quantity in (0, -1, 1.5, True, None):
            with self.assertRaises(InvalidOrder):
                self.service.create_order(self.table.id, [{'menu_item': self.pizza.id, 'quantity': quantity}])

    def test_unknown_menu_item(self):
        with self.assertRaises(NotFound):
            self.service.create_order(self.table.id, [{'menu_item': 9999, 'quantity': 1}])
        self.assertEqual(self.table_status(), 'available')

    def test_out_of_stock_item_rejected(self):
        self.tea.in_stock = False
        self.tea.save()

        with self.assertRaises(InvalidOrder):
            self.place_order()
        self.assertEqual(Order.objects.count(), 0)

    def test_disabled_table_rejects_orders(self):
        self.service.disable_table(self.table.id)

        with self.assertRaises(InvalidTransition):
            self.place_order()

    def test_unknown_table(self):
        with self.assertRaises(NotFound):
            self.service.create_order(404, [{'menu_item': self.pizza.id, 'quantity': 1}])


class OrderStatusTests(LifecycleTestCase):

    def test_happy_path_transitions(self):
        order = self.place_order()
        order = self.advance(order, 'preparing', 'ready', 'completed')

        order.refresh_from_db()
        self.assertEqual(order.status, 'completed')
        changes = [e.payload['to_status'] for e in self.events.events if e.name == ORDER_STATUS_CHANGED]
        self.assertEqual(changes, ['preparing', 'ready', 'completed'])

    def test_skipping_a_step_is_rejected(self):
        order = self.place_order()

        with self.assertRaises(InvalidTransition):
            self.service.advance_status(order.id, 'ready')
        order.refresh_from_db()
        self.assertEqual(order.status, 'pending')

    def test_terminal_statuses_are_final(self):
        completed = self.advance(self.place_order(), 'preparing', 'ready', 'completed')
        cancelled = self.advance(self.place_order(), 'cancelled')

        for target in ('pending', 'preparing', 'ready', 'cancelled'):
            with self.assertRaises(InvalidTransition):
                self.service.advance_status(completed.id, target)
        for target in ('pending', 'preparing', 'ready', 'completed'):
            with self.assertRaises(InvalidTransition):
                self.service.advance_status(cancelled.id, target)

    def test_ready_cannot_be_cancelled(self):
        order = self.advance(self.place_order(), 'preparing', 'ready')

        with self.assertRaises(InvalidTransition):
            self.service.advance_status(order.id, 'cancelled')

    def test_unknown_status(self):
        order = self.place_order()

        with self.assertRaises(InvalidTransition):
            self.service.advance_status(order.id, 'served')

    def test_approve_and_reject(self):
        approved = self.service.approve_order(self.place_order().id)
        rejected = self.service.reject_order(self.place_order().id)

        self.assertEqual(approved.status, 'preparing')
        self.assertEqual(rejected.status, 'cancelled')

    def test_concurrent_status_change_detected(self):
        """A stale read loses the compare-and-swap instead of overwriting"""
        order = self.place_order()
        stale = Order.objects.get(pk=order.pk)
        Order.objects.filter(pk=order.pk).update(status='cancelled')

        with mock.patch.object(self.service, '_get_order', return_value=stale):
            with self.assertRaises(ConcurrentUpdate):
                self.service.advance_status(order.id, 'preparing')
        order.refresh_from_db()
        self.assertEqual(order.status, 'cancelled')

    def test_auto_mark_billing(self):
        service = LifecycleService(events=self.events, auto_mark_billing=True)
        order = self.place_order()
        service.advance_status(order.id, 'preparing')
        self.assertEqual(self.table_status(), 'occupied')

        service.advance_status(order.id, 'ready')
        self.assertEqual(self.table_status(), 'billing')

    def test_ready_without_auto_mark_keeps_table_occupied(self):
        self.advance(self.place_order(), 'preparing', 'ready')

        self.assertEqual(self.table_status(), 'occupied')


class TotalCheckTests(LifecycleTestCase):

    def test_matching_total(self):
        order = self.place_order()

        self.assertIsNone(self.service.check_total(order))
        self.assertEqual(self.service.verify_total(order), Decimal('539.00'))

    def test_tolerance_of_one_cent(self):
        order = self.place_order()
        Order.objects.filter(pk=order.pk).update(total_amount=Decimal('539.01'))
        order.refresh_from_db()

        self.assertIsNone(self.service.check_total(order))

    def test_corrupted_total_reported_on_read(self):
        order = self.place_order()
        Order.objects.filter(pk=order.pk).update(total_amount=Decimal('600.00'))
        order.refresh_from_db()

        with self.assertLogs('floor.lifecycle', level='WARNING'):
            mismatch = self.service.check_total(order)
        self.assertIsInstance(mismatch, TotalMismatch)
        self.assertEqual(mismatch.context['recomputed'], Decimal('539.00'))

    def test_corrupted_total_blocks_payment(self):
        order = self.advance(self.place_order(), 'preparing', 'ready')
        Order.objects.filter(pk=order.pk).update(total_amount=Decimal('600.00'))

        with self.assertRaises(TotalMismatch):
            self.service.record_payment(self.table.id, None, 'cash')
        self.assertEqual(Transaction.objects.count(), 0)


class TableLifecycleTests(LifecycleTestCase):

    def test_mark_billing_requires_billable_order(self):
        order = self.place_order()

        with self.assertRaises(InvalidTransition):
            self.service.mark_billing(self.table.id)

        self.advance(order, 'preparing', 'ready')
        self.service.mark_billing(self.table.id)
        self.assertEqual(self.table_status(), 'billing')

    def test_mark_billing_from_available_rejected(self):
        with self.assertRaises(InvalidTransition):
            self.service.mark_billing(self.table.id)

    def test_mark_available_blocked_by_open_orders(self):
        order = self.place_order()

        with self.assertRaises(TableHasOpenOrders) as ctx:
            self.service.mark_available(self.table.id)
        self.assertEqual(ctx.exception.context['order_ids'], [order.id])
        self.assertEqual(self.table_status(), 'occupied')

    def test_mark_available_blocked_by_unpaid_completed_order(self):
        self.advance(self.place_order(), 'preparing', 'ready', 'completed')

        with self.assertRaises(TableHasOpenOrders):
            self.service.mark_available(self.table.id)

    def test_mark_available_after_cancellation(self):
        self.advance(self.place_order(), 'cancelled')

        self.service.mark_available(self.table.id)
        self.assertEqual(self.table_status(), 'available')

    def test_mark_occupied_and_idempotence(self):
        self.service.mark_occupied(self.table.id)
        self.service.mark_occupied(self.table.id)

        self.assertEqual(self.table_status(), 'occupied')
        self.assertEqual(self.events.names(), [TABLE_STATUS_CHANGED])

    def test_reserve_and_disable_rules(self):
        self.service.mark_occupied(self.table.id)
        with self.assertRaises(InvalidTransition):
            self.service.reserve_table(self.table.id)
        with self.assertRaises(InvalidTransition):
            self.service.disable_table(self.table.id)

        other = Table.objects.create(name='Table 4')
        self.service.reserve_table(other.id)
        self.service.disable_table(other.id)
        other.refresh_from_db()
        self.assertEqual(other.status, 'disabled')

    def test_stale_table_status_detected(self):
        stale = Table.objects.get(pk=self.table.pk)
        Table.objects.filter(pk=self.table.pk).update(status='reserved')

        with mock.patch.object(self.service, '_get_table', return_value=stale):
            with self.assertRaises(ConcurrentUpdate):
                self.service.mark_occupied(self.table.id)

    def test_reconcile_resets_stuck_billing_table(self):
        """A billing table with nothing left to bill goes back to available"""
        Table.objects.filter(pk=self.table.pk).update(status='billing')

        self.service.reconcile(self.table.id)
        self.assertEqual(self.table_status(), 'available')

        self.service.reconcile(self.table.id)
        self.assertEqual(self.table_status(), 'available')
        self.assertEqual(self.events.names(), [TABLE_STATUS_CHANGED])

    def test_reconcile_keeps_table_occupied_with_open_orders(self):
        self.place_order()
        Table.objects.filter(pk=self.table.pk).update(status='billing')

        self.service.reconcile(self.table.id)
        self.assertEqual(self.table_status(), 'occupied')

    def test_reconcile_leaves_billable_table_alone(self):
        self.advance(self.place_order(), 'preparing', 'ready')
        self.service.mark_billing(self.table.id)

        self.service.reconcile(self.table.id)
        self.assertEqual(self.table_status(), 'billing')

    def test_reconcile_after_cancelling_last_billable_order(self):
        order = self.advance(self.place_order(), 'preparing')
        Table.objects.filter(pk=self.table.pk).update(status='billing')

        self.service.advance_status(order.id, 'cancelled')
        self.assertEqual(self.table_status(), 'available')

    def test_reconcile_all(self):
        self.advance(self.place_order(), 'preparing', 'ready')
        other = Table.objects.create(name='Table 4', status='billing')
        Table.objects.filter(pk=self.table.pk).update(status='billing')

        changed = self.service.reconcile_all()
        self.assertEqual([table.id for table in changed], [other.id])


class BillingTests(LifecycleTestCase):

    def ready_order(self):
        return self.advance(self.place_order(), 'preparing', 'ready')

    def test_full_table_payment(self):
        """Order, prepare, serve, bill and pay: the table is released"""
        order = self.ready_order()
        self.service.mark_billing(self.table.id)

        bill = self.service.compute_table_total(self.table.id)
        self.assertEqual(bill.total, Decimal('539.00'))
        self.assertEqual(bill.order_ids, [order.id])

        txn = self.service.record_payment(self.table.id, None, 'cash')

        self.assertEqual(txn.amount, Decimal('539.00'))
        self.assertEqual(txn.scope, 'table')
        order.refresh_from_db()
        self.assertEqual(order.settled_by, txn)
        self.assertEqual(order.status, 'ready')
        self.assertEqual(self.table_status(), 'available')
        self.assertIn(PAYMENT_RECORDED, self.events.names())

    def test_payment_with_exact_amount(self):
        self.ready_order()

        txn = self.service.record_payment(self.table.id, Decimal('539.00'), 'online')
        self.assertFalse(txn.override)
        self.assertEqual(self.table_status(), 'available')

    def test_payment_frees_occupied_table_without_billing_step(self):
        """Paying straight from occupied releases the table once nothing is owed"""
        self.ready_order()
        self.assertEqual(self.table_status(), 'occupied')

        self.service.record_payment(self.table.id, None, 'cash')

        self.assertEqual(self.table_status(), 'available')
        self.assertFalse(self.service.outstanding_orders(self.table.id).exists())

    def test_individual_payment_frees_occupied_table(self):
        order = self.ready_order()

        self.service.record_individual_order_payment(order.id, None, 'online')
        self.assertEqual(self.table_status(), 'available')

    def test_payment_from_occupied_keeps_table_with_open_orders(self):
        self.ready_order()
        self.advance(self.place_order(), 'preparing')

        self.service.record_payment(self.table.id, None, 'cash')
        self.assertEqual(self.table_status(), 'occupied')

    def test_amount_mismatch_rejected_without_override(self):
        self.ready_order()

        with self.assertRaises(AmountMismatch) as ctx:
            self.service.record_payment(self.table.id, Decimal('500.00'), 'cash')
        self.assertEqual(ctx.exception.context['expected'], Decimal('539.00'))
        self.assertEqual(Transaction.objects.count(), 0)

    def test_override_accepts_discounted_amount(self):
        self.ready_order()

        txn = self.service.record_payment(self.table.id, Decimal('500.00'), 'cash', override=True)
        self.assertTrue(txn.override)
        self.assertEqual(txn.subtotal, Decimal('539.00'))

    def test_negative_amount_rejected(self):
        self.ready_order()

        with self.assertRaises(AmountMismatch):
            self.service.record_payment(self.table.id, Decimal('-1.00'), 'cash', override=True)

    def test_tax_applied_from_settings(self):
        self.ready_order()

        bill = self.service.compute_table_total(self.table.id, apply_tax=True)
        self.assertEqual(bill.tax, Decimal('70.07'))
        self.assertEqual(bill.total, Decimal('609.07'))

    def test_service_charge_from_settings(self):
        cafe = CafeSettings.load()
        cafe.service_charge_rate = Decimal('0.10')
        cafe.save()
        self.ready_order()

        bill = self.service.compute_table_total(self.table.id)
        self.assertEqual(bill.service_charge, Decimal('53.90'))
        self.assertEqual(bill.total, Decimal('592.90'))

    def test_payment_with_nothing_billable(self):
        self.place_order()

        with self.assertRaises(InvalidTransition):
            self.service.record_payment(self.table.id, None, 'cash')

    def test_second_payment_rejected(self):
        self.ready_order()
        self.service.record_payment(self.table.id, None, 'cash')

        with self.assertRaises(InvalidTransition):
            self.service.record_payment(self.table.id, None, 'cash')
        self.assertEqual(Transaction.objects.count(), 1)

    def test_table_payment_leaves_open_orders(self):
        """Paying the ready order keeps the table occupied for the order still cooking"""
        self.ready_order()
        cooking = self.advance(self.place_order(), 'preparing')
        self.service.mark_billing(self.table.id)

        self.service.record_payment(self.table.id, None, 'cash')

        self.assertEqual(self.table_status(), 'occupied')
        cooking.refresh_from_db()
        self.assertIsNone(cooking.settled_by)

    def test_individual_order_payment(self):
        first = self.ready_order()
        second = self.ready_order()
        self.service.mark_billing(self.table.id)

        txn = self.service.record_individual_order_payment(first.id, None, 'cash')

        self.assertEqual(txn.scope, 'order')
        self.assertEqual(txn.order, first)
        self.assertEqual(self.table_status(), 'billing')
        self.assertEqual(self.service.compute_table_total(self.table.id).order_ids, [second.id])

        self.service.record_individual_order_payment(second.id, Decimal('539.00'), 'online')
        self.assertEqual(self.table_status(), 'available')

    def test_individual_payment_requires_billable_order(self):
        order = self.place_order()

        with self.assertRaises(InvalidTransition):
            self.service.record_individual_order_payment(order.id, None, 'cash')

    def test_unknown_payment_method(self):
        self.ready_order()

        with self.assertRaises(InvalidPayment):
            self.service.record_payment(self.table.id, None, 'cheque')

    def test_billing_statuses_configurable(self):
        service = LifecycleService(events=self.events, billing_statuses=('completed',))
        order = self.ready_order()
        self.assertFalse(service.billable_orders(self.table.id).exists())

        self.advance(order, 'completed')
        self.assertTrue(service.billable_orders(self.table.id).exists())

    def test_invalid_billing_statuses(self):
        with self.assertRaises(ImproperlyConfigured):
            LifecycleService(billing_statuses=())
        with self.assertRaises(ImproperlyConfigured):
            LifecycleService(billing_statuses=('pending',))


class SignalPublisherTests(TestCase):
    """The default publisher fires Django signals after commit"""

    def test_status_change_signal_sent_on_commit(self):
        table = Table.objects.create(name='Patio')
        item = MenuItem.objects.create(name='Momo', price=Decimal('180.00'))
        service = LifecycleService()
        order = service.create_order(table.id, [{'menu_item': item.id, 'quantity': 1}])

        received = []

        def handler(sender, **kwargs):
            received.append(kwargs)

        order_status_changed.connect(handler, dispatch_uid='test-status-handler')
        try:
            with self.captureOnCommitCallbacks(execute=True) as callbacks:
                service.advance_status(order.id, 'preparing')
                self.assertEqual(received, [])
        finally:
            order_status_changed.disconnect(dispatch_uid='test-status-handler')

        self.assertTrue(callbacks)
        self.assertEqual(len(received), 1)
        self.assertEqual(received[0]['from_status'], 'pending')
        self.assertEqual(received[0]['to_status'], 'preparing')
        self.assertEqual(received[0]['event'].name, ORDER_STATUS_CHANGED)


class CafeSettingsTests(TestCase):

    def test_singleton(self):
        first = CafeSettings.load()
        first.cafe_name = 'Himalayan Brew'
        first.save()
        CafeSettings(cafe_name='Another').save()

        self.assertEqual(CafeSettings.objects.count(), 1)
        self.assertEqual(CafeSettings.load().cafe_name, 'Another')


class ManagementCommandTests(LifecycleTestCase):

    def test_reconcile_tables_command(self):
        Table.objects.filter(pk=self.table.pk).update(status='billing')

        call_command('reconcile_tables', verbosity=0)
        self.assertEqual(self.table_status(), 'available')

    def test_audit_order_totals_command(self):
        order = self.place_order()
        Order.objects.filter(pk=order.pk).update(total_amount=Decimal('1.00'))

        out = StringIO()
        call_command('audit_order_totals', stdout=out)
        self.assertIn(f"Order {order.id}", out.getvalue())
        self.assertIn('1 of 1 orders', out.getvalue())


class FloorAPITests(APITestCase):
    """End-to-end flow through the HTTP API"""

    def setUp(self):
        self.client.defaults['HTTP_X_API_KEY'] = 'demo'
        self.client.defaults['HTTP_X_STAFF_ROLE'] = 'admin'
        self.table = Table.objects.create(id=3, name='Table 3')
        self.pizza = MenuItem.objects.create(name='Margherita Pizza', price=Decimal('299.00'), category='pizza')
        self.tea = MenuItem.objects.create(name='Iced Tea', price=Decimal('120.00'), category='drinks')

    def create_order(self):
        data = {
            'table_id': self.table.id,
            'items': [
                {'menu_item_id': self.pizza.id, 'quantity': 1},
                {'menu_item_id': self.tea.id, 'quantity': 2},
            ]
        }
        return self.client.post(reverse('order_list'), data, format='json')

    def advance(self, order_id, new_status):
        url = reverse('order_status', kwargs={'order_id': order_id})
        return self.client.post(url, {'status': new_status}, format='json')

    def test_create_order(self):
        response = self.create_order()

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['total_amount'], '539.00')
        self.assertEqual(response.data['status'], 'pending')
        self.assertEqual(len(response.data['items']), 2)
        self.assertIsNone(response.data['total_check'])

    def test_create_order_validation(self):
        response = self.client.post(reverse('order_list'), {'table_id': self.table.id, 'items': []}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        data = {'table_id': self.table.id, 'items': [{'menu_item_id': 9999, 'quantity': 1}]}
        response = self.client.post(reverse('order_list'), data, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['code'], 'not_found')

    def test_full_flow(self):
        order_id = self.create_order().data['id']
        for new_status in ('preparing', 'ready'):
            self.assertEqual(self.advance(order_id, new_status).status_code, status.HTTP_200_OK)

        response = self.client.post(reverse('table_billing', kwargs={'table_id': self.table.id}))
        self.assertEqual(response.data['status'], 'billing')

        response = self.client.get(reverse('table_bill', kwargs={'table_id': self.table.id}))
        self.assertEqual(response.data['total'], '539.00')
        self.assertEqual(response.data['order_ids'], [order_id])

        response = self.client.post(
            reverse('record_table_payment', kwargs={'table_id': self.table.id}),
            {'method': 'cash'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['amount'], '539.00')

        response = self.client.get(reverse('table_detail', kwargs={'table_id': self.table.id}))
        self.assertEqual(response.data['status'], 'available')

    def test_invalid_transition_returns_conflict(self):
        order_id = self.create_order().data['id']

        response = self.advance(order_id, 'completed')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['code'], 'invalid_transition')
        self.assertEqual(response.data['from_status'], 'pending')

    def test_mark_available_with_open_orders(self):
        order_id = self.create_order().data['id']

        response = self.client.post(reverse('table_available', kwargs={'table_id': self.table.id}))
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['code'], 'table_has_open_orders')
        self.assertEqual(response.data['order_ids'], [order_id])

    def test_order_detail_flags_total_mismatch(self):
        order_id = self.create_order().data['id']
        Order.objects.filter(pk=order_id).update(total_amount=Decimal('10.00'))

        response = self.client.get(reverse('order_detail', kwargs={'order_id': order_id}))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_check']['code'], 'total_mismatch')

    def test_order_list_filters(self):
        order_id = self.create_order().data['id']
        self.create_order()
        self.advance(order_id, 'cancelled')

        response = self.client.get(reverse('order_list'), {'status': 'cancelled'})
        self.assertEqual([order['id'] for order in response.data], [order_id])

    def test_approve_and_reject(self):
        first = self.create_order().data['id']
        second = self.create_order().data['id']

        response = self.client.post(reverse('order_approve', kwargs={'order_id': first}))
        self.assertEqual(response.data['status'], 'preparing')
        response = self.client.post(reverse('order_reject', kwargs={'order_id': second}))
        self.assertEqual(response.data['status'], 'cancelled')

    def test_kitchen_board(self):
        first = self.create_order().data['id']
        self.create_order()
        self.advance(first, 'preparing')

        response = self.client.get(reverse('kitchen_board'))
        self.assertEqual(len(response.data['pending']), 1)
        self.assertEqual(response.data['preparing'][0]['id'], first)
        self.assertEqual(response.data['ready'], [])

    def test_table_create_and_validation(self):
        response = self.client.post(reverse('table_list'), {'name': 'Terrace 1', 'capacity': 6}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'available')

        response = self.client.post(reverse('table_list'), {'name': 'Broken', 'capacity': 0}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_reserve_disable_and_reconcile(self):
        other = Table.objects.create(name='Table 4')

        response = self.client.post(reverse('table_reserve', kwargs={'table_id': other.id}))
        self.assertEqual(response.data['status'], 'reserved')
        response = self.client.post(reverse('table_disable', kwargs={'table_id': other.id}))
        self.assertEqual(response.data['status'], 'disabled')

        Table.objects.filter(pk=self.table.pk).update(status='billing')
        response = self.client.post(reverse('table_reconcile', kwargs={'table_id': self.table.id}))
        self.assertEqual(response.data['status'], 'available')

    def test_cafe_settings(self):
        response = self.client.patch(reverse('cafe_settings'), {'tax_rate': '0.10'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(CafeSettings.load().tax_rate, Decimal('0.10'))

        response = self.client.patch(reverse('cafe_settings'), {'tax_rate': '1.50'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_missing_api_key(self):
        del self.client.defaults['HTTP_X_API_KEY']

        response = self.client.get(reverse('table_list'))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_role_restrictions(self):
        self.client.defaults['HTTP_X_STAFF_ROLE'] = 'kitchen'

        response = self.create_order()
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.assertEqual(OrderLineItem.objects.count(), 0)

        self.client.defaults['HTTP_X_STAFF_ROLE'] = 'waiter'
        order_id = self.create_order().data['id']
        self.client.defaults['HTTP_X_STAFF_ROLE'] = 'kitchen'
        self.assertEqual(self.advance(order_id, 'preparing').status_code, status.HTTP_200_OK)

        # reads need no role
        del self.client.defaults['HTTP_X_STAFF_ROLE']
        self.assertEqual(self.client.get(reverse('order_list')).status_code, status.HTTP_200_OK)


class CafeScenarioTests(LifecycleTestCase):
    """Pizza and two iced teas at table 3, from order to payment"""

    def test_order_bill_and_pay(self):
        order = self.place_order()
        self.assertEqual(self.service.recompute_total(order), order.total_amount)
        self.assertEqual(self.table_status(), 'occupied')

        self.advance(order, 'preparing', 'ready')
        self.service.mark_billing(3)
        with self.assertRaises(TableHasOpenOrders):
            self.service.mark_available(3)

        with self.assertRaises(AmountMismatch):
            self.service.record_payment(3, Decimal('600.00'), 'cash')
        self.assertEqual(self.table_status(), 'billing')

        self.service.record_payment(3, Decimal('539.00'), 'cash')
        self.assertEqual(self.table_status(), 'available')
