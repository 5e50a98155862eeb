from decimal import Decimal
from unittest import mock

import redis
from django.test import TestCase
from django.urls import reverse
from rest_framework.test import APITestCase
from rest_framework import status

from floor.events import RecordingEventPublisher
from floor.lifecycle import LifecycleService
from floor.models import Table, Order
from inventory.models import InventoryItem
from menu.models import MenuItem
from .idempotency import IdempotencyStore
from .models import Transaction, ImmutableTransactionError
from .receipts import build_receipt


class FakeRedis:
    """Dict-backed stand-in for the two redis calls the store makes"""

    def __init__(self):
        self.data = {}
        self.ttls = {}

    def setex(self, key, ttl, value):
        self.data[key] = str(value)
        self.ttls[key] = ttl
        return True

    def get(self, key):
        return self.data.get(key)


class UnavailableRedis(FakeRedis):
    """Reads work, writes fail as if the server went away mid-request"""

    def setex(self, key, ttl, value):
        raise redis.ConnectionError('Connection refused')


class PaymentTestCase(TestCase):

    def setUp(self):
        self.service = LifecycleService(events=RecordingEventPublisher())
        self.table = Table.objects.create(id=3, name='Table 3')
        self.pizza = MenuItem.objects.create(name='Margherita Pizza', price=Decimal('299.00'), category='pizza')
        self.tea = MenuItem.objects.create(name='Iced Tea', price=Decimal('120.00'), category='drinks')

    def ready_order(self):
        order = self.service.create_order(
            self.table.id,
            [{'menu_item': self.pizza.id, 'quantity': 1}, {'menu_item': self.tea.id, 'quantity': 2}],
        )
        self.service.advance_status(order.id, 'preparing')
        return self.service.advance_status(order.id, 'ready')


class TransactionLedgerTests(PaymentTestCase):
    """Recorded transactions can never change"""

    def setUp(self):
        super().setUp()
        self.ready_order()
        self.txn = self.service.record_payment(self.table.id, None, 'cash')

    def test_save_existing_transaction_rejected(self):
        self.txn.amount = Decimal('1.00')

        with self.assertRaises(ImmutableTransactionError):
            self.txn.save()
        self.assertEqual(Transaction.objects.get(pk=self.txn.pk).amount, Decimal('539.00'))

    def test_delete_rejected(self):
        with self.assertRaises(ImmutableTransactionError):
            self.txn.delete()
        with self.assertRaises(ImmutableTransactionError):
            Transaction.objects.filter(pk=self.txn.pk).delete()
        self.assertTrue(Transaction.objects.filter(pk=self.txn.pk).exists())

    def test_bulk_update_rejected(self):
        with self.assertRaises(ImmutableTransactionError):
            Transaction.objects.filter(pk=self.txn.pk).update(amount=Decimal('0.00'))

    def test_scope_filters(self):
        self.assertEqual(list(Transaction.objects.table_payments()), [self.txn])
        self.assertFalse(Transaction.objects.order_payments().exists())


class ReceiptTests(PaymentTestCase):

    def test_table_receipt(self):
        self.ready_order()
        txn = self.service.record_payment(self.table.id, None, 'online')

        receipt = build_receipt(txn)

        self.assertEqual(receipt['cafe_name'], 'OrderChha Cafe')
        self.assertEqual(receipt['currency'], 'NPR')
        self.assertEqual(receipt['scope'], 'table')
        self.assertEqual([line['name'] for line in receipt['items']], ['Margherita Pizza', 'Iced Tea'])
        self.assertEqual(receipt['items'][1]['line_total'], Decimal('240.00'))
        self.assertEqual(receipt['total'], Decimal('539.00'))

    def test_order_receipt_lists_only_that_order(self):
        first = self.ready_order()
        self.ready_order()

        txn = self.service.record_individual_order_payment(first.id, None, 'cash')
        receipt = build_receipt(txn)

        self.assertEqual(receipt['order_id'], first.id)
        self.assertEqual({line['order_id'] for line in receipt['items']}, {first.id})


class IdempotencyStoreTests(TestCase):

    def test_remember_and_lookup(self):
        client = FakeRedis()
        store = IdempotencyStore(client=client, ttl_seconds=60)

        self.assertIsNone(store.lookup('table:3', 'abc'))
        self.assertTrue(store.remember('table:3', 'abc', 42))

        self.assertEqual(store.lookup('table:3', 'abc'), 42)
        self.assertIsNone(store.lookup('order:3', 'abc'))
        self.assertEqual(client.ttls['payment_idempotency:table:3:abc'], 60)


class PaymentAPITests(APITestCase):
    """Test payment API endpoints"""

    def setUp(self):
        self.client.defaults['HTTP_X_API_KEY'] = 'demo'
        self.client.defaults['HTTP_X_STAFF_ROLE'] = 'cashier'
        self.service = LifecycleService(events=RecordingEventPublisher())
        self.table = Table.objects.create(id=3, name='Table 3')
        pizza = MenuItem.objects.create(name='Margherita Pizza', price=Decimal('299.00'), category='pizza')
        tea = MenuItem.objects.create(name='Iced Tea', price=Decimal('120.00'), category='drinks')
        self.order = self.service.create_order(
            self.table.id, [{'menu_item': pizza.id, 'quantity': 1}, {'menu_item': tea.id, 'quantity': 2}]
        )
        self.service.advance_status(self.order.id, 'preparing')
        self.service.advance_status(self.order.id, 'ready')

        self.store = IdempotencyStore(client=FakeRedis())
        patcher = mock.patch('payment.views.get_idempotency_store', return_value=self.store)
        patcher.start()
        self.addCleanup(patcher.stop)

    def pay_table(self, data=None, **headers):
        url = reverse('record_table_payment', kwargs={'table_id': self.table.id})
        return self.client.post(url, data or {'method': 'cash'}, format='json', **headers)

    def test_record_table_payment(self):
        response = self.pay_table()

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['amount'], '539.00')
        self.assertEqual(response.data['scope'], 'table')
        self.order.refresh_from_db()
        self.assertTrue(self.order.is_settled)

    def test_amount_mismatch(self):
        response = self.pay_table({'method': 'cash', 'amount': '500.00'})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'amount_mismatch')
        self.assertEqual(Transaction.objects.count(), 0)

    def test_override_discount(self):
        response = self.pay_table({'method': 'cash', 'amount': '500.00', 'override': True,
                                   'notes': 'Regular customer'})

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['override'])
        self.assertEqual(response.data['subtotal'], '539.00')

    def test_invalid_method(self):
        response = self.pay_table({'method': 'cheque'})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('method', response.data)

    def test_pay_twice_without_key_conflicts(self):
        self.pay_table()

        response = self.pay_table()
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(Transaction.objects.count(), 1)

    def test_idempotency_key_replay(self):
        """Retrying with the same key returns the first transaction"""
        first = self.pay_table(HTTP_IDEMPOTENCY_KEY='till-1-0001')
        second = self.pay_table(HTTP_IDEMPOTENCY_KEY='till-1-0001')

        self.assertEqual(first.status_code, status.HTTP_201_CREATED)
        self.assertEqual(second.status_code, status.HTTP_200_OK)
        self.assertEqual(second.data['id'], first.data['id'])
        self.assertEqual(Transaction.objects.count(), 1)

    def test_idempotency_key_scoped_per_target(self):
        self.pay_table(HTTP_IDEMPOTENCY_KEY='same-key')

        url = reverse('record_order_payment', kwargs={'order_id': self.order.id})
        response = self.client.post(url, {'method': 'cash'}, format='json', HTTP_IDEMPOTENCY_KEY='same-key')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_record_order_payment(self):
        url = reverse('record_order_payment', kwargs={'order_id': self.order.id})
        response = self.client.post(url, {'method': 'online'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['scope'], 'order')
        self.assertEqual(response.data['order'], self.order.id)

    def test_waiter_cannot_take_payment(self):
        self.client.defaults['HTTP_X_STAFF_ROLE'] = 'waiter'

        response = self.pay_table()
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_transaction_list_and_detail(self):
        txn_id = self.pay_table().data['id']

        response = self.client.get(reverse('transaction_list'), {'scope': 'table'})
        self.assertEqual([txn['id'] for txn in response.data], [txn_id])
        response = self.client.get(reverse('transaction_list'), {'scope': 'order'})
        self.assertEqual(response.data, [])

        response = self.client.get(reverse('transaction_detail', kwargs={'transaction_id': txn_id}))
        self.assertEqual(response.data['method'], 'cash')

    def test_receipt_endpoint(self):
        txn_id = self.pay_table().data['id']

        response = self.client.get(reverse('transaction_receipt', kwargs={'transaction_id': txn_id}))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total'], '539.00')
        self.assertEqual(len(response.data['items']), 2)

    def test_table_released_after_payment(self):
        self.service.mark_billing(self.table.id)
        self.pay_table()

        self.table.refresh_from_db()
        self.assertEqual(self.table.status, 'available')
        self.assertFalse(Order.objects.billable(('ready', 'completed')).exists())

    def test_redis_failure_after_payment_still_returns_transaction(self):
        """A committed payment is reported even when its idempotency key cannot be stored"""
        failing_store = IdempotencyStore(client=UnavailableRedis())

        with mock.patch('payment.views.get_idempotency_store', return_value=failing_store):
            with self.assertLogs('payment.views', level='ERROR'):
                response = self.pay_table(HTTP_IDEMPOTENCY_KEY='till-2-0001')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['amount'], '539.00')
        self.assertEqual(Transaction.objects.count(), 1)


class PaymentSummaryAPITests(PaymentTestCase):
    """Revenue by method, transaction count and inventory value"""

    def setUp(self):
        super().setUp()
        self.client.defaults['HTTP_X_API_KEY'] = 'demo'
        self.ready_order()
        self.service.record_payment(self.table.id, None, 'cash')
        patio = Table.objects.create(name='Patio')
        order = self.service.create_order(patio.id, [{'menu_item': self.tea.id, 'quantity': 1}])
        self.service.advance_status(order.id, 'preparing')
        self.service.advance_status(order.id, 'ready')
        self.service.record_individual_order_payment(order.id, None, 'online')

        InventoryItem.objects.create(name='Flour', stock=Decimal('2.00'), unit='kg',
                                     purchase_price=Decimal('90.00'))
        InventoryItem.objects.create(name='Coffee Beans', stock=Decimal('3.00'), unit='kg',
                                     purchase_price=Decimal('1800.00'))

    def test_summary(self):
        response = self.client.get(reverse('payment_summary'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_revenue'], '659.00')
        self.assertEqual(response.data['cash_revenue'], '539.00')
        self.assertEqual(response.data['online_revenue'], '120.00')
        self.assertEqual(response.data['transaction_count'], 2)
        self.assertEqual(response.data['inventory_value'], '5580.00')
        self.assertEqual(response.data['currency'], 'NPR')

    def test_summary_for_day_without_payments(self):
        response = self.client.get(reverse('payment_summary'), {'date': '2001-01-01'})

        self.assertEqual(response.data['total_revenue'], '0.00')
        self.assertEqual(response.data['transaction_count'], 0)
        self.assertEqual(response.data['inventory_value'], '5580.00')

    def test_invalid_date(self):
        response = self.client.get(reverse('payment_summary'), {'date': 'yesterday'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_empty_ledger(self):
        InventoryItem.objects.all().delete()

        response = self.client.get(reverse('payment_summary'), {'date': '2001-01-01'})
        self.assertEqual(response.data['inventory_value'], '0.00')
