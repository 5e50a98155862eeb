from decimal import Decimal

from django.test import TestCase
from django.urls import reverse
from rest_framework.test import APITestCase
from rest_framework import status

from floor.lifecycle import LifecycleService
from floor.models import Table
from menu.models import MenuItem
from .models import Notification


class NotificationReceiverTests(TestCase):
    """Lifecycle events produce staff notifications once committed"""

    def setUp(self):
        self.service = LifecycleService()
        self.table = Table.objects.create(id=3, name='Table 3')
        self.pizza = MenuItem.objects.create(name='Margherita Pizza', price=Decimal('299.00'), category='pizza')

    def place_order(self):
        with self.captureOnCommitCallbacks(execute=True):
            return self.service.create_order(self.table.id, [{'menu_item': self.pizza.id, 'quantity': 2}])

    def advance(self, order, new_status):
        with self.captureOnCommitCallbacks(execute=True):
            return self.service.advance_status(order.id, new_status)

    def test_order_placed(self):
        order = self.place_order()

        notification = Notification.objects.get(kind='order_placed')
        self.assertEqual(notification.order_id, order.id)
        self.assertEqual(notification.message, 'Table 3 placed an order with 2 items (NPR 598.00)')

    def test_status_changes(self):
        order = self.place_order()
        self.advance(order, 'preparing')
        self.advance(order, 'ready')

        ready = Notification.objects.get(kind='order_ready')
        self.assertEqual(ready.priority, 'high')
        self.assertTrue(Notification.objects.filter(kind='order_confirmed', order_id=order.id).exists())

    def test_cancelled(self):
        order = self.place_order()
        self.advance(order, 'cancelled')

        self.assertTrue(Notification.objects.filter(kind='order_cancelled', table_id=3).exists())

    def test_completed_produces_no_notification(self):
        order = self.place_order()
        self.advance(order, 'preparing')
        self.advance(order, 'ready')
        before = Notification.objects.count()

        self.advance(order, 'completed')
        self.assertEqual(Notification.objects.count(), before)

    def test_billing_and_payment(self):
        order = self.place_order()
        self.advance(order, 'preparing')
        self.advance(order, 'ready')

        with self.captureOnCommitCallbacks(execute=True):
            self.service.mark_billing(self.table.id)
        self.assertTrue(Notification.objects.filter(kind='payment_pending', table_id=3).exists())

        with self.captureOnCommitCallbacks(execute=True):
            self.service.record_payment(self.table.id, None, 'cash')
        received = Notification.objects.get(kind='payment_received')
        self.assertEqual(received.message, 'Table 3 paid NPR 598.00 by cash')
        self.assertEqual(received.priority, 'low')

    def test_nothing_stored_without_commit(self):
        self.service.create_order(self.table.id, [{'menu_item': self.pizza.id, 'quantity': 1}])

        self.assertFalse(Notification.objects.exists())


class NotificationAPITests(APITestCase):

    def setUp(self):
        self.client.defaults['HTTP_X_API_KEY'] = 'demo'
        self.first = Notification.objects.create(kind='order_placed', title='New Order Placed', message='Table 1')
        self.second = Notification.objects.create(kind='order_ready', title='Order Ready!', message='Table 2',
                                                  priority='high')

    def test_list_unread(self):
        self.first.is_read = True
        self.first.save()

        response = self.client.get(reverse('notification_list'), {'unread': 'true'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['unread_count'], 1)
        self.assertEqual([n['id'] for n in response.data['results']], [self.second.id])

    def test_mark_read(self):
        response = self.client.post(reverse('notification_read', kwargs={'notification_id': self.first.id}))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['is_read'])

    def test_mark_all_read(self):
        response = self.client.post(reverse('notification_read_all'))

        self.assertEqual(response.data['marked_read'], 2)
        self.assertFalse(Notification.objects.unread().exists())
