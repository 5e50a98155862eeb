from decimal import Decimal

from django.test import TestCase
from django.urls import reverse
from rest_framework.test import APITestCase
from rest_framework import status

from floor.exceptions import NotFound
from .exceptions import InsufficientStock
from .models import InventoryItem
from .services import adjust_stock


class AdjustStockTests(TestCase):

    def setUp(self):
        self.flour = InventoryItem.objects.create(
            name='Flour', category='baking', stock=Decimal('10.00'), unit='kg',
            purchase_price=Decimal('90.00'), low_stock_threshold=Decimal('2.00')
        )

    def test_delivery_and_usage(self):
        adjust_stock(self.flour.id, Decimal('5.00'), 'Delivery')
        item = adjust_stock(self.flour.id, Decimal('-3.50'))

        self.assertEqual(item.stock, Decimal('11.50'))
        self.flour.refresh_from_db()
        self.assertEqual(self.flour.stock, Decimal('11.50'))

    def test_cannot_go_negative(self):
        with self.assertRaises(InsufficientStock) as ctx:
            adjust_stock(self.flour.id, Decimal('-10.01'))

        self.assertEqual(ctx.exception.context['available'], '10.00')
        self.flour.refresh_from_db()
        self.assertEqual(self.flour.stock, Decimal('10.00'))

    def test_low_stock_warning(self):
        with self.assertLogs('inventory.services', level='WARNING'):
            item = adjust_stock(self.flour.id, Decimal('-8.00'))
        self.assertTrue(item.is_low)
        self.assertEqual(list(InventoryItem.objects.low_stock()), [item])

    def test_unknown_item(self):
        with self.assertRaises(NotFound):
            adjust_stock(9999, Decimal('1.00'))


class InventoryAPITests(APITestCase):

    def setUp(self):
        self.client.defaults['HTTP_X_API_KEY'] = 'demo'
        self.client.defaults['HTTP_X_STAFF_ROLE'] = 'staff'
        self.milk = InventoryItem.objects.create(
            name='Milk', category='dairy', stock=Decimal('4.00'), unit='ltr', low_stock_threshold=Decimal('5.00')
        )

    def test_create_and_list(self):
        data = {'name': 'Coffee Beans', 'category': 'beverage', 'stock': '3.00', 'unit': 'kg',
                'purchase_price': '1800.00', 'low_stock_threshold': '1.00', 'supplier_name': 'Himalayan Java'}
        response = self.client.post(reverse('inventory_list'), data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertFalse(response.data['is_low'])

        response = self.client.get(reverse('inventory_list'), {'category': 'dairy'})
        self.assertEqual([item['name'] for item in response.data], ['Milk'])

    def test_create_rejects_negative_stock(self):
        data = {'name': 'Sugar', 'stock': '-1.00', 'unit': 'kg'}
        response = self.client.post(reverse('inventory_list'), data, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_patch_ignores_stock(self):
        url = reverse('inventory_detail', kwargs={'item_id': self.milk.id})
        response = self.client.patch(url, {'stock': '100.00', 'supplier_name': 'DDC'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['stock'], '4.00')
        self.assertEqual(response.data['supplier_name'], 'DDC')

    def test_adjust(self):
        url = reverse('inventory_adjust', kwargs={'item_id': self.milk.id})

        response = self.client.post(url, {'delta': '6.00', 'reason': 'Morning delivery'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['stock'], '10.00')

        response = self.client.post(url, {'delta': '-20.00'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'insufficient_stock')

    def test_zero_adjustment_rejected(self):
        url = reverse('inventory_adjust', kwargs={'item_id': self.milk.id})

        response = self.client.post(url, {'delta': '0'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_low_stock(self):
        InventoryItem.objects.create(name='Tea Leaves', stock=Decimal('5.00'), low_stock_threshold=Decimal('1.00'))

        response = self.client.get(reverse('inventory_low_stock'))
        self.assertEqual([item['name'] for item in response.data], ['Milk'])

    def test_waiter_cannot_adjust(self):
        self.client.defaults['HTTP_X_STAFF_ROLE'] = 'waiter'
        url = reverse('inventory_adjust', kwargs={'item_id': self.milk.id})

        response = self.client.post(url, {'delta': '1.00'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
