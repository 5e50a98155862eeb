from decimal import Decimal
from io import StringIO

from django.core.management import call_command
from django.test import TestCase
from django.urls import reverse
from rest_framework.test import APITestCase
from rest_framework import status

from .models import MenuItem


class SeedMenuTests(TestCase):
    """Test the seed_menu management command"""

    def test_seed_is_repeatable(self):
        call_command('seed_menu', stdout=StringIO())
        count = MenuItem.objects.count()
        call_command('seed_menu', stdout=StringIO())

        self.assertGreater(count, 0)
        self.assertEqual(MenuItem.objects.count(), count)
        self.assertEqual(MenuItem.objects.get(name='Margherita Pizza').price, Decimal('299.00'))

    def test_clear_removes_custom_items(self):
        MenuItem.objects.create(name='Seasonal Special', price=Decimal('500.00'))

        call_command('seed_menu', '--clear', stdout=StringIO())
        self.assertFalse(MenuItem.objects.filter(name='Seasonal Special').exists())


class MenuAPITests(APITestCase):
    """Test menu API endpoints"""

    def setUp(self):
        self.client.defaults['HTTP_X_API_KEY'] = 'demo'
        self.client.defaults['HTTP_X_STAFF_ROLE'] = 'staff'
        self.pizza = MenuItem.objects.create(name='Margherita Pizza', price=Decimal('299.00'), category='pizza')
        self.tea = MenuItem.objects.create(name='Iced Tea', price=Decimal('120.00'), category='drinks',
                                           in_stock=False)

    def test_list_and_filter(self):
        response = self.client.get(reverse('menu_list'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 2)

        response = self.client.get(reverse('menu_list'), {'category': 'pizza'})
        self.assertEqual([item['name'] for item in response.data], ['Margherita Pizza'])

        response = self.client.get(reverse('menu_list'), {'in_stock': 'false'})
        self.assertEqual([item['name'] for item in response.data], ['Iced Tea'])

    def test_create_item(self):
        data = {'name': 'Veg Momo', 'price': '180.00', 'category': 'snacks'}
        response = self.client.post(reverse('menu_list'), data, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['in_stock'])
        self.assertEqual(MenuItem.objects.get(name='Veg Momo').price, Decimal('180.00'))

    def test_create_item_rejects_non_positive_price(self):
        data = {'name': 'Free Water', 'price': '0.00', 'category': 'drinks'}
        response = self.client.post(reverse('menu_list'), data, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('price', response.data)

    def test_update_price(self):
        url = reverse('menu_item_detail', kwargs={'item_id': self.pizza.id})
        response = self.client.patch(url, {'price': '320.00'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.pizza.refresh_from_db()
        self.assertEqual(self.pizza.price, Decimal('320.00'))

    def test_toggle_stock_as_kitchen(self):
        self.client.defaults['HTTP_X_STAFF_ROLE'] = 'kitchen'
        url = reverse('menu_item_stock', kwargs={'item_id': self.tea.id})

        response = self.client.post(url, {'in_stock': True}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.tea.refresh_from_db()
        self.assertTrue(self.tea.in_stock)

    def test_kitchen_cannot_edit_menu(self):
        self.client.defaults['HTTP_X_STAFF_ROLE'] = 'kitchen'
        url = reverse('menu_item_detail', kwargs={'item_id': self.pizza.id})

        response = self.client.patch(url, {'price': '1.00'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_missing_item(self):
        response = self.client.get(reverse('menu_item_detail', kwargs={'item_id': 9999}))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
