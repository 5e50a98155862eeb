from decimal import Decimal

from django.core.management.base import BaseCommand
from menu.models import MenuItem


class Command(BaseCommand):
    help = 'Seed the database with the cafe menu'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Clear existing menu items before seeding',
        )

    def handle(self, *args, **options):
        if options['clear']:
            self.stdout.write('Clearing existing menu items...')
            MenuItem.objects.all().delete()
            self.stdout.write(
                self.style.SUCCESS('Successfully cleared menu items')
            )

        menu_items = [
            {"name": "Americano", "price": "150.00", "category": "drinks"},
            {"name": "Cafe Latte", "price": "220.00", "category": "drinks"},
            {"name": "Iced Lemon Tea", "price": "120.00", "category": "drinks"},
            {"name": "Chicken Momo", "price": "250.00", "category": "snacks"},
            {"name": "French Fries", "price": "180.00", "category": "snacks"},
            {"name": "Margherita Pizza", "price": "299.00", "category": "pizza"},
            {"name": "Chicken Pizza", "price": "399.00", "category": "pizza"},
            {"name": "Chicken Burger", "price": "350.00", "category": "mains"},
            {"name": "Chocolate Brownie", "price": "200.00", "category": "desserts"},
        ]

        created_items = []
        for item_data in menu_items:
            item, created = MenuItem.objects.get_or_create(
                name=item_data['name'],
                defaults={
                    'price': Decimal(item_data['price']),
                    'category': item_data['category']
                }
            )
            if created:
                created_items.append(item)
                self.stdout.write(f"Created: {item.name} - {item.price} ({item.category})")
            else:
                self.stdout.write(f"Already exists: {item.name}")

        self.stdout.write(
            self.style.SUCCESS(f'\nTotal new menu items created: {len(created_items)}')
        )

        self.stdout.write("\nAll menu items in database:")
        self.stdout.write("-" * 60)
        for item in MenuItem.objects.all().order_by('category', 'name'):
            stock = 'in stock' if item.in_stock else 'OUT'
            self.stdout.write(
                f"ID: {item.id:2d} | {item.name:20s} | {item.price:8.2f} | {item.category:9s} | {stock}"
            )
