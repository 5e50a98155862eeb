from django.apps import apps
from django.core.management.base import BaseCommand

from floor.models import Order


class Command(BaseCommand):
    help = 'Report orders whose stored total does not match their line items'

    def add_arguments(self, parser):
        parser.add_argument(
            '--unsettled',
            action='store_true',
            help='Only check orders that have not been paid yet',
        )

    def handle(self, *args, **options):
        service = apps.get_app_config('floor').service

        orders = Order.objects.prefetch_related('items')
        if options['unsettled']:
            orders = orders.unsettled()

        checked = 0
        mismatches = []
        for order in orders:
            checked += 1
            mismatch = service.check_total(order)
            if mismatch is not None:
                mismatches.append(mismatch)
                self.stdout.write(self.style.WARNING(
                    f"Order {order.id} (table {order.table_id}): stored {mismatch.context['stored']}, "
                    f"line items {mismatch.context['recomputed']}"
                ))

        if mismatches:
            self.stdout.write(self.style.ERROR(f'{len(mismatches)} of {checked} orders have mismatched totals'))
        else:
            self.stdout.write(self.style.SUCCESS(f'All {checked} orders match their line items'))
