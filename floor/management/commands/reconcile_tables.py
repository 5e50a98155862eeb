from django.apps import apps
from django.core.management.base import BaseCommand

from floor.models import Table


class Command(BaseCommand):
    help = 'Reset tables stuck in billing that have no orders left to bill'

    def add_arguments(self, parser):
        parser.add_argument(
            '--table',
            type=int,
            help='Reconcile a single table instead of every billing table',
        )

    def handle(self, *args, **options):
        service = apps.get_app_config('floor').service

        if options['table']:
            table = service.reconcile(options['table'])
            self.stdout.write(f"Table {table.id}: {table.status}")
            return

        billing = Table.objects.filter(status='billing').count()
        self.stdout.write(f"Tables in billing status: {billing}")

        changed = service.reconcile_all()
        for table in changed:
            self.stdout.write(f"Reset table {table.id} to {table.status}")

        self.stdout.write(
            self.style.SUCCESS(f'Reconciled {len(changed)} of {billing} billing tables')
        )
