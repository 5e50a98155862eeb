from django.apps import AppConfig


class FloorConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'floor'
    verbose_name = 'Floor, orders and billing'

    service = None

    def ready(self):
        from .lifecycle import LifecycleService

        # One lifecycle service per process, handed to the API views
        self.service = LifecycleService.from_settings()
