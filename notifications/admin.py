from django.contrib import admin
from .models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ['id', 'kind', 'title', 'priority', 'table_id', 'is_read', 'created_at']
    list_filter = ['kind', 'priority', 'is_read']
    search_fields = ['title', 'message']
