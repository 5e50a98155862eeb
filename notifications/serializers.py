from rest_framework import serializers
from .models import Notification


class NotificationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Notification
        fields = ['id', 'kind', 'title', 'message', 'priority', 'table_id', 'order_id', 'is_read', 'created_at']
        read_only_fields = fields
