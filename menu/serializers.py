from rest_framework import serializers
from .models import MenuItem


class MenuItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = MenuItem
        fields = ['id', 'name', 'description', 'price', 'category', 'in_stock']
        extra_kwargs = {
            'price': {'help_text': 'Price in the cafe currency (e.g., 299.00)'},
            'in_stock': {'help_text': 'Out-of-stock items cannot be ordered'}
        }

    def validate_price(self, value):
        if value <= 0:
            raise serializers.ValidationError("price must be greater than zero")
        return value


class StockToggleSerializer(serializers.Serializer):
    in_stock = serializers.BooleanField(help_text="New stock flag for the menu item")
