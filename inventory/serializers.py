from rest_framework import serializers
from .models import InventoryItem


class InventoryItemSerializer(serializers.ModelSerializer):
    is_low = serializers.BooleanField(read_only=True)

    class Meta:
        model = InventoryItem
        fields = ['id', 'name', 'category', 'stock', 'unit', 'purchase_price', 'low_stock_threshold',
                  'supplier_name', 'is_low', 'last_updated']
        read_only_fields = ['last_updated']

    def validate_stock(self, value):
        if value < 0:
            raise serializers.ValidationError("Stock cannot be negative")
        return value

    def validate_purchase_price(self, value):
        if value < 0:
            raise serializers.ValidationError("Purchase price cannot be negative")
        return value


class StockAdjustmentSerializer(serializers.Serializer):
    """Signed quantity to add to (or remove from) the current stock"""
    delta = serializers.DecimalField(max_digits=10, decimal_places=2)
    reason = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')

    def validate_delta(self, value):
        if value == 0:
            raise serializers.ValidationError("Adjustment must be non-zero")
        return value
