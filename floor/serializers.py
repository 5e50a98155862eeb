from rest_framework import serializers
from .models import Table, Order, OrderLineItem, CafeSettings


class TableSerializer(serializers.ModelSerializer):
    class Meta:
        model = Table
        fields = ['id', 'name', 'capacity', 'location', 'status', 'updated_at']
        read_only_fields = ['id', 'status', 'updated_at']
        extra_kwargs = {
            'capacity': {'help_text': 'Number of seats (positive integer)'},
            'status': {'help_text': 'Changed only through the table action endpoints'}
        }

    def validate_capacity(self, value):
        if value <= 0:
            raise serializers.ValidationError("capacity must be a positive integer")
        return value


class OrderLineItemSerializer(serializers.ModelSerializer):
    line_total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = OrderLineItem
        fields = ['id', 'menu_item', 'name', 'price', 'quantity', 'line_total']
        extra_kwargs = {
            'price': {'help_text': 'Menu price captured when the order was placed'},
        }


class OrderSerializer(serializers.ModelSerializer):
    items = OrderLineItemSerializer(many=True, read_only=True)
    is_settled = serializers.BooleanField(read_only=True)
    total_check = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = ['id', 'table', 'status', 'total_amount', 'notes', 'items',
                  'is_settled', 'settled_by', 'created_at', 'updated_at', 'total_check']
        read_only_fields = ['id', 'table', 'status', 'total_amount', 'notes',
                            'settled_by', 'created_at', 'updated_at']

    def get_total_check(self, order):
        """Data-quality warning when the stored total disagrees with the line items"""
        service = self.context.get('service')
        if service is None:
            return None
        mismatch = service.check_total(order)
        if mismatch is None:
            return None
        return mismatch.as_dict()


class LineItemInputSerializer(serializers.Serializer):
    menu_item_id = serializers.IntegerField(help_text="ID of the menu item")
    quantity = serializers.IntegerField(min_value=1, help_text="Quantity (minimum 1)")


class CreateOrderSerializer(serializers.Serializer):
    table_id = serializers.IntegerField(help_text="Table the order is placed for")
    items = LineItemInputSerializer(many=True, allow_empty=False)
    notes = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')

    def to_line_items(self):
        return [
            {'menu_item': line['menu_item_id'], 'quantity': line['quantity']}
            for line in self.validated_data['items']
        ]


class AdvanceStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Order.STATUS_CHOICES, help_text="Next order status")


class BillSerializer(serializers.Serializer):
    table_id = serializers.IntegerField(required=False)
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2)
    tax = serializers.DecimalField(max_digits=12, decimal_places=2)
    service_charge = serializers.DecimalField(max_digits=12, decimal_places=2)
    total = serializers.DecimalField(max_digits=12, decimal_places=2)
    currency = serializers.CharField()
    order_ids = serializers.ListField(child=serializers.IntegerField())


class CafeSettingsSerializer(serializers.ModelSerializer):
    class Meta:
        model = CafeSettings
        fields = ['cafe_name', 'address', 'phone', 'currency', 'tax_rate',
                  'service_charge_rate', 'receipt_note', 'online_ordering_enabled', 'updated_at']
        read_only_fields = ['updated_at']
        extra_kwargs = {
            'tax_rate': {'help_text': 'Tax as a fraction (e.g., 0.13 for 13%)'},
            'service_charge_rate': {'help_text': 'Service charge as a fraction (0 disables it)'}
        }

    def validate_tax_rate(self, value):
        if value < 0 or value >= 1:
            raise serializers.ValidationError("tax_rate must be between 0 and 1")
        return value

    def validate_service_charge_rate(self, value):
        if value < 0 or value >= 1:
            raise serializers.ValidationError("service_charge_rate must be between 0 and 1")
        return value
