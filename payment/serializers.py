from rest_framework import serializers
from .models import Transaction


class TransactionSerializer(serializers.ModelSerializer):
    scope = serializers.CharField(read_only=True)

    class Meta:
        model = Transaction
        fields = ['id', 'table', 'order', 'scope', 'amount', 'method', 'subtotal',
                  'tax', 'service_charge', 'override', 'notes', 'created_at']
        read_only_fields = fields


class RecordPaymentSerializer(serializers.Serializer):
    """Serializer for recording a table or individual order payment"""
    amount = serializers.DecimalField(
        max_digits=10, decimal_places=2, required=False, allow_null=True, default=None,
        help_text="Amount tendered; omit to charge the computed total"
    )
    method = serializers.ChoiceField(choices=Transaction.METHOD_CHOICES)
    apply_tax = serializers.BooleanField(default=False, help_text="Add tax from the cafe settings")
    override = serializers.BooleanField(
        default=False, help_text="Accept an amount that differs from the computed total (discounts)"
    )
    notes = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')


class ReceiptLineSerializer(serializers.Serializer):
    order_id = serializers.IntegerField()
    name = serializers.CharField()
    quantity = serializers.IntegerField()
    price = serializers.DecimalField(max_digits=10, decimal_places=2)
    line_total = serializers.DecimalField(max_digits=12, decimal_places=2)


class ReceiptSerializer(serializers.Serializer):
    cafe_name = serializers.CharField()
    address = serializers.CharField()
    phone = serializers.CharField()
    currency = serializers.CharField()
    transaction_id = serializers.IntegerField()
    table_id = serializers.IntegerField()
    order_id = serializers.IntegerField(allow_null=True)
    scope = serializers.CharField()
    method = serializers.CharField()
    created_at = serializers.DateTimeField()
    items = ReceiptLineSerializer(many=True)
    subtotal = serializers.DecimalField(max_digits=10, decimal_places=2)
    tax = serializers.DecimalField(max_digits=10, decimal_places=2)
    service_charge = serializers.DecimalField(max_digits=10, decimal_places=2)
    total = serializers.DecimalField(max_digits=10, decimal_places=2)
    receipt_note = serializers.CharField()


class PaymentSummarySerializer(serializers.Serializer):
    currency = serializers.CharField()
    date = serializers.DateField(allow_null=True)
    total_revenue = serializers.DecimalField(max_digits=14, decimal_places=2)
    cash_revenue = serializers.DecimalField(max_digits=14, decimal_places=2)
    online_revenue = serializers.DecimalField(max_digits=14, decimal_places=2)
    transaction_count = serializers.IntegerField()
    inventory_value = serializers.DecimalField(max_digits=14, decimal_places=2)
