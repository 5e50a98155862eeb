import logging

import redis
from django.db.models import Count, DecimalField, F, Q, Sum
from django.shortcuts import get_object_or_404
from django.utils.dateparse import parse_date
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiExample
from drf_spectacular.types import OpenApiTypes

from floor.lifecycle import quantize
from floor.models import CafeSettings
from floor.views import LifecycleServiceMixin
from inventory.models import InventoryItem
from .idempotency import get_idempotency_store
from .models import Transaction
from .receipts import build_receipt
from .serializers import (
    TransactionSerializer, RecordPaymentSerializer, ReceiptSerializer, PaymentSummarySerializer
)

logger = logging.getLogger(__name__)

IDEMPOTENCY_KEY_PARAMETER = OpenApiParameter(
    name='Idempotency-Key',
    type=OpenApiTypes.STR,
    location=OpenApiParameter.HEADER,
    required=False,
    description='Replaying a key returns the transaction recorded the first time'
)

PAYMENT_EXAMPLES = [
    OpenApiExample(
        'Cash Payment',
        summary='Pay the computed total in cash',
        value={'method': 'cash'}
    ),
    OpenApiExample(
        'Discounted Payment',
        summary='Accept a lower amount at the cashier\'s discretion',
        value={'amount': '500.00', 'method': 'online', 'override': True, 'notes': 'Regular customer discount'}
    ),
]


class PaymentView(LifecycleServiceMixin, APIView):
    """Shared request handling for table and individual order payments"""
    allowed_roles = ('cashier', 'staff', 'accountant')

    def record(self, request, scope, pay):
        serializer = RecordPaymentSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        data = serializer.validated_data

        def take_payment():
            return pay(
                data['amount'],
                data['method'],
                apply_tax=data['apply_tax'],
                override=data['override'],
                notes=data['notes'],
            )

        idempotency_key = request.META.get('HTTP_IDEMPOTENCY_KEY')
        if not idempotency_key:
            transaction = take_payment()
            return Response(TransactionSerializer(transaction).data, status=status.HTTP_201_CREATED)

        store = get_idempotency_store()
        existing_id = store.lookup(scope, idempotency_key)
        if existing_id is not None:
            existing = Transaction.objects.filter(pk=existing_id).first()
            if existing is not None:
                logger.info(f"Replayed idempotency key for {scope}: transaction {existing.pk}")
                return Response(TransactionSerializer(existing).data, status=status.HTTP_200_OK)

        transaction = take_payment()
        try:
            store.remember(scope, idempotency_key, transaction.pk)
        except redis.RedisError as exc:
            # Payment is already committed
            logger.error(f"Could not store idempotency key for {scope} (transaction {transaction.pk}): {exc}")
        return Response(TransactionSerializer(transaction).data, status=status.HTTP_201_CREATED)


class RecordTablePaymentView(PaymentView):
    @extend_schema(
        summary="Pay a table's bill",
        description="Record one payment covering every billable order at the table. "
                    "The table is released once nothing is left to bill.",
        parameters=[
            OpenApiParameter(name='table_id', type=OpenApiTypes.INT, location=OpenApiParameter.PATH),
            IDEMPOTENCY_KEY_PARAMETER,
        ],
        request=RecordPaymentSerializer,
        responses={201: TransactionSerializer, 200: TransactionSerializer, 400: OpenApiTypes.OBJECT,
                   409: OpenApiTypes.OBJECT},
        examples=PAYMENT_EXAMPLES
    )
    def post(self, request, table_id):
        service = self.get_service()
        return self.record(
            request,
            f"table:{table_id}",
            lambda amount, method, **options: service.record_payment(table_id, amount, method, **options),
        )


class RecordOrderPaymentView(PaymentView):
    @extend_schema(
        summary="Pay a single order",
        description="Record a payment for one billable order when diners split the bill per order.",
        parameters=[
            OpenApiParameter(name='order_id', type=OpenApiTypes.INT, location=OpenApiParameter.PATH),
            IDEMPOTENCY_KEY_PARAMETER,
        ],
        request=RecordPaymentSerializer,
        responses={201: TransactionSerializer, 200: TransactionSerializer, 400: OpenApiTypes.OBJECT,
                   409: OpenApiTypes.OBJECT},
        examples=PAYMENT_EXAMPLES
    )
    def post(self, request, order_id):
        service = self.get_service()
        return self.record(
            request,
            f"order:{order_id}",
            lambda amount, method, **options: service.record_individual_order_payment(
                order_id, amount, method, **options
            ),
        )


class TransactionListView(APIView):
    @extend_schema(
        summary="List transactions",
        parameters=[
            OpenApiParameter(name='table', type=OpenApiTypes.INT, location=OpenApiParameter.QUERY),
            OpenApiParameter(name='method', type=OpenApiTypes.STR, location=OpenApiParameter.QUERY),
            OpenApiParameter(name='scope', type=OpenApiTypes.STR, location=OpenApiParameter.QUERY,
                             enum=['table', 'order']),
        ],
        responses={200: TransactionSerializer(many=True)}
    )
    def get(self, request):
        transactions = Transaction.objects.all()
        table = request.query_params.get('table')
        if table:
            transactions = transactions.filter(table_id=table)
        method = request.query_params.get('method')
        if method:
            transactions = transactions.filter(method=method)
        scope = request.query_params.get('scope')
        if scope == 'table':
            transactions = transactions.table_payments()
        elif scope == 'order':
            transactions = transactions.order_payments()
        return Response(TransactionSerializer(transactions, many=True).data)


class TransactionDetailView(APIView):
    @extend_schema(summary="Get a transaction", responses={200: TransactionSerializer})
    def get(self, request, transaction_id):
        transaction = get_object_or_404(Transaction, id=transaction_id)
        return Response(TransactionSerializer(transaction).data)


class ReceiptView(APIView):
    @extend_schema(
        summary="Get a receipt",
        description="Receipt for a recorded payment: cafe details, settled line items and totals",
        responses={200: ReceiptSerializer}
    )
    def get(self, request, transaction_id):
        transaction = get_object_or_404(Transaction, id=transaction_id)
        return Response(ReceiptSerializer(build_receipt(transaction)).data)


class PaymentSummaryView(APIView):
    @extend_schema(
        summary="Business summary",
        description="Revenue split by payment method, transaction count and inventory value "
                    "(stock x purchase price). Pass a date to limit revenue to that day.",
        parameters=[
            OpenApiParameter(name='date', type=OpenApiTypes.DATE, location=OpenApiParameter.QUERY),
        ],
        responses={200: PaymentSummarySerializer, 400: OpenApiTypes.OBJECT}
    )
    def get(self, request):
        transactions = Transaction.objects.all()
        day = request.query_params.get('date')
        parsed = None
        if day:
            try:
                parsed = parse_date(day)
            except ValueError:
                parsed = None
            if parsed is None:
                return Response({'error': 'date must be YYYY-MM-DD'}, status=status.HTTP_400_BAD_REQUEST)
            transactions = transactions.filter(created_at__date=parsed)

        revenue = transactions.aggregate(
            total_revenue=Sum('amount'),
            cash_revenue=Sum('amount', filter=Q(method='cash')),
            online_revenue=Sum('amount', filter=Q(method='online')),
            transaction_count=Count('id'),
        )
        inventory = InventoryItem.objects.aggregate(
            inventory_value=Sum(
                F('stock') * F('purchase_price'),
                output_field=DecimalField(max_digits=14, decimal_places=2),
            )
        )

        summary = {
            'currency': CafeSettings.load().currency,
            'date': parsed,
            'transaction_count': revenue['transaction_count'],
        }
        for key in ('total_revenue', 'cash_revenue', 'online_revenue'):
            summary[key] = quantize(revenue[key] or 0)
        summary['inventory_value'] = quantize(inventory['inventory_value'] or 0)
        return Response(PaymentSummarySerializer(summary).data)
