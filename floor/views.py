from django.apps import apps
from django.shortcuts import get_object_or_404
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiExample
from drf_spectacular.types import OpenApiTypes

from .models import Table, Order, CafeSettings
from .serializers import (
    TableSerializer, OrderSerializer, CreateOrderSerializer, AdvanceStatusSerializer,
    BillSerializer, CafeSettingsSerializer
)

TABLE_ID_PARAMETER = OpenApiParameter(
    name='table_id', type=OpenApiTypes.INT, location=OpenApiParameter.PATH, description='Table ID'
)
ORDER_ID_PARAMETER = OpenApiParameter(
    name='order_id', type=OpenApiTypes.INT, location=OpenApiParameter.PATH, description='Order ID'
)
APPLY_TAX_PARAMETER = OpenApiParameter(
    name='apply_tax', type=OpenApiTypes.BOOL, location=OpenApiParameter.QUERY,
    description='Add tax from the cafe settings to the bill'
)


def query_flag(request, name):
    return request.query_params.get(name, '').lower() in ('1', 'true', 'yes')


def bill_payload(bill, **extra):
    return BillSerializer({
        'subtotal': bill.subtotal,
        'tax': bill.tax,
        'service_charge': bill.service_charge,
        'total': bill.total,
        'currency': bill.currency,
        'order_ids': bill.order_ids,
        **extra,
    }).data


class LifecycleServiceMixin:
    """Gives views the process-wide LifecycleService unless one is passed to as_view()"""
    service = None

    def get_service(self):
        return self.service or apps.get_app_config('floor').service

    def order_response(self, order, status_code=status.HTTP_200_OK):
        order = Order.objects.prefetch_related('items').get(pk=order.pk)
        serializer = OrderSerializer(order, context={'service': self.get_service()})
        return Response(serializer.data, status=status_code)


# --- tables ---------------------------------------------------------------

class TableListView(APIView):
    allowed_roles = ('staff',)

    @extend_schema(
        summary="List tables",
        parameters=[OpenApiParameter(name='status', type=OpenApiTypes.STR, location=OpenApiParameter.QUERY)],
        responses={200: TableSerializer(many=True)}
    )
    def get(self, request):
        tables = Table.objects.all()
        table_status = request.query_params.get('status')
        if table_status:
            tables = tables.filter(status=table_status)
        return Response(TableSerializer(tables, many=True).data)

    @extend_schema(
        summary="Add a table",
        request=TableSerializer,
        responses={201: TableSerializer},
        examples=[
            OpenApiExample('Add Table Example', value={'name': 'Table 7', 'capacity': 4, 'location': 'Terrace'})
        ]
    )
    def post(self, request):
        serializer = TableSerializer(data=request.data)
        if serializer.is_valid():
            table = serializer.save()
            return Response(TableSerializer(table).data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


class TableDetailView(APIView):
    @extend_schema(summary="Get table details", parameters=[TABLE_ID_PARAMETER], responses={200: TableSerializer})
    def get(self, request, table_id):
        table = get_object_or_404(Table, id=table_id)
        return Response(TableSerializer(table).data)


class TableActionView(LifecycleServiceMixin, APIView):
    """POST-only table status change; subclasses name the service method"""
    action_name = None
    allowed_roles = ('staff', 'waiter', 'cashier')

    @extend_schema(parameters=[TABLE_ID_PARAMETER], request=None, responses={200: TableSerializer})
    def post(self, request, table_id):
        table = getattr(self.get_service(), self.action_name)(table_id)
        return Response(TableSerializer(table).data)


class MarkOccupiedView(TableActionView):
    action_name = 'mark_occupied'


class MarkBillingView(TableActionView):
    action_name = 'mark_billing'


class MarkAvailableView(TableActionView):
    action_name = 'mark_available'


class ReserveTableView(TableActionView):
    action_name = 'reserve_table'
    allowed_roles = ('staff',)


class DisableTableView(TableActionView):
    action_name = 'disable_table'
    allowed_roles = ('staff',)


class ReconcileTableView(TableActionView):
    action_name = 'reconcile'


class TableBillView(LifecycleServiceMixin, APIView):
    @extend_schema(
        summary="Compute table bill",
        description="Sum of the table's billable orders, with tax when requested and the configured service charge",
        parameters=[TABLE_ID_PARAMETER, APPLY_TAX_PARAMETER],
        responses={200: BillSerializer}
    )
    def get(self, request, table_id):
        bill = self.get_service().compute_table_total(table_id, apply_tax=query_flag(request, 'apply_tax'))
        return Response(bill_payload(bill, table_id=table_id))


# --- orders ---------------------------------------------------------------

class OrderListView(LifecycleServiceMixin, APIView):
    allowed_roles = ('staff', 'waiter')

    @extend_schema(
        summary="List orders",
        parameters=[
            OpenApiParameter(name='status', type=OpenApiTypes.STR, location=OpenApiParameter.QUERY),
            OpenApiParameter(name='table', type=OpenApiTypes.INT, location=OpenApiParameter.QUERY),
        ],
        responses={200: OrderSerializer(many=True)}
    )
    def get(self, request):
        orders = Order.objects.prefetch_related('items')
        order_status = request.query_params.get('status')
        if order_status:
            orders = orders.filter(status=order_status)
        table = request.query_params.get('table')
        if table:
            orders = orders.filter(table_id=table)
        serializer = OrderSerializer(orders, many=True, context={'service': self.get_service()})
        return Response(serializer.data)

    @extend_schema(
        summary="Place an order",
        description="Place an order for a table. Prices are captured from the menu at this moment.",
        request=CreateOrderSerializer,
        responses={201: OrderSerializer},
        examples=[
            OpenApiExample(
                'Place Order Example',
                summary='Pizza and two iced teas for table 3',
                value={'table_id': 3, 'items': [{'menu_item_id': 1, 'quantity': 1},
                                                {'menu_item_id': 2, 'quantity': 2}]}
            )
        ]
    )
    def post(self, request):
        serializer = CreateOrderSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        order = self.get_service().create_order(
            serializer.validated_data['table_id'],
            serializer.to_line_items(),
            notes=serializer.validated_data['notes'],
        )
        return self.order_response(order, status.HTTP_201_CREATED)


class OrderDetailView(LifecycleServiceMixin, APIView):
    @extend_schema(
        summary="Get order details",
        description="total_check carries a warning when the stored total disagrees with the line items",
        parameters=[ORDER_ID_PARAMETER],
        responses={200: OrderSerializer}
    )
    def get(self, request, order_id):
        order = get_object_or_404(Order, id=order_id)
        return self.order_response(order)


class AdvanceOrderStatusView(LifecycleServiceMixin, APIView):
    allowed_roles = ('staff', 'kitchen', 'waiter')

    @extend_schema(
        summary="Advance order status",
        description="pending -> preparing -> ready -> completed; cancelled from pending or preparing",
        parameters=[ORDER_ID_PARAMETER],
        request=AdvanceStatusSerializer,
        responses={200: OrderSerializer, 409: OpenApiTypes.OBJECT}
    )
    def post(self, request, order_id):
        serializer = AdvanceStatusSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        order = self.get_service().advance_status(order_id, serializer.validated_data['status'])
        return self.order_response(order)


class ApproveOrderView(LifecycleServiceMixin, APIView):
    allowed_roles = ('staff', 'waiter')

    @extend_schema(summary="Approve a pending order", parameters=[ORDER_ID_PARAMETER], request=None,
                   responses={200: OrderSerializer})
    def post(self, request, order_id):
        return self.order_response(self.get_service().approve_order(order_id))


class RejectOrderView(LifecycleServiceMixin, APIView):
    allowed_roles = ('staff', 'waiter')

    @extend_schema(summary="Reject a pending order", parameters=[ORDER_ID_PARAMETER], request=None,
                   responses={200: OrderSerializer})
    def post(self, request, order_id):
        return self.order_response(self.get_service().reject_order(order_id))


class KitchenBoardView(APIView):
    @extend_schema(
        summary="Kitchen display",
        description="Orders the kitchen still has to act on, grouped by status, oldest first",
        responses={200: OpenApiTypes.OBJECT}
    )
    def get(self, request):
        orders = Order.objects.filter(status__in=Order.OPEN_STATUSES).prefetch_related('items')
        board = {key: [] for key in Order.OPEN_STATUSES}
        for order in OrderSerializer(orders, many=True).data:
            board[order['status']].append(order)
        return Response(board)


# --- settings -------------------------------------------------------------

class CafeSettingsView(APIView):
    allowed_roles = ('admin',)

    @extend_schema(summary="Get cafe settings", responses={200: CafeSettingsSerializer})
    def get(self, request):
        return Response(CafeSettingsSerializer(CafeSettings.load()).data)

    @extend_schema(summary="Update cafe settings", request=CafeSettingsSerializer,
                   responses={200: CafeSettingsSerializer})
    def patch(self, request):
        serializer = CafeSettingsSerializer(CafeSettings.load(), data=request.data, partial=True)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
