from django.shortcuts import get_object_or_404
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiExample
from drf_spectacular.types import OpenApiTypes

from .models import InventoryItem
from .serializers import InventoryItemSerializer, StockAdjustmentSerializer
from .services import adjust_stock


class InventoryListView(APIView):
    allowed_roles = ('staff', 'accountant')

    @extend_schema(
        summary="List inventory items",
        parameters=[
            OpenApiParameter(name='category', type=OpenApiTypes.STR, location=OpenApiParameter.QUERY),
        ],
        responses={200: InventoryItemSerializer(many=True)}
    )
    def get(self, request):
        items = InventoryItem.objects.all()
        category = request.query_params.get('category')
        if category:
            items = items.filter(category=category)
        return Response(InventoryItemSerializer(items, many=True).data)

    @extend_schema(
        summary="Add an inventory item",
        request=InventoryItemSerializer,
        responses={201: InventoryItemSerializer, 400: OpenApiTypes.OBJECT}
    )
    def post(self, request):
        serializer = InventoryItemSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        item = serializer.save()
        return Response(InventoryItemSerializer(item).data, status=status.HTTP_201_CREATED)


class InventoryItemDetailView(APIView):
    allowed_roles = ('staff', 'accountant')

    @extend_schema(summary="Get an inventory item", responses={200: InventoryItemSerializer})
    def get(self, request, item_id):
        item = get_object_or_404(InventoryItem, id=item_id)
        return Response(InventoryItemSerializer(item).data)

    @extend_schema(
        summary="Update an inventory item",
        description="Stock levels change through the adjust endpoint, not here.",
        request=InventoryItemSerializer,
        responses={200: InventoryItemSerializer, 400: OpenApiTypes.OBJECT}
    )
    def patch(self, request, item_id):
        item = get_object_or_404(InventoryItem, id=item_id)
        data = {key: value for key, value in request.data.items() if key != 'stock'}
        serializer = InventoryItemSerializer(item, data=data, partial=True)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        return Response(InventoryItemSerializer(serializer.save()).data)


class AdjustStockView(APIView):
    allowed_roles = ('staff', 'kitchen', 'accountant')

    @extend_schema(
        summary="Adjust stock",
        request=StockAdjustmentSerializer,
        responses={200: InventoryItemSerializer, 400: OpenApiTypes.OBJECT, 404: OpenApiTypes.OBJECT},
        examples=[
            OpenApiExample('Delivery', value={'delta': '5.00', 'reason': 'Weekly delivery'}),
            OpenApiExample('Usage', value={'delta': '-0.50', 'reason': 'Used in kitchen'}),
        ]
    )
    def post(self, request, item_id):
        serializer = StockAdjustmentSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        item = adjust_stock(item_id, serializer.validated_data['delta'], serializer.validated_data['reason'])
        return Response(InventoryItemSerializer(item).data)


class LowStockView(APIView):
    @extend_schema(summary="Items at or below their low-stock threshold", responses={200: InventoryItemSerializer(many=True)})
    def get(self, request):
        return Response(InventoryItemSerializer(InventoryItem.objects.low_stock(), many=True).data)
