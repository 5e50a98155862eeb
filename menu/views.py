from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from django.shortcuts import get_object_or_404
from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiExample
from drf_spectacular.types import OpenApiTypes

from .models import MenuItem
from .serializers import MenuItemSerializer, StockToggleSerializer


class MenuListView(APIView):
    allowed_roles = ('staff',)

    @extend_schema(
        summary="List menu items",
        description="List the menu, optionally filtered by category or stock flag",
        parameters=[
            OpenApiParameter(name='category', type=OpenApiTypes.STR, location=OpenApiParameter.QUERY),
            OpenApiParameter(name='in_stock', type=OpenApiTypes.BOOL, location=OpenApiParameter.QUERY),
        ],
        responses={200: MenuItemSerializer(many=True)}
    )
    def get(self, request):
        items = MenuItem.objects.all()
        category = request.query_params.get('category')
        if category:
            items = items.filter(category=category)
        in_stock = request.query_params.get('in_stock')
        if in_stock is not None:
            items = items.filter(in_stock=in_stock.lower() in ('1', 'true', 'yes'))
        return Response(MenuItemSerializer(items, many=True).data)

    @extend_schema(
        summary="Add a menu item",
        request=MenuItemSerializer,
        responses={201: MenuItemSerializer},
        examples=[
            OpenApiExample(
                'Add Item Example',
                summary='Add a pizza',
                value={'name': 'Chicken Pizza', 'price': '299.00', 'category': 'pizza'}
            )
        ]
    )
    def post(self, request):
        serializer = MenuItemSerializer(data=request.data)
        if serializer.is_valid():
            item = serializer.save()
            return Response(MenuItemSerializer(item).data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


class MenuItemDetailView(APIView):
    allowed_roles = ('staff',)

    @extend_schema(summary="Get a menu item", responses={200: MenuItemSerializer})
    def get(self, request, item_id):
        item = get_object_or_404(MenuItem, id=item_id)
        return Response(MenuItemSerializer(item).data)

    @extend_schema(
        summary="Update a menu item",
        description="Price changes apply to new orders only; existing order lines keep their captured price",
        request=MenuItemSerializer,
        responses={200: MenuItemSerializer}
    )
    def patch(self, request, item_id):
        item = get_object_or_404(MenuItem, id=item_id)
        serializer = MenuItemSerializer(item, data=request.data, partial=True)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


class MenuItemStockView(APIView):
    allowed_roles = ('staff', 'kitchen')

    @extend_schema(
        summary="Set menu item stock flag",
        request=StockToggleSerializer,
        responses={200: MenuItemSerializer}
    )
    def post(self, request, item_id):
        item = get_object_or_404(MenuItem, id=item_id)
        serializer = StockToggleSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        item.in_stock = serializer.validated_data['in_stock']
        item.save(update_fields=['in_stock', 'updated_at'])
        return Response(MenuItemSerializer(item).data)
