from django.contrib import admin
from .models import InventoryItem


@admin.register(InventoryItem)
class InventoryItemAdmin(admin.ModelAdmin):
    list_display = ['name', 'category', 'stock', 'unit', 'low_stock_threshold', 'supplier_name', 'last_updated']
    list_filter = ['category', 'unit']
    search_fields = ['name', 'supplier_name']
