from django.contrib import admin
from .models import Table, Order, OrderLineItem, CafeSettings


@admin.register(Table)
class TableAdmin(admin.ModelAdmin):
    list_display = ['id', 'name', 'capacity', 'location', 'status', 'updated_at']
    list_filter = ['status', 'location']
    search_fields = ['name']
    # Status moves through the lifecycle service, not the admin form
    readonly_fields = ['status', 'updated_at']


class OrderLineItemInline(admin.TabularInline):
    model = OrderLineItem
    extra = 0
    readonly_fields = ['menu_item', 'name', 'price', 'quantity']
    can_delete = False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ['id', 'table', 'status', 'total_amount', 'settled_by', 'created_at']
    list_filter = ['status', 'created_at']
    search_fields = ['table__name', 'items__name']
    readonly_fields = ['table', 'status', 'total_amount', 'settled_by', 'created_at', 'updated_at']
    inlines = [OrderLineItemInline]


@admin.register(CafeSettings)
class CafeSettingsAdmin(admin.ModelAdmin):
    list_display = ['cafe_name', 'currency', 'tax_rate', 'service_charge_rate']

    def has_add_permission(self, request):
        return not CafeSettings.objects.exists()
