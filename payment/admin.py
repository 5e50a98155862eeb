from django.contrib import admin
from .models import Transaction


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    list_display = ['id', 'table', 'order', 'amount', 'method', 'override', 'created_at']
    list_filter = ['method', 'override', 'created_at']
    search_fields = ['table__name', 'notes']
    readonly_fields = ['created_at']

    # Append-only ledger
    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
