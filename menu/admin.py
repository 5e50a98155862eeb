from django.contrib import admin
from .models import MenuItem


@admin.register(MenuItem)
class MenuItemAdmin(admin.ModelAdmin):
    list_display = ['id', 'name', 'category', 'price', 'in_stock']
    search_fields = ['name']
    list_filter = ['category', 'in_stock']
    list_editable = ['in_stock']
