from django.urls import path
from . import views

urlpatterns = [
    path('', views.InventoryListView.as_view(), name='inventory_list'),
    path('low-stock/', views.LowStockView.as_view(), name='inventory_low_stock'),
    path('<int:item_id>/', views.InventoryItemDetailView.as_view(), name='inventory_detail'),
    path('<int:item_id>/adjust/', views.AdjustStockView.as_view(), name='inventory_adjust'),
]
