from django.urls import path
from . import views

urlpatterns = [
    path('', views.MenuListView.as_view(), name='menu_list'),
    path('<int:item_id>/', views.MenuItemDetailView.as_view(), name='menu_item_detail'),
    path('<int:item_id>/stock/', views.MenuItemStockView.as_view(), name='menu_item_stock'),
]
