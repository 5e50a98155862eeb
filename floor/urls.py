from django.urls import path
from . import views

urlpatterns = [
    path('tables/', views.TableListView.as_view(), name='table_list'),
    path('tables/<int:table_id>/', views.TableDetailView.as_view(), name='table_detail'),
    path('tables/<int:table_id>/occupied/', views.MarkOccupiedView.as_view(), name='table_occupied'),
    path('tables/<int:table_id>/billing/', views.MarkBillingView.as_view(), name='table_billing'),
    path('tables/<int:table_id>/available/', views.MarkAvailableView.as_view(), name='table_available'),
    path('tables/<int:table_id>/reserve/', views.ReserveTableView.as_view(), name='table_reserve'),
    path('tables/<int:table_id>/disable/', views.DisableTableView.as_view(), name='table_disable'),
    path('tables/<int:table_id>/reconcile/', views.ReconcileTableView.as_view(), name='table_reconcile'),
    path('tables/<int:table_id>/bill/', views.TableBillView.as_view(), name='table_bill'),
    path('orders/', views.OrderListView.as_view(), name='order_list'),
    path('orders/<int:order_id>/', views.OrderDetailView.as_view(), name='order_detail'),
    path('orders/<int:order_id>/status/', views.AdvanceOrderStatusView.as_view(), name='order_status'),
    path('orders/<int:order_id>/approve/', views.ApproveOrderView.as_view(), name='order_approve'),
    path('orders/<int:order_id>/reject/', views.RejectOrderView.as_view(), name='order_reject'),
    path('kitchen/', views.KitchenBoardView.as_view(), name='kitchen_board'),
    path('settings/', views.CafeSettingsView.as_view(), name='cafe_settings'),
]
