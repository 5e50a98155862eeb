from django.urls import path
from . import views

urlpatterns = [
    path('tables/<int:table_id>/', views.RecordTablePaymentView.as_view(), name='record_table_payment'),
    path('orders/<int:order_id>/', views.RecordOrderPaymentView.as_view(), name='record_order_payment'),
    path('summary/', views.PaymentSummaryView.as_view(), name='payment_summary'),
    path('transactions/', views.TransactionListView.as_view(), name='transaction_list'),
    path('transactions/<int:transaction_id>/', views.TransactionDetailView.as_view(), name='transaction_detail'),
    path('transactions/<int:transaction_id>/receipt/', views.ReceiptView.as_view(), name='transaction_receipt'),
]
