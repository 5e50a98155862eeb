from django.urls import path
from . import views

urlpatterns = [
    path('', views.NotificationListView.as_view(), name='notification_list'),
    path('<int:notification_id>/read/', views.MarkNotificationReadView.as_view(), name='notification_read'),
    path('read-all/', views.MarkAllNotificationsReadView.as_view(), name='notification_read_all'),
]
