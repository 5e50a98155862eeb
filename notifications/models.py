from django.db import models


class NotificationQuerySet(models.QuerySet):
	def unread(self):
		return self.filter(is_read=False)


class Notification(models.Model):
	KIND_CHOICES = [
		('order_placed', 'Order placed'),
		('order_confirmed', 'Order confirmed'),
		('order_ready', 'Order ready'),
		('order_cancelled', 'Order cancelled'),
		('payment_pending', 'Payment pending'),
		('payment_received', 'Payment received'),
	]
	PRIORITY_CHOICES = [
		('low', 'Low'),
		('medium', 'Medium'),
		('high', 'High'),
	]
	kind = models.CharField(max_length=20, choices=KIND_CHOICES)
	title = models.CharField(max_length=100)
	message = models.CharField(max_length=255)
	priority = models.CharField(max_length=10, choices=PRIORITY_CHOICES, default='medium')
	table_id = models.PositiveIntegerField(null=True, blank=True)
	order_id = models.PositiveIntegerField(null=True, blank=True)
	is_read = models.BooleanField(default=False)
	created_at = models.DateTimeField(auto_now_add=True)

	objects = NotificationQuerySet.as_manager()

	class Meta:
		ordering = ['-created_at', '-id']

	def __str__(self):
		return f"{self.title} ({self.kind})"
