from decimal import Decimal

from django.db import models


class Table(models.Model):
	STATUS_CHOICES = [
		('available', 'Available'),
		('occupied', 'Occupied'),
		('reserved', 'Reserved'),
		('disabled', 'Disabled'),
		('billing', 'Billing'),
	]
	name = models.CharField(max_length=50, blank=True)
	capacity = models.PositiveIntegerField(default=4)
	location = models.CharField(max_length=50, blank=True)
	status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='available')
	updated_at = models.DateTimeField(auto_now=True)

	class Meta:
		ordering = ['id']

	def __str__(self):
		return self.name or f"Table {self.id}"


class OrderQuerySet(models.QuerySet):
	def for_table(self, table_id):
		return self.filter(table_id=table_id)

	def unsettled(self):
		return self.filter(settled_by__isnull=True)

	def billable(self, statuses):
		return self.unsettled().filter(status__in=statuses)

	def open(self):
		return self.unsettled().filter(status__in=Order.OPEN_STATUSES)


class Order(models.Model):
	STATUS_CHOICES = [
		('pending', 'Pending'),
		('preparing', 'Preparing'),
		('ready', 'Ready'),
		('completed', 'Completed'),
		('cancelled', 'Cancelled'),
	]
	OPEN_STATUSES = ('pending', 'preparing', 'ready')
	TERMINAL_STATUSES = ('completed', 'cancelled')

	table = models.ForeignKey(Table, on_delete=models.PROTECT, related_name='orders')
	status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='pending')
	total_amount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
	notes = models.CharField(max_length=255, blank=True)
	settled_by = models.ForeignKey(
		'payment.Transaction', on_delete=models.PROTECT, null=True, blank=True, related_name='settled_orders'
	)
	created_at = models.DateTimeField(auto_now_add=True)
	updated_at = models.DateTimeField(auto_now=True)

	objects = OrderQuerySet.as_manager()

	class Meta:
		ordering = ['created_at', 'id']

	def __str__(self):
		return f"Order {self.id} (Table {self.table_id}) - {self.status}"

	@property
	def is_settled(self):
		return self.settled_by_id is not None


class OrderLineItem(models.Model):
	order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='items')
	menu_item = models.ForeignKey('menu.MenuItem', on_delete=models.SET_NULL, null=True, blank=True)
	name = models.CharField(max_length=100)
	price = models.DecimalField(max_digits=10, decimal_places=2)
	quantity = models.PositiveIntegerField()

	class Meta:
		ordering = ['id']

	def __str__(self):
		return f"{self.quantity} x {self.name} for Order {self.order_id}"

	@property
	def line_total(self):
		return self.price * self.quantity


class CafeSettings(models.Model):
	cafe_name = models.CharField(max_length=100, default='OrderChha Cafe')
	address = models.CharField(max_length=255, blank=True, default='Kathmandu, Nepal')
	phone = models.CharField(max_length=30, blank=True)
	currency = models.CharField(max_length=3, default='NPR')
	tax_rate = models.DecimalField(max_digits=5, decimal_places=4, default=Decimal('0.13'))
	service_charge_rate = models.DecimalField(max_digits=5, decimal_places=4, default=Decimal('0.00'))
	receipt_note = models.CharField(max_length=255, blank=True, default='Thank you for dining with us!')
	online_ordering_enabled = models.BooleanField(default=True)
	updated_at = models.DateTimeField(auto_now=True)

	class Meta:
		verbose_name = 'cafe settings'
		verbose_name_plural = 'cafe settings'

	def __str__(self):
		return self.cafe_name

	def save(self, *args, **kwargs):
		# Single row per deployment
		self.pk = 1
		super().save(*args, **kwargs)

	@classmethod
	def load(cls):
		settings_obj, _ = cls.objects.get_or_create(pk=1)
		return settings_obj
