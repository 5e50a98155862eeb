from decimal import Decimal

from django.db import models


class ImmutableTransactionError(Exception):
	"""Transactions form an append-only ledger."""


class TransactionQuerySet(models.QuerySet):
	def update(self, **kwargs):
		raise ImmutableTransactionError('Transactions cannot be updated')

	def delete(self):
		raise ImmutableTransactionError('Transactions cannot be deleted')

	def table_payments(self):
		return self.filter(order__isnull=True)

	def order_payments(self):
		return self.filter(order__isnull=False)


class Transaction(models.Model):
	METHOD_CHOICES = [
		('cash', 'Cash'),
		('online', 'Online'),
	]

	table = models.ForeignKey('floor.Table', on_delete=models.PROTECT, related_name='transactions')
	# Set for an individual order payment, empty for a whole-table payment
	order = models.ForeignKey(
		'floor.Order', on_delete=models.PROTECT, null=True, blank=True, related_name='transactions'
	)
	amount = models.DecimalField(max_digits=10, decimal_places=2)
	method = models.CharField(max_length=10, choices=METHOD_CHOICES)
	subtotal = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
	tax = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
	service_charge = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
	override = models.BooleanField(default=False)
	notes = models.CharField(max_length=255, blank=True)
	created_at = models.DateTimeField(auto_now_add=True)

	objects = TransactionQuerySet.as_manager()

	class Meta:
		ordering = ['-created_at', '-id']

	def __str__(self):
		scope = f"Order {self.order_id}" if self.order_id else f"Table {self.table_id}"
		return f"Transaction {self.id} for {scope} - {self.amount} ({self.method})"

	@property
	def scope(self):
		return 'order' if self.order_id else 'table'

	def save(self, *args, **kwargs):
		if not self._state.adding:
			raise ImmutableTransactionError(f'Transaction {self.pk} cannot be modified')
		super().save(*args, **kwargs)

	def delete(self, *args, **kwargs):
		raise ImmutableTransactionError(f'Transaction {self.pk} cannot be deleted')
