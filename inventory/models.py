from django.db import models
from django.db.models import F


class InventoryItemQuerySet(models.QuerySet):
	def low_stock(self):
		return self.filter(stock__lte=F('low_stock_threshold'))


class InventoryItem(models.Model):
	UNIT_CHOICES = [
		('kg', 'Kilogram'),
		('g', 'Gram'),
		('ltr', 'Litre'),
		('ml', 'Millilitre'),
		('pcs', 'Pieces'),
		('pack', 'Pack'),
	]
	name = models.CharField(max_length=100, unique=True)
	category = models.CharField(max_length=50, blank=True)
	stock = models.DecimalField(max_digits=10, decimal_places=2, default=0)
	unit = models.CharField(max_length=10, choices=UNIT_CHOICES, default='pcs')
	purchase_price = models.DecimalField(max_digits=10, decimal_places=2, default=0)
	low_stock_threshold = models.DecimalField(max_digits=10, decimal_places=2, default=0)
	supplier_name = models.CharField(max_length=100, blank=True)
	last_updated = models.DateTimeField(auto_now=True)

	objects = InventoryItemQuerySet.as_manager()

	class Meta:
		ordering = ['category', 'name']

	def __str__(self):
		return f"{self.name} ({self.stock} {self.unit})"

	@property
	def is_low(self):
		return self.stock <= self.low_stock_threshold
