from django.db import models


class MenuItem(models.Model):
	CATEGORY_CHOICES = [
		('drinks', 'Drinks'),
		('snacks', 'Snacks'),
		('pizza', 'Pizza'),
		('mains', 'Mains'),
		('desserts', 'Desserts'),
	]
	name = models.CharField(max_length=100)
	description = models.TextField(blank=True)
	price = models.DecimalField(max_digits=10, decimal_places=2)
	category = models.CharField(max_length=20, choices=CATEGORY_CHOICES, default='snacks')
	in_stock = models.BooleanField(default=True)
	created_at = models.DateTimeField(auto_now_add=True)
	updated_at = models.DateTimeField(auto_now=True)

	class Meta:
		ordering = ['category', 'name']

	def __str__(self):
		return self.name
