# ==========================================
# apps/catalog/models.py
# ==========================================

from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal
import uuid


DEFAULT_MIN_STOCK_LEVEL = 10


class Product(models.Model):
    """
    Catalog item sold or issued by the bookstore.

    barcode is the client-facing identifier scanned at the counter;
    accpac_code links the item to the external accounting system.
    current_stock only changes through inventory transactions.
    """

    internal_id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    barcode = models.CharField(max_length=100, unique=True)
    accpac_code = models.CharField(max_length=50, unique=True, null=True, blank=True)
    name = models.CharField(max_length=300, db_index=True)
    price = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    unit_cost = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    min_stock_level = models.PositiveIntegerField(default=DEFAULT_MIN_STOCK_LEVEL)
    current_stock = models.PositiveIntegerField(default=0)
    location = models.CharField(max_length=100, blank=True)
    last_updated = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'products'
        indexes = [
            models.Index(fields=['name'], name='product_name_idx'),
            models.Index(fields=['current_stock'], name='product_stock_idx'),
        ]
        ordering = ['name']

    def __str__(self):
        return f"{self.barcode} - {self.name}"

    def save(self, *args, **kwargs):
        self.barcode = (self.barcode or '').strip().upper()
        self.accpac_code = self.accpac_code.strip().upper() if self.accpac_code else None
        self.name = (self.name or '').strip().upper()
        self.location = (self.location or '').strip().upper()
        super().save(*args, **kwargs)

    @property
    def is_low_stock(self):
        return self.current_stock <= self.min_stock_level

    @property
    def stock_value(self):
        return self.current_stock * self.unit_cost
