from django.db import models


class Student(models.Model):
    """Student who receives issuances; refreshed on every issuance."""

    student_id = models.CharField(max_length=50, unique=True)
    name = models.CharField(max_length=200, db_index=True)
    course = models.CharField(max_length=100, blank=True)
    year_level = models.CharField(max_length=20, blank=True)
    last_updated = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'students'
        ordering = ['name']

    def __str__(self):
        return f"{self.student_id} - {self.name}"


class Supplier(models.Model):
    """
    Vendor delivering stock.

    Transactions store the supplier name, so deleting a supplier leaves
    past receipts untouched.
    """

    name = models.CharField(max_length=200, unique=True)
    contact_info = models.CharField(max_length=300, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'suppliers'
        ordering = ['name']

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        self.name = (self.name or '').strip().upper()
        super().save(*args, **kwargs)
