import decimal
import uuid

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('catalog', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='DocumentSequence',
            fields=[
                ('name', models.CharField(max_length=50, primary_key=True, serialize=False)),
                ('last_value', models.PositiveBigIntegerField(default=0)),
            ],
            options={
                'db_table': 'document_sequences',
            },
        ),
        migrations.CreateModel(
            name='Transaction',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('reference_number', models.CharField(db_index=True, max_length=50)),
                ('bis_number', models.PositiveBigIntegerField(blank=True, null=True)),
                ('type', models.CharField(choices=[('RECEIVING', 'Receiving'), ('ISSUANCE', 'Issuance'), ('ISSUANCE_RETURN', 'Issuance Return'), ('PULL_OUT', 'Pull Out'), ('VOID', 'Void')], max_length=20)),
                ('transaction_mode', models.CharField(blank=True, choices=[('CASH', 'Cash'), ('CHARGED', 'Charged'), ('SIP', 'SIP'), ('TRANSMITTAL', 'Transmittal')], max_length=20)),
                ('product_name_snapshot', models.CharField(blank=True, max_length=300)),
                ('qty', models.PositiveIntegerField(default=0)),
                ('price_snapshot', models.DecimalField(decimal_places=2, default=decimal.Decimal('0.00'), max_digits=12, validators=[django.core.validators.MinValueValidator(decimal.Decimal('0.00'))])),
                ('unit_cost_snapshot', models.DecimalField(decimal_places=2, default=decimal.Decimal('0.00'), max_digits=12, validators=[django.core.validators.MinValueValidator(decimal.Decimal('0.00'))])),
                ('previous_stock', models.PositiveIntegerField(blank=True, null=True)),
                ('new_stock', models.PositiveIntegerField(blank=True, null=True)),
                ('student_id', models.CharField(blank=True, max_length=50)),
                ('student_name', models.CharField(blank=True, max_length=200)),
                ('course', models.CharField(blank=True, max_length=100)),
                ('year_level', models.CharField(blank=True, max_length=20)),
                ('supplier', models.CharField(blank=True, max_length=200)),
                ('remarks', models.TextField(blank=True)),
                ('timestamp', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('is_voided', models.BooleanField(default=False)),
                ('void_reason', models.TextField(blank=True)),
                ('product', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='transactions', to='catalog.product')),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='transactions', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'transactions',
                'ordering': ['-timestamp', '-id'],
                'indexes': [
                    models.Index(fields=['type', 'timestamp'], name='tx_type_timestamp_idx'),
                    models.Index(fields=['timestamp', 'id'], name='tx_timestamp_id_idx'),
                    models.Index(fields=['student_name'], name='tx_student_name_idx'),
                ],
            },
        ),
    ]
