from django.db import migrations, models


def backfill_references(apps, schema_editor):
    Transaction = apps.get_model('transactions', 'Transaction')
    ReceiptReference = apps.get_model('transactions', 'ReceiptReference')
    references = (
        Transaction.objects
        .exclude(reference_number='')
        .values_list('reference_number', flat=True)
        .distinct()
    )
    ReceiptReference.objects.bulk_create(
        [ReceiptReference(reference_number=ref) for ref in references],
        ignore_conflicts=True,
    )


class Migration(migrations.Migration):

    dependencies = [
        ('transactions', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='ReceiptReference',
            fields=[
                ('reference_number', models.CharField(max_length=50, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'db_table': 'receipt_references',
            },
        ),
        migrations.RunPython(backfill_references, migrations.RunPython.noop),
    ]
