import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='ChangeEvent',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('channel', models.CharField(choices=[('db_changes', 'Table changes'), ('app_updates', 'App updates')], default='db_changes', max_length=20)),
                ('table', models.CharField(blank=True, max_length=50)),
                ('action', models.CharField(choices=[('INSERT', 'Insert'), ('UPDATE', 'Update'), ('DELETE', 'Delete'), ('BROADCAST', 'Broadcast')], max_length=20)),
                ('object_id', models.CharField(blank=True, max_length=64)),
                ('event', models.CharField(blank=True, max_length=50)),
                ('payload', models.JSONField(blank=True, default=dict)),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
            ],
            options={
                'db_table': 'change_events',
                'ordering': ['id'],
            },
        ),
    ]
