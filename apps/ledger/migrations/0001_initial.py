# Generated manually for the ledger app

from decimal import Decimal
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='LedgerEntry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('kind', models.CharField(choices=[('deposit', 'Deposit'), ('redemption', 'Redemption')], max_length=20)),
                ('delta', models.IntegerField()),
                ('balance_after', models.PositiveIntegerField()),
                ('material', models.CharField(blank=True, max_length=50)),
                ('weight_kg', models.FloatField(blank=True, null=True)),
                ('cash_amount', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ('station_id', models.CharField(blank=True, max_length=100)),
                ('session_token', models.CharField(blank=True, db_index=True, max_length=64)),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now, editable=False)),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='ledger_entries', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'ledger_entries',
                'ordering': ['-created_at', '-id'],
                'verbose_name_plural': 'ledger entries',
                'indexes': [
                    models.Index(fields=['owner', 'created_at'], name='ledger_owner_created_idx'),
                    models.Index(fields=['kind'], name='ledger_kind_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='PointsBalance',
            fields=[
                ('owner', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, primary_key=True, related_name='balance', serialize=False, to=settings.AUTH_USER_MODEL)),
                ('points', models.PositiveIntegerField(default=0)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'points_balances',
                'constraints': [
                    models.CheckConstraint(condition=models.Q(points__gte=0), name='points_balance_non_negative'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Redemption',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('points_used', models.PositiveIntegerField()),
                ('cash_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('method', models.CharField(max_length=50)),
                ('account_info', models.CharField(blank=True, max_length=255)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('completed', 'Completed'), ('failed', 'Failed')], default='pending', max_length=20)),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now, editable=False)),
                ('ledger_entry', models.OneToOneField(on_delete=django.db.models.deletion.PROTECT, related_name='redemption', to='ledger.ledgerentry')),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='redemptions', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'redemptions',
                'ordering': ['-created_at', '-id'],
                'indexes': [
                    models.Index(fields=['owner', 'created_at'], name='redemption_owner_created_idx'),
                    models.Index(fields=['status'], name='redemption_status_idx'),
                ],
            },
        ),
    ]
