# Generated manually for the stations app

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import apps.stations.models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='PairingSession',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('token', models.CharField(default=apps.stations.models.generate_session_token, editable=False, max_length=64, unique=True)),
                ('station_id', models.CharField(default=apps.stations.models.default_station_id, max_length=100)),
                ('credential', models.TextField(blank=True)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('connected', 'Connected'), ('active', 'Active'), ('ended', 'Ended'), ('expired', 'Expired')], default='pending', max_length=20)),
                ('created_at', models.DateTimeField()),
                ('expires_at', models.DateTimeField()),
                ('ended_at', models.DateTimeField(blank=True, null=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='pairing_sessions', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'pairing_sessions',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['status'], name='pairing_status_idx'),
                    models.Index(fields=['expires_at'], name='pairing_expires_idx'),
                    models.Index(fields=['station_id', 'status'], name='pairing_station_status_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(
                        condition=(
                            models.Q(status__in=['connected', 'active'], user__isnull=False)
                            | (~models.Q(status__in=['connected', 'active']) & models.Q(user__isnull=True))
                        ),
                        name='pairing_session_user_matches_status',
                    ),
                ],
            },
        ),
    ]
