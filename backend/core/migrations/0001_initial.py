import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Port',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('code', models.CharField(max_length=10, unique=True)),
                ('country', models.CharField(blank=True, default='', max_length=100)),
                ('country_code', models.CharField(blank=True, default='', max_length=2)),
                ('region', models.CharField(blank=True, default='', max_length=100)),
                ('unlocode', models.CharField(blank=True, max_length=5, null=True)),
                ('city_unlocode', models.CharField(blank=True, max_length=5, null=True)),
                ('port_category', models.CharField(choices=[('SEA_PORT', 'Seaport'), ('AIRPORT', 'Airport')], default='SEA_PORT', max_length=10)),
                ('iata_code', models.CharField(blank=True, max_length=3, null=True)),
                ('icao_code', models.CharField(blank=True, max_length=4, null=True)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'ordering': ['name'],
                'indexes': [
                    models.Index(fields=['unlocode'], name='core_port_unlocod_6f1d2a_idx'),
                    models.Index(fields=['iata_code'], name='core_port_iata_co_0b7c3e_idx'),
                    models.Index(fields=['country_code'], name='core_port_country_9e4a51_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ShippingCarrier',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('code', models.CharField(max_length=50, unique=True)),
                ('service_types', models.JSONField(blank=True, default=list)),
                ('website', models.URLField(blank=True, default='')),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='PortAlias',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('alias', models.CharField(max_length=255)),
                ('alias_normalized', models.CharField(editable=False, max_length=255, unique=True)),
                ('alias_type', models.CharField(choices=[('name_variant', 'Name variant'), ('code_variant', 'Code variant'), ('typo', 'Typo'), ('other', 'Other')], default='name_variant', max_length=20)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('port', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='aliases', to='core.port')),
            ],
            options={
                'verbose_name_plural': 'port aliases',
                'ordering': ['alias'],
            },
        ),
    ]
