import django.db.models.deletion
from django.db import migrations, models


def _amount():
    return models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)


def _unit():
    return models.CharField(choices=[('LUMPSUM', 'Lumpsum'), ('LM', 'Per LM')], default='LUMPSUM', max_length=10)


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('core', '0001_initial'),
        ('articles', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='CarrierCategoryGroup',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('code', models.CharField(max_length=50)),
                ('display_name', models.CharField(max_length=100)),
                ('vehicle_categories', models.JSONField(blank=True, default=list)),
                ('is_active', models.BooleanField(default=True)),
                ('sort_order', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('carrier', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='category_groups', to='core.shippingcarrier')),
            ],
            options={
                'ordering': ['carrier', 'sort_order', 'code'],
                'constraints': [models.UniqueConstraint(fields=('carrier', 'code'), name='uniq_carrier_category_group')],
            },
        ),
        migrations.CreateModel(
            name='CarrierArticleMapping',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(blank=True, default='', max_length=255)),
                ('port_ids', models.JSONField(blank=True, null=True)),
                ('port_group_ids', models.JSONField(blank=True, null=True)),
                ('vehicle_categories', models.JSONField(blank=True, null=True)),
                ('category_group_ids', models.JSONField(blank=True, null=True)),
                ('is_active', models.BooleanField(default=True)),
                ('sort_order', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('article', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='carrier_mappings', to='articles.robawsarticlecache')),
                ('carrier', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='article_mappings', to='core.shippingcarrier')),
            ],
            options={
                'ordering': ['carrier', 'sort_order', 'id'],
                'indexes': [models.Index(fields=['carrier', 'is_active'], name='tariffs_car_carrier_5a9d3b_idx')],
            },
        ),
        migrations.CreateModel(
            name='CarrierPurchaseTariff',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('effective_from', models.DateField(blank=True, null=True)),
                ('effective_to', models.DateField(blank=True, null=True)),
                ('update_date', models.DateField(blank=True, null=True)),
                ('validity_date', models.DateField(blank=True, null=True)),
                ('currency', models.CharField(default='EUR', max_length=3)),
                ('is_active', models.BooleanField(default=True)),
                ('sort_order', models.PositiveIntegerField(default=0)),
                ('source', models.CharField(blank=True, default='', max_length=50)),
                ('notes', models.TextField(blank=True, default='')),
                ('base_freight_amount', _amount()),
                ('base_freight_unit', _unit()),
                ('baf_amount', _amount()),
                ('baf_unit', _unit()),
                ('ets_amount', _amount()),
                ('ets_unit', _unit()),
                ('port_additional_amount', _amount()),
                ('port_additional_unit', _unit()),
                ('admin_fxe_amount', _amount()),
                ('admin_fxe_unit', _unit()),
                ('thc_amount', _amount()),
                ('thc_unit', _unit()),
                ('measurement_costs_amount', _amount()),
                ('measurement_costs_unit', _unit()),
                ('congestion_surcharge_amount', _amount()),
                ('congestion_surcharge_unit', _unit()),
                ('iccm_amount', _amount()),
                ('iccm_unit', _unit()),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('mapping', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='purchase_tariffs', to='tariffs.carrierarticlemapping')),
            ],
            options={
                'ordering': ['-effective_from', 'sort_order', 'id'],
                'indexes': [models.Index(fields=['mapping', 'is_active', 'effective_from'], name='tariffs_car_mapping_e71c40_idx')],
            },
        ),
    ]
