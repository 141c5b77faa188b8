from decimal import Decimal

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('core', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='RobawsArticleCache',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('robaws_article_id', models.CharField(max_length=64, unique=True)),
                ('article_code', models.CharField(blank=True, default='', max_length=100)),
                ('article_name', models.CharField(max_length=255)),
                ('description', models.TextField(blank=True, default='')),
                ('category', models.CharField(blank=True, default='', max_length=50)),
                ('unit_type', models.CharField(blank=True, default='UNIT', max_length=20)),
                ('unit_price', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12)),
                ('cost_price', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ('currency', models.CharField(default='EUR', max_length=3)),
                ('service_type', models.CharField(blank=True, default='', max_length=50)),
                ('pol', models.CharField(blank=True, default='', max_length=255)),
                ('pol_code', models.CharField(blank=True, default='', max_length=10)),
                ('pod', models.CharField(blank=True, default='', max_length=255)),
                ('pod_code', models.CharField(blank=True, default='', max_length=10)),
                ('vehicle_category', models.CharField(blank=True, default='', max_length=50)),
                ('category_group', models.CharField(blank=True, default='', max_length=50)),
                ('is_parent_item', models.BooleanField(default=False)),
                ('is_active', models.BooleanField(default=True)),
                ('applicable_services', models.JSONField(blank=True, default=list)),
                ('profit_margins', models.JSONField(blank=True, default=dict)),
                ('pricing_formula', models.JSONField(blank=True, null=True)),
                ('update_date', models.DateField(blank=True, null=True)),
                ('validity_date', models.DateField(blank=True, null=True)),
                ('update_date_override', models.DateField(blank=True, null=True)),
                ('validity_date_override', models.DateField(blank=True, null=True)),
                ('last_pushed_dates_at', models.DateTimeField(blank=True, null=True)),
                ('last_pushed_update_date', models.DateField(blank=True, null=True)),
                ('last_pushed_validity_date', models.DateField(blank=True, null=True)),
                ('last_synced_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('shipping_carrier', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='articles', to='core.shippingcarrier')),
            ],
            options={
                'ordering': ['article_name'],
                'indexes': [
                    models.Index(fields=['article_code'], name='articles_ro_article_4b1e0c_idx'),
                    models.Index(fields=['pod_code', 'vehicle_category'], name='articles_ro_pod_cod_8d2f7a_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ArticleChild',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('child_type', models.CharField(choices=[('required', 'Required'), ('optional', 'Optional'), ('conditional', 'Conditional')], default='required', max_length=12)),
                ('conditions', models.JSONField(blank=True, null=True)),
                ('default_quantity', models.DecimalField(blank=True, decimal_places=4, max_digits=12, null=True)),
                ('sort_order', models.PositiveIntegerField(default=0)),
                ('child', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='parent_links', to='articles.robawsarticlecache')),
                ('parent', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='child_links', to='articles.robawsarticlecache')),
            ],
            options={
                'ordering': ['sort_order', 'id'],
                'constraints': [models.UniqueConstraint(fields=('parent', 'child'), name='uniq_article_child_link')],
            },
        ),
    ]
