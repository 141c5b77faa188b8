from decimal import Decimal

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('core', '0001_initial'),
        ('pricing', '0001_initial'),
        ('articles', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='QuotationRequest',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('request_number', models.CharField(blank=True, max_length=32, unique=True)),
                ('source', models.CharField(choices=[('prospect', 'Prospect'), ('customer', 'Customer'), ('intake', 'Intake')], default='prospect', max_length=20)),
                ('requester_type', models.CharField(blank=True, default='', max_length=20)),
                ('client_name', models.CharField(blank=True, default='', max_length=255)),
                ('client_email', models.EmailField(blank=True, default='', max_length=254)),
                ('client_tel', models.CharField(blank=True, default='', max_length=50)),
                ('robaws_client_id', models.CharField(blank=True, max_length=64, null=True)),
                ('contact_name', models.CharField(blank=True, default='', max_length=255)),
                ('contact_email', models.EmailField(blank=True, default='', max_length=254)),
                ('contact_phone', models.CharField(blank=True, default='', max_length=50)),
                ('customer_reference', models.CharField(blank=True, default='', max_length=255)),
                ('service_type', models.CharField(blank=True, default='', max_length=50)),
                ('simple_service_type', models.CharField(blank=True, default='', max_length=50)),
                ('trade_direction', models.CharField(blank=True, choices=[('import', 'Import'), ('export', 'Export'), ('cross_trade', 'Cross trade')], default='', max_length=20)),
                ('por', models.CharField(blank=True, default='', max_length=255)),
                ('pol', models.CharField(blank=True, default='', max_length=255)),
                ('pod', models.CharField(blank=True, default='', max_length=255)),
                ('fdest', models.CharField(blank=True, default='', max_length=255)),
                ('in_transit_to', models.CharField(blank=True, default='', max_length=255)),
                ('cargo_description', models.TextField(blank=True, default='')),
                ('customer_role', models.CharField(blank=True, default='', max_length=50)),
                ('customer_type', models.CharField(blank=True, default='', max_length=50)),
                ('subtotal', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12)),
                ('discount_amount', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12)),
                ('discount_percentage', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=5)),
                ('total_excl_vat', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12)),
                ('vat_rate', models.DecimalField(blank=True, decimal_places=2, max_digits=5, null=True)),
                ('vat_amount', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12)),
                ('total_incl_vat', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12)),
                ('pricing_currency', models.CharField(default='EUR', max_length=3)),
                ('project_vat_code', models.CharField(blank=True, default='', max_length=50)),
                ('robaws_offer_id', models.CharField(blank=True, max_length=64, null=True)),
                ('robaws_offer_number', models.CharField(blank=True, max_length=64, null=True)),
                ('robaws_sync_status', models.CharField(blank=True, choices=[('pending', 'Pending'), ('synced', 'Synced'), ('failed', 'Failed')], max_length=10, null=True)),
                ('robaws_synced_at', models.DateTimeField(blank=True, null=True)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('processing', 'Processing'), ('quoted', 'Quoted'), ('accepted', 'Accepted'), ('rejected', 'Rejected'), ('expired', 'Expired')], default='pending', max_length=20)),
                ('quoted_at', models.DateTimeField(blank=True, null=True)),
                ('expires_at', models.DateTimeField(blank=True, null=True)),
                ('deleted_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('customer_user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='quotation_requests', to=settings.AUTH_USER_MODEL)),
                ('pricing_tier', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='quotation_requests', to='pricing.pricingtier')),
                ('selected_carrier', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='quotation_requests', to='core.shippingcarrier')),
            ],
            options={
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['status', '-created_at'], name='quotes_quot_status_3c7e91_idx'),
                    models.Index(fields=['customer_user', '-created_at'], name='quotes_quot_custome_a2f5d0_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='QuotationRequestArticle',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('item_type', models.CharField(choices=[('parent', 'Parent'), ('child', 'Child'), ('standalone', 'Standalone')], default='standalone', max_length=12)),
                ('quantity', models.DecimalField(decimal_places=4, default=Decimal('1'), max_digits=12)),
                ('unit_type', models.CharField(blank=True, default='', max_length=20)),
                ('unit_price', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12)),
                ('selling_price', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12)),
                ('subtotal', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12)),
                ('currency', models.CharField(default='EUR', max_length=3)),
                ('formula_inputs', models.JSONField(blank=True, null=True)),
                ('notes', models.TextField(blank=True, default='')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('article', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='quotation_lines', to='articles.robawsarticlecache')),
                ('parent_article', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='+', to='articles.robawsarticlecache')),
                ('quotation', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='articles', to='quotes.quotationrequest')),
            ],
            options={
                'ordering': ['id'],
            },
        ),
        migrations.CreateModel(
            name='QuotationCommodityItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('line_number', models.PositiveIntegerField(default=1)),
                ('commodity_type', models.CharField(blank=True, default='', max_length=50)),
                ('category', models.CharField(blank=True, default='', max_length=50)),
                ('make', models.CharField(blank=True, default='', max_length=100)),
                ('type_model', models.CharField(blank=True, default='', max_length=100)),
                ('quantity', models.PositiveIntegerField(default=1)),
                ('length_cm', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('width_cm', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('height_cm', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('weight_kg', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('cbm', models.DecimalField(blank=True, decimal_places=4, max_digits=12, null=True)),
                ('lm', models.DecimalField(blank=True, decimal_places=4, max_digits=12, null=True)),
                ('unit_price', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ('line_total', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ('extra_info', models.TextField(blank=True, default='')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('quotation', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='commodity_items', to='quotes.quotationrequest')),
            ],
            options={
                'ordering': ['line_number', 'id'],
            },
        ),
    ]
