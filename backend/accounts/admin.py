from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from .models import CustomUser


@admin.register(CustomUser)
class CustomUserAdmin(UserAdmin):
    model = CustomUser
    list_display = ['username', 'email', 'role', 'company_name', 'robaws_client_id', 'is_staff']
    list_filter = ['role', 'is_staff', 'is_active']
    search_fields = ['username', 'email', 'company_name']
    fieldsets = UserAdmin.fieldsets + (
        ('B-Connect', {'fields': ('role', 'robaws_client_id', 'company_name', 'country_code', 'phone', 'pricing_tier')}),
    )
