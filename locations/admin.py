from django.contrib import admin

from catalog.admin import CascadeDeleteAdminMixin
from .models import Location


@admin.register(Location)
class LocationAdmin(CascadeDeleteAdminMixin, admin.ModelAdmin):
    entity_kind = 'location'
    list_display = ('name', 'page_group_slug', 'address_region', 'address_city', 'address_line1', 'updated_at')
    list_filter = ('page_group_slug', 'address_region')
    search_fields = ('name', 'address_city', 'address_line1')
    readonly_fields = ('created_at', 'updated_at')
