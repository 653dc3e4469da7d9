from django.contrib import admin
from .models import Page, PageGroup


@admin.register(PageGroup)
class PageGroupAdmin(admin.ModelAdmin):
    list_display = ('slug', 'is_published', 'updated_at', 'created_at')
    search_fields = ('slug',)
    readonly_fields = ('created_at', 'updated_at')


@admin.register(Page)
class PageAdmin(admin.ModelAdmin):
    list_display = ('path', 'is_published', 'updated_at', 'created_at')
    search_fields = ('path',)
    readonly_fields = ('created_at', 'updated_at')
