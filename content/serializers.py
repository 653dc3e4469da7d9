"""
Serializers for pages, page groups and publish requests.
"""
from rest_framework import serializers
from .models import Page, PageGroup


class PageSerializer(serializers.ModelSerializer):
    """Serializer for Page model."""
    is_published = serializers.BooleanField(read_only=True)
    has_unpublished_changes = serializers.BooleanField(read_only=True)

    class Meta:
        model = Page
        fields = (
            'id', 'path', 'draft_data', 'published_data',
            'is_published', 'has_unpublished_changes', 'created_at', 'updated_at'
        )
        read_only_fields = fields


class PageGroupSerializer(serializers.ModelSerializer):
    """Serializer for PageGroup model."""
    is_published = serializers.BooleanField(read_only=True)
    has_unpublished_changes = serializers.BooleanField(read_only=True)

    class Meta:
        model = PageGroup
        fields = (
            'id', 'slug', 'draft_data', 'published_data',
            'is_published', 'has_unpublished_changes', 'created_at', 'updated_at'
        )
        read_only_fields = fields


class ContentDataSerializer(serializers.Serializer):
    """Body of a page-group publish or draft save: {"data": <content tree>}."""
    data = serializers.JSONField()


class PageContentSerializer(ContentDataSerializer):
    """Body of a page publish or draft save: {"path": "/about", "data": <content tree>}."""
    path = serializers.CharField(max_length=1024)

    def validate_path(self, value):
        if not value.startswith('/'):
            raise serializers.ValidationError("Path must start with '/'")
        return value
