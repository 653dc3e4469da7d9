"""
Serializers for articles, products and promotions.
"""
from rest_framework import serializers
from .models import Article, Product, Promotion


class ArticleSerializer(serializers.ModelSerializer):
    """Serializer for Article model."""

    class Meta:
        model = Article
        fields = (
            'id', 'title', 'category', 'date_posted', 'image',
            'content', 'content_summary', 'created_at', 'updated_at'
        )
        read_only_fields = ('id', 'created_at', 'updated_at')


class ProductSerializer(serializers.ModelSerializer):
    """Serializer for Product model."""

    class Meta:
        model = Product
        fields = (
            'id', 'name', 'category', 'price', 'image',
            'description', 'created_at', 'updated_at'
        )
        read_only_fields = ('id', 'created_at', 'updated_at')

    def validate_price(self, value):
        if value is not None and value < 0:
            raise serializers.ValidationError("Price cannot be negative")
        return value


class PromotionSerializer(serializers.ModelSerializer):
    """Serializer for Promotion model."""

    class Meta:
        model = Promotion
        fields = ('id', 'name', 'image', 'description', 'created_at', 'updated_at')
        read_only_fields = ('id', 'created_at', 'updated_at')


class OverrideListSerializer(serializers.Serializer):
    """Body of a per-location link sync: {"overrides": [{location_ids, <kind>_ids}, ...]}."""
    overrides = serializers.ListField(child=serializers.DictField(), allow_empty=True)

    def validate_overrides(self, value):
        for override in value:
            for key, ids in override.items():
                if not key.endswith('_ids'):
                    raise serializers.ValidationError(f"Unexpected key '{key}'")
                if not isinstance(ids, list) or not all(
                    isinstance(pk, int) and not isinstance(pk, bool) for pk in ids
                ):
                    raise serializers.ValidationError(f"'{key}' must be a list of integer ids")
        return value
