"""
Serializers for Location model.
"""
from rest_framework import serializers
from .models import Location
from .slugs import slugify_segment

# address part -> slug field derived from it
SLUG_SOURCES = {
    'slug_region': 'address_region',
    'slug_city': 'address_city',
    'slug_line1': 'address_line1',
}


class LocationSerializer(serializers.ModelSerializer):
    """
    Serializer for Location model.
    Slug fields are optional; missing ones are derived from the address.
    """
    address = serializers.ReadOnlyField()
    slug = serializers.ReadOnlyField()
    path = serializers.ReadOnlyField()

    class Meta:
        model = Location
        fields = (
            'id', 'page_group_slug', 'name',
            'address_region', 'address_city', 'address_line1',
            'address_line2', 'address_postal_code',
            'slug_region', 'slug_city', 'slug_line1',
            'address', 'slug', 'path',
            'created_at', 'updated_at'
        )
        read_only_fields = ('id', 'created_at', 'updated_at')
        extra_kwargs = {
            'slug_region': {'required': False},
            'slug_city': {'required': False},
            'slug_line1': {'required': False},
        }
        # Slug uniqueness is checked in validate() once derived slugs are known
        validators = []

    def validate(self, attrs):
        for slug_field, address_field in SLUG_SOURCES.items():
            if not attrs.get(slug_field) and attrs.get(address_field):
                attrs[slug_field] = slugify_segment(attrs[address_field])

        slug = {
            field: attrs.get(field, getattr(self.instance, field, None))
            for field in SLUG_SOURCES
        }
        if any(not value for value in slug.values()):
            raise serializers.ValidationError("Address must produce a non-empty slug for region, city and line1")

        clash = Location.objects.filter(**slug)
        if self.instance is not None:
            clash = clash.exclude(pk=self.instance.pk)
        if clash.exists():
            raise serializers.ValidationError("A location with this address slug already exists")

        return attrs
