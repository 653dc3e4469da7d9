"""
Location model.

A location is one physical site instantiated from a page group's template.
Its address slug (region, city, line1) is the public URL key and is unique.
"""
from django.db import models

from .slugs import slugify_segment


class Location(models.Model):
    """
    A physical location belonging to a page group.
    Slug fields are derived from the address on save unless supplied.
    """
    page_group_slug = models.CharField(
        max_length=255,
        db_index=True,
        help_text="Slug of the page group whose template renders this location"
    )
    name = models.CharField(max_length=255)

    address_region = models.CharField(max_length=255)
    address_city = models.CharField(max_length=255)
    address_line1 = models.CharField(max_length=255)
    address_line2 = models.CharField(max_length=255, blank=True, null=True)
    address_postal_code = models.CharField(max_length=32, blank=True, null=True)

    slug_region = models.SlugField(max_length=255)
    slug_city = models.SlugField(max_length=255)
    slug_line1 = models.SlugField(max_length=255)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'locations'
        ordering = ['created_at', 'id']
        constraints = [
            models.UniqueConstraint(
                fields=['slug_region', 'slug_city', 'slug_line1'],
                name='unique_location_slug',
            ),
        ]
        indexes = [
            models.Index(fields=['slug_region', 'slug_city'], name='locations_city_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.path})"

    def save(self, *args, **kwargs):
        if not self.slug_region:
            self.slug_region = slugify_segment(self.address_region)
        if not self.slug_city:
            self.slug_city = slugify_segment(self.address_city)
        if not self.slug_line1:
            self.slug_line1 = slugify_segment(self.address_line1)
        super().save(*args, **kwargs)

    @property
    def address(self):
        return {
            'region': self.address_region,
            'city': self.address_city,
            'line1': self.address_line1,
            'line2': self.address_line2,
            'postal_code': self.address_postal_code,
        }

    @property
    def slug(self):
        return {
            'region': self.slug_region,
            'city': self.slug_city,
            'line1': self.slug_line1,
        }

    @property
    def path(self):
        """Public URL path of this location's page."""
        return f"/{self.slug_region}/{self.slug_city}/{self.slug_line1}"

    def as_context(self):
        """
        Context record for a location page's template tokens.

        The record itself is the context, so paths start at its keys:
          [[name]], [[id]], [[page_group_slug]], [[path]],
          [[address.region]], [[address.city]], [[address.line1]],
          [[address.line2]], [[address.postal_code]],
          [[slug.region]], [[slug.city]], [[slug.line1]]
        Keys are snake_case; [[pageGroupSlug]] or [[address.postalCode]] stay
        unresolved. Missing optional parts are None so their tokens stay
        unresolved too.
        """
        return {
            'id': self.id,
            'name': self.name,
            'page_group_slug': self.page_group_slug,
            'address': self.address,
            'slug': self.slug,
            'path': self.path,
        }
