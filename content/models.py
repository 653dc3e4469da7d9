"""
Content models - standalone pages and page groups.

Both hold a draft and a published content tree (editor JSON). A page group is
a template shared by many locations and is rendered per location through
template tokens.
"""
from django.db import models


class PublishableContent(models.Model):
    """Draft/published pair of content trees, both empty until first saved."""
    draft_data = models.JSONField(null=True, blank=True)
    published_data = models.JSONField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    # Name of the unique field content is addressed by
    lookup_field = None

    class Meta:
        abstract = True

    def __str__(self):
        return self.key

    @property
    def key(self):
        return getattr(self, self.lookup_field)

    @property
    def is_published(self):
        return self.published_data is not None

    @property
    def has_unpublished_changes(self):
        return self.draft_data != self.published_data


class PageGroup(PublishableContent):
    slug = models.SlugField(max_length=255, unique=True)

    lookup_field = 'slug'

    class Meta:
        db_table = 'page_groups'
        ordering = ['slug']


class Page(PublishableContent):
    path = models.CharField(max_length=1024, unique=True, help_text="URL path, e.g. /about")

    lookup_field = 'path'

    class Meta:
        db_table = 'pages'
        ordering = ['path']
