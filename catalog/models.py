"""
Catalog models - articles, products, promotions and their link tables.

Link tables join locations and catalog entities many-to-many. Their foreign
keys are PROTECT: an endpoint can only be deleted through
``catalog.relationships.delete_entity``, which purges the links first.
"""
from django.db import models
from django.utils import timezone

from locations.models import Location


class Article(models.Model):
    title = models.CharField(max_length=500)
    category = models.CharField(max_length=255, blank=True, null=True, db_index=True)
    date_posted = models.DateTimeField(default=timezone.now, db_index=True)
    image = models.URLField(max_length=1000, blank=True, null=True)
    content = models.TextField(blank=True, null=True)
    content_summary = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'articles'
        ordering = ['-created_at', '-id']

    def __str__(self):
        return self.title


class Product(models.Model):
    name = models.CharField(max_length=255, db_index=True)
    category = models.CharField(max_length=255, blank=True, null=True, db_index=True)
    price = models.DecimalField(max_digits=10, decimal_places=2, blank=True, null=True)
    image = models.URLField(max_length=1000, blank=True, null=True)
    description = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'products'
        ordering = ['-created_at', '-id']

    def __str__(self):
        return self.name


class Promotion(models.Model):
    name = models.CharField(max_length=255, blank=True, null=True)
    image = models.URLField(max_length=1000, blank=True, null=True)
    description = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'promotions'
        ordering = ['-created_at', '-id']

    def __str__(self):
        return self.name or f"Promotion {self.pk}"


# ─────────────────────────────────────────────────────────────
# LINK TABLES
# ─────────────────────────────────────────────────────────────

class LocationArticle(models.Model):
    location = models.ForeignKey(Location, on_delete=models.PROTECT, related_name='article_links')
    article = models.ForeignKey(Article, on_delete=models.PROTECT, related_name='location_links')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'location_articles'
        ordering = ['created_at', 'id']
        constraints = [
            models.UniqueConstraint(fields=['location', 'article'], name='unique_location_article'),
        ]

    def __str__(self):
        return f"location {self.location_id} ↔ article {self.article_id}"


class LocationProduct(models.Model):
    location = models.ForeignKey(Location, on_delete=models.PROTECT, related_name='product_links')
    product = models.ForeignKey(Product, on_delete=models.PROTECT, related_name='location_links')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'location_products'
        ordering = ['created_at', 'id']
        constraints = [
            models.UniqueConstraint(fields=['location', 'product'], name='unique_location_product'),
        ]

    def __str__(self):
        return f"location {self.location_id} ↔ product {self.product_id}"


class LocationPromotion(models.Model):
    location = models.ForeignKey(Location, on_delete=models.PROTECT, related_name='promotion_links')
    promotion = models.ForeignKey(Promotion, on_delete=models.PROTECT, related_name='location_links')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'location_promotions'
        ordering = ['created_at', 'id']
        constraints = [
            models.UniqueConstraint(fields=['location', 'promotion'], name='unique_location_promotion'),
        ]

    def __str__(self):
        return f"location {self.location_id} ↔ promotion {self.promotion_id}"


class ArticleProduct(models.Model):
    article = models.ForeignKey(Article, on_delete=models.PROTECT, related_name='product_links')
    product = models.ForeignKey(Product, on_delete=models.PROTECT, related_name='article_links')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'article_products'
        ordering = ['created_at', 'id']
        constraints = [
            models.UniqueConstraint(fields=['article', 'product'], name='unique_article_product'),
        ]

    def __str__(self):
        return f"article {self.article_id} ↔ product {self.product_id}"


class ArticlePromotion(models.Model):
    article = models.ForeignKey(Article, on_delete=models.PROTECT, related_name='promotion_links')
    promotion = models.ForeignKey(Promotion, on_delete=models.PROTECT, related_name='article_links')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'article_promotions'
        ordering = ['created_at', 'id']
        constraints = [
            models.UniqueConstraint(fields=['article', 'promotion'], name='unique_article_promotion'),
        ]

    def __str__(self):
        return f"article {self.article_id} ↔ promotion {self.promotion_id}"


class ProductPromotion(models.Model):
    product = models.ForeignKey(Product, on_delete=models.PROTECT, related_name='promotion_links')
    promotion = models.ForeignKey(Promotion, on_delete=models.PROTECT, related_name='product_links')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'product_promotions'
        ordering = ['created_at', 'id']
        constraints = [
            models.UniqueConstraint(fields=['product', 'promotion'], name='unique_product_promotion'),
        ]

    def __str__(self):
        return f"product {self.product_id} ↔ promotion {self.promotion_id}"
