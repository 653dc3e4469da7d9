# Generated migration for catalog entities and link tables

import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


def _link_model(name, table, left, left_to, left_related, right, right_to, right_related):
    return migrations.CreateModel(
        name=name,
        fields=[
            ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
            ('created_at', models.DateTimeField(auto_now_add=True)),
            (left, models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name=left_related, to=left_to)),
            (right, models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name=right_related, to=right_to)),
        ],
        options={
            'db_table': table,
            'ordering': ['created_at', 'id'],
            'constraints': [
                models.UniqueConstraint(fields=(left, right), name=f'unique_{left}_{right}'),
            ],
        },
    )


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('locations', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Article',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(max_length=500)),
                ('category', models.CharField(blank=True, db_index=True, max_length=255, null=True)),
                ('date_posted', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('image', models.URLField(blank=True, max_length=1000, null=True)),
                ('content', models.TextField(blank=True, null=True)),
                ('content_summary', models.TextField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'articles',
                'ordering': ['-created_at', '-id'],
            },
        ),
        migrations.CreateModel(
            name='Product',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(db_index=True, max_length=255)),
                ('category', models.CharField(blank=True, db_index=True, max_length=255, null=True)),
                ('price', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('image', models.URLField(blank=True, max_length=1000, null=True)),
                ('description', models.TextField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'products',
                'ordering': ['-created_at', '-id'],
            },
        ),
        migrations.CreateModel(
            name='Promotion',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(blank=True, max_length=255, null=True)),
                ('image', models.URLField(blank=True, max_length=1000, null=True)),
                ('description', models.TextField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'promotions',
                'ordering': ['-created_at', '-id'],
            },
        ),
        _link_model('LocationArticle', 'location_articles',
                    'location', 'locations.location', 'article_links',
                    'article', 'catalog.article', 'location_links'),
        _link_model('LocationProduct', 'location_products',
                    'location', 'locations.location', 'product_links',
                    'product', 'catalog.product', 'location_links'),
        _link_model('LocationPromotion', 'location_promotions',
                    'location', 'locations.location', 'promotion_links',
                    'promotion', 'catalog.promotion', 'location_links'),
        _link_model('ArticleProduct', 'article_products',
                    'article', 'catalog.article', 'product_links',
                    'product', 'catalog.product', 'article_links'),
        _link_model('ArticlePromotion', 'article_promotions',
                    'article', 'catalog.article', 'promotion_links',
                    'promotion', 'catalog.promotion', 'article_links'),
        _link_model('ProductPromotion', 'product_promotions',
                    'product', 'catalog.product', 'promotion_links',
                    'promotion', 'catalog.promotion', 'product_links'),
    ]
