# Generated migration for Location model

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Location',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('page_group_slug', models.CharField(db_index=True, help_text="Slug of the page group whose template renders this location", max_length=255)),
                ('name', models.CharField(max_length=255)),
                ('address_region', models.CharField(max_length=255)),
                ('address_city', models.CharField(max_length=255)),
                ('address_line1', models.CharField(max_length=255)),
                ('address_line2', models.CharField(blank=True, max_length=255, null=True)),
                ('address_postal_code', models.CharField(blank=True, max_length=32, null=True)),
                ('slug_region', models.SlugField(max_length=255)),
                ('slug_city', models.SlugField(max_length=255)),
                ('slug_line1', models.SlugField(max_length=255)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'locations',
                'ordering': ['created_at', 'id'],
                'indexes': [models.Index(fields=['slug_region', 'slug_city'], name='locations_city_idx')],
                'constraints': [models.UniqueConstraint(fields=('slug_region', 'slug_city', 'slug_line1'), name='unique_location_slug')],
            },
        ),
    ]
