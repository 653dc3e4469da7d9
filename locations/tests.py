"""
Tests for locations app - directory lookups and location management.
"""
import pytest
from django.contrib.auth import get_user_model
from django.core.management import call_command
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from locations.slugs import slugify_segment


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def user_model():
    return get_user_model()


@pytest.fixture
def create_user(user_model):
    def _create_user(email="editor@example.com", password="testpass123"):
        return user_model.objects.create_user(
            email=email,
            username=email,
            password=password
        )
    return _create_user


@pytest.fixture
def authenticated_client(api_client, create_user):
    user = create_user()
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {str(refresh.access_token)}')
    return api_client, user


@pytest.fixture
def create_location():
    def _create_location(name="Galaxy Grill Downtown", region="CA", city="San Francisco",
                         line1="123 Market St", page_group_slug="location", **extra):
        from locations.models import Location
        return Location.objects.create(
            page_group_slug=page_group_slug,
            name=name,
            address_region=region,
            address_city=city,
            address_line1=line1,
            **extra,
        )
    return _create_location


class TestSlugs:

    def test_lowercases_and_dashes(self):
        assert slugify_segment('San Francisco') == 'san-francisco'

    def test_collapses_punctuation(self):
        assert slugify_segment('  1001 N.W. Couch St. ') == '1001-n-w-couch-st'

    def test_ampersand(self):
        assert slugify_segment('Fish & Chips') == 'fish-and-chips'

    def test_empty(self):
        assert slugify_segment('!!!') == ''


@pytest.mark.django_db
class TestLocationModel:

    def test_slugs_derived_from_address(self, create_location):
        location = create_location()
        assert location.slug == {'region': 'ca', 'city': 'san-francisco', 'line1': '123-market-st'}
        assert location.path == '/ca/san-francisco/123-market-st'

    def test_explicit_slugs_are_kept(self, create_location):
        location = create_location(slug_line1='downtown')
        assert location.path == '/ca/san-francisco/downtown'

    def test_context_record(self, create_location):
        location = create_location(address_postal_code='94103')
        context = location.as_context()
        assert context['name'] == 'Galaxy Grill Downtown'
        assert context['address']['postal_code'] == '94103'
        assert context['address']['line2'] is None
        assert context['slug']['city'] == 'san-francisco'

    def test_context_token_paths(self, create_location):
        from content.tokens import resolve_tokens

        location = create_location(address_postal_code='94103')
        text = '[[name]] [[address.postal_code]] [[address.postalCode]] [[slug.line1]]'
        assert resolve_tokens(text, location.as_context()) == (
            'Galaxy Grill Downtown 94103 [[address.postalCode]] 123-market-st'
        )


@pytest.mark.django_db
class TestDirectory:

    def test_list_for_group(self, create_location):
        from locations.directory import list_for_group

        first = create_location()
        second = create_location(name="Galaxy Grill Mission", line1="482 Valencia St")
        create_location(name="Other brand", line1="1 Main St", page_group_slug="other")

        assert list_for_group('location') == [first, second]
        assert list_for_group('missing') == []

    def test_get_by_address(self, create_location):
        from locations.directory import get_by_address

        location = create_location()
        assert get_by_address('ca', 'san-francisco', '123-market-st') == location
        assert get_by_address('ca', 'san-francisco', 'nowhere') is None

    def test_list_by_city(self, create_location):
        from locations.directory import list_by_city

        create_location()
        create_location(name="Galaxy Grill Mission", line1="482 Valencia St")
        create_location(name="Galaxy Grill Oakland", city="Oakland", line1="780 Broadway")

        assert len(list_by_city('ca', 'san-francisco')) == 2
        assert list_by_city('wa', 'seattle') == []

    def test_distinct_cities_first_seen_wins(self, create_location):
        from locations.directory import list_distinct_cities

        create_location(city="San Francisco")
        create_location(name="Galaxy Grill Oakland", city="Oakland", line1="780 Broadway")
        # Same slug pair, different display spelling
        create_location(name="Galaxy Grill Mission", city="SAN FRANCISCO", line1="482 Valencia St")

        cities = list_distinct_cities('location')
        assert cities == [
            {
                'slug': {'region': 'ca', 'city': 'san-francisco'},
                'region': 'CA',
                'city': 'San Francisco',
                'path': '/ca/san-francisco',
            },
            {
                'slug': {'region': 'ca', 'city': 'oakland'},
                'region': 'CA',
                'city': 'Oakland',
                'path': '/ca/oakland',
            },
        ]

    def test_distinct_cities_empty_group(self):
        from locations.directory import list_distinct_cities
        assert list_distinct_cities('location') == []


@pytest.mark.django_db
class TestLocationAPI:

    def test_list_locations(self, api_client, create_location):
        create_location()
        create_location(name="Other brand", line1="1 Main St", page_group_slug="other")

        response = api_client.get('/api/v1/locations/', {'page_group': 'location'})
        assert response.status_code == 200
        assert len(response.data['results']) == 1
        assert response.data['results'][0]['path'] == '/ca/san-francisco/123-market-st'

    def test_create_location(self, authenticated_client):
        from locations.models import Location
        client, _ = authenticated_client

        response = client.post('/api/v1/locations/', {
            'page_group_slug': 'location',
            'name': 'Galaxy Grill Seattle',
            'address_region': 'WA',
            'address_city': 'Seattle',
            'address_line1': '611 Pine St',
        }, format='json')
        assert response.status_code == 201
        assert response.data['slug'] == {'region': 'wa', 'city': 'seattle', 'line1': '611-pine-st'}
        assert Location.objects.filter(slug_city='seattle').exists()

    def test_create_requires_authentication(self, api_client):
        response = api_client.post('/api/v1/locations/', {
            'page_group_slug': 'location',
            'name': 'Galaxy Grill Seattle',
            'address_region': 'WA',
            'address_city': 'Seattle',
            'address_line1': '611 Pine St',
        }, format='json')
        assert response.status_code == 401

    def test_create_duplicate_slug(self, authenticated_client, create_location):
        client, _ = authenticated_client
        create_location()

        response = client.post('/api/v1/locations/', {
            'page_group_slug': 'location',
            'name': 'Duplicate',
            'address_region': 'CA',
            'address_city': 'San Francisco',
            'address_line1': '123 Market St.',
        }, format='json')
        assert response.status_code == 400

    def test_patch_address_rederives_slug(self, authenticated_client, create_location):
        client, _ = authenticated_client
        location = create_location(address_postal_code='94105')
        previous_update = location.updated_at

        response = client.patch(f'/api/v1/locations/{location.id}/', {
            'address_line1': '200 Mission St',
        }, format='json')
        assert response.status_code == 200
        location.refresh_from_db()
        assert location.slug_line1 == '200-mission-st'
        assert location.slug_city == 'san-francisco'
        assert location.name == 'Galaxy Grill Downtown'
        assert location.address_postal_code == '94105'
        assert location.updated_at > previous_update

    def test_delete_location(self, authenticated_client, create_location):
        from locations.models import Location
        client, _ = authenticated_client
        location = create_location()

        response = client.delete(f'/api/v1/locations/{location.id}/')
        assert response.status_code == 200
        assert response.data['purged_links']['location_products'] == 0
        assert not Location.objects.filter(id=location.id).exists()

    def test_delete_missing_location(self, authenticated_client):
        client, _ = authenticated_client
        response = client.delete('/api/v1/locations/9999/')
        assert response.status_code == 404
        assert response.data['error']['code'] == 'NOT_FOUND'

    def test_by_address(self, api_client, create_location):
        location = create_location()

        response = api_client.get('/api/v1/locations/by-address/ca/san-francisco/123-market-st/')
        assert response.status_code == 200
        assert response.data['id'] == location.id

        response = api_client.get('/api/v1/locations/by-address/ca/san-francisco/nowhere/')
        assert response.status_code == 404

    def test_by_city(self, api_client, create_location):
        create_location()
        create_location(name="Galaxy Grill Mission", line1="482 Valencia St")

        response = api_client.get('/api/v1/locations/by-city/ca/san-francisco/')
        assert response.status_code == 200
        assert response.data['total'] == 2

    def test_cities(self, api_client, create_location, settings):
        settings.LOCATION_PAGE_GROUP = 'location'
        create_location()
        create_location(name="Galaxy Grill Oakland", city="Oakland", line1="780 Broadway")

        response = api_client.get('/api/v1/locations/cities/')
        assert response.status_code == 200
        assert [city['path'] for city in response.data['results']] == ['/ca/san-francisco', '/ca/oakland']


@pytest.mark.django_db
class TestSeedLocations:

    def test_seed_creates_locations_and_groups(self):
        from content.models import PageGroup
        from locations.models import Location

        call_command('seed_locations', page_group='galaxy-grill')

        assert Location.objects.filter(page_group_slug='galaxy-grill').count() == 10
        assert PageGroup.objects.filter(slug='galaxy-grill').exists()

    def test_seed_is_skipped_when_group_has_locations(self):
        from locations.models import Location

        call_command('seed_locations', page_group='galaxy-grill')
        call_command('seed_locations', page_group='galaxy-grill')
        assert Location.objects.filter(page_group_slug='galaxy-grill').count() == 10


@pytest.mark.django_db
class TestLocationAdmin:

    def test_admin_delete_purges_location_links(self, client, user_model, create_location):
        from catalog.models import LocationProduct, Product
        from catalog.relationships import link
        from locations.models import Location

        admin_user = user_model.objects.create_superuser(
            username='admin@example.com',
            email='admin@example.com',
            password='adminpass123',
        )
        client.force_login(admin_user)
        location = create_location()
        product = Product.objects.create(name='Burger')
        link('location_products', location.id, product.id)

        response = client.post(f'/admin/locations/location/{location.id}/delete/', {'post': 'yes'})
        assert response.status_code == 302
        assert not Location.objects.filter(id=location.id).exists()
        assert not LocationProduct.objects.exists()
        assert Product.objects.filter(id=product.id).exists()
