"""
Tests for content app - template tokens, publishing and rendering.
"""
import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from content.tokens import get_value_at_path, resolve_template_tokens, resolve_tokens


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def user_model():
    return get_user_model()


@pytest.fixture
def create_user(user_model):
    def _create_user(email="editor@example.com", password="testpass123", role="editor"):
        return user_model.objects.create_user(
            email=email,
            username=email,
            password=password,
            role=role,
        )
    return _create_user


@pytest.fixture
def editor_client(api_client, create_user):
    user = create_user()
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {str(refresh.access_token)}')
    return api_client, user


@pytest.fixture
def publisher_client(api_client, create_user):
    user = create_user(email="publisher@example.com", role="publisher")
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


LOCATION_CONTEXT = {
    'name': 'Galaxy Grill Downtown',
    'address': {'region': 'CA', 'city': 'San Francisco', 'line1': '123 Market St', 'line2': None},
    'open': True,
    'hours': ['9-5', '10-4'],
    'rating': 4.5,
}


class TestValueAtPath:

    def test_nested_path(self):
        assert get_value_at_path(LOCATION_CONTEXT, 'address.city') == 'San Francisco'

    def test_missing_key(self):
        assert get_value_at_path(LOCATION_CONTEXT, 'address.country') is None

    def test_step_through_non_mapping(self):
        assert get_value_at_path(LOCATION_CONTEXT, 'name.first') is None

    def test_empty_segments_are_skipped(self):
        assert get_value_at_path(LOCATION_CONTEXT, '.address..city.') == 'San Francisco'

    def test_path_without_segments(self):
        assert get_value_at_path(LOCATION_CONTEXT, '...') is None


class TestTemplateTokens:

    def test_single_marker(self):
        assert resolve_template_tokens('Welcome to [[name]]', LOCATION_CONTEXT) == 'Welcome to Galaxy Grill Downtown'

    def test_multiple_markers(self):
        text = '[[name]] in [[address.city]], [[address.region]]'
        assert resolve_template_tokens(text, LOCATION_CONTEXT) == 'Galaxy Grill Downtown in San Francisco, CA'

    def test_unresolved_marker_is_left_verbatim(self):
        text = 'Suite [[address.line2]] / [[missing.path]]'
        assert resolve_template_tokens(text, LOCATION_CONTEXT) == text

    def test_partial_resolution(self):
        text = '[[name]] [[unknown]]'
        assert resolve_template_tokens(text, LOCATION_CONTEXT) == 'Galaxy Grill Downtown [[unknown]]'

    def test_blank_marker_is_left_verbatim(self):
        assert resolve_template_tokens('[[ ]]', LOCATION_CONTEXT) == '[[ ]]'

    def test_non_string_values_are_stringified(self):
        assert resolve_template_tokens('[[open]]', LOCATION_CONTEXT) == 'true'
        assert resolve_template_tokens('[[rating]]', LOCATION_CONTEXT) == '4.5'
        assert resolve_template_tokens('[[hours]]', LOCATION_CONTEXT) == '["9-5","10-4"]'

    def test_text_without_markers_is_returned_as_is(self):
        text = 'Plain [text] with [single] brackets'
        assert resolve_template_tokens(text, LOCATION_CONTEXT) is text

    def test_no_context(self):
        assert resolve_template_tokens('[[name]]') == '[[name]]'


class TestResolveTokens:

    def test_tree_is_resolved_at_every_depth(self):
        tree = {
            'root': {'props': {'title': '[[name]]'}},
            'content': [
                {'type': 'Hero', 'props': {'heading': 'Visit us in [[address.city]]'}},
                {'type': 'Text', 'props': {'lines': ['[[address.line1]]', 42, None]}},
            ],
        }
        result = resolve_tokens(tree, LOCATION_CONTEXT)
        assert result['root']['props']['title'] == 'Galaxy Grill Downtown'
        assert result['content'][0]['props']['heading'] == 'Visit us in San Francisco'
        assert result['content'][1]['props']['lines'] == ['123 Market St', 42, None]

    def test_input_is_not_mutated(self):
        tree = {'content': [{'props': {'title': '[[name]]'}}]}
        resolve_tokens(tree, LOCATION_CONTEXT)
        assert tree == {'content': [{'props': {'title': '[[name]]'}}]}

    def test_unchanged_subtrees_are_shared(self):
        static = {'type': 'Footer', 'props': {'text': 'No markers here'}}
        tree = {'content': [static, {'props': {'title': '[[name]]'}}]}
        result = resolve_tokens(tree, LOCATION_CONTEXT)
        assert result is not tree
        assert result['content'][0] is static

    def test_unchanged_tree_is_returned_as_is(self):
        tree = {'content': [{'props': {'title': 'Static', 'missing': '[[nope]]'}}]}
        assert resolve_tokens(tree, LOCATION_CONTEXT) is tree

    def test_none_context_returns_input(self):
        tree = {'title': '[[name]]'}
        assert resolve_tokens(tree, None) is tree

    def test_scalars_pass_through(self):
        assert resolve_tokens(7, LOCATION_CONTEXT) == 7
        assert resolve_tokens(None, LOCATION_CONTEXT) is None

    def test_tuples_stay_tuples(self):
        assert resolve_tokens(('[[name]]', 'x'), LOCATION_CONTEXT) == ('Galaxy Grill Downtown', 'x')

    def test_idempotent(self):
        tree = {'title': '[[name]] [[unknown]]'}
        once = resolve_tokens(tree, LOCATION_CONTEXT)
        assert resolve_tokens(once, LOCATION_CONTEXT) == once

    def test_deterministic(self):
        tree = {'a': '[[address.city]]', 'b': ['[[name]]']}
        assert resolve_tokens(tree, LOCATION_CONTEXT) == resolve_tokens(tree, LOCATION_CONTEXT)


@pytest.mark.django_db
class TestPublishing:

    def test_publish_sets_draft_and_published(self):
        from content.models import Page
        from content.publishing import get_draft_and_published, publish

        publish(Page, '/about', {'title': 'About'})
        assert get_draft_and_published(Page, '/about') == {
            'draft': {'title': 'About'},
            'published': {'title': 'About'},
        }

    def test_publish_overwrites(self):
        from content.models import Page
        from content.publishing import get_draft_and_published, publish

        publish(Page, '/about', {'title': 'First'})
        publish(Page, '/about', {'title': 'Second'})
        assert Page.objects.filter(path='/about').count() == 1
        assert get_draft_and_published(Page, '/about')['published'] == {'title': 'Second'}

    def test_save_draft_leaves_published(self):
        from content.models import PageGroup
        from content.publishing import get_content, publish, save_draft

        publish(PageGroup, 'location', {'title': 'Live'})
        save_draft(PageGroup, 'location', {'title': 'Work in progress'})

        group = get_content(PageGroup, 'location')
        assert group.published_data == {'title': 'Live'}
        assert group.draft_data == {'title': 'Work in progress'}
        assert group.has_unpublished_changes is True

    def test_content_is_named_by_its_key(self):
        from content.models import Page, PageGroup
        from content.publishing import publish, save_draft

        page = publish(Page, '/about', {'title': 'About'})
        group = save_draft(PageGroup, 'location', {})
        assert page.key == str(page) == '/about'
        assert group.key == str(group) == 'location'

    def test_missing_content(self):
        from content.models import Page
        from content.publishing import get_content, get_draft_and_published

        assert get_content(Page, '/nowhere') is None
        assert get_draft_and_published(Page, '/nowhere') is None

    def test_render_for_location(self, create_location):
        from content.models import PageGroup
        from content.publishing import publish, render_for_location

        location = create_location()
        publish(PageGroup, 'location', {'root': {'props': {'title': '[[name]] - [[address.city]]'}}})

        data = render_for_location('location', location)
        assert data == {'root': {'props': {'title': 'Galaxy Grill Downtown - San Francisco'}}}

    def test_render_preview_uses_draft(self, create_location):
        from content.models import PageGroup
        from content.publishing import publish, render_for_location, save_draft

        location = create_location()
        publish(PageGroup, 'location', {'title': 'Live [[name]]'})
        save_draft(PageGroup, 'location', {'title': 'Draft [[name]]'})

        assert render_for_location('location', location)['title'] == 'Live Galaxy Grill Downtown'
        assert render_for_location('location', location, preview=True)['title'] == 'Draft Galaxy Grill Downtown'

    def test_render_unpublished_group(self, create_location):
        from content.models import PageGroup
        from content.publishing import render_for_location, save_draft

        location = create_location()
        save_draft(PageGroup, 'location', {'title': '[[name]]'})
        assert render_for_location('location', location) is None
        assert render_for_location('missing-group', location) is None

    def test_render_for_city(self, create_location):
        from content.models import PageGroup
        from content.publishing import publish, render_for_city

        create_location()
        create_location(name="Galaxy Grill Mission", line1="482 Valencia St")
        publish(PageGroup, 'city', {'heading': 'Galaxy Grill in [[city.city]], [[city.region]]'})

        assert render_for_city('city', 'ca', 'san-francisco') == {
            'heading': 'Galaxy Grill in San Francisco, CA',
        }
        assert render_for_city('city', 'ca', 'nowhere') is None

    def test_affected_paths(self, create_location, settings):
        from content.publishing import affected_paths

        settings.LOCATION_PAGE_GROUP = 'location'
        settings.CITY_PAGE_GROUP = 'city'
        create_location()
        create_location(name="Galaxy Grill Mission", line1="482 Valencia St")
        create_location(name="Galaxy Grill Oakland", city="Oakland", line1="780 Broadway")

        assert affected_paths('location') == [
            '/ca/san-francisco/123-market-st',
            '/ca/san-francisco/482-valencia-st',
            '/ca/oakland/780-broadway',
        ]
        assert affected_paths('city') == ['/ca/san-francisco', '/ca/oakland']


@pytest.mark.django_db
class TestDynamicSources:

    def _products_section(self, **source):
        return {
            'content': [
                {'type': 'Hero', 'props': {'title': '[[name]]'}},
                {'type': 'ProductsSection', 'props': {
                    'heading': 'Menu',
                    'contentSource': {'source': 'dynamic', **source},
                }},
            ],
        }

    def test_synced_products_keep_editor_order(self, create_location):
        from catalog.models import Product
        from content.dynamic import resolve_dynamic_sources

        location = create_location()
        burger = Product.objects.create(name='Burger', price='9.50')
        fries = Product.objects.create(name='Fries', category='Sides')

        tree = self._products_section(dynamicMode='synced', selectedIds=[fries.id, burger.id, 9999])
        result = resolve_dynamic_sources(tree, location.id)

        products = result['content'][1]['props']['products']
        assert [product['title'] for product in products] == ['Fries', 'Burger']
        assert products[0]['price'] is None
        assert products[1]['price'] == '$9.50'
        assert result['content'][0] is tree['content'][0]

    def test_per_location_products(self, create_location):
        from catalog.models import Product
        from catalog.relationships import link
        from content.dynamic import resolve_dynamic_sources

        downtown = create_location()
        mission = create_location(name="Galaxy Grill Mission", line1="482 Valencia St")
        burger = Product.objects.create(name='Burger')
        link('location_products', downtown.id, burger.id)

        tree = self._products_section(dynamicMode='perLocation')
        result = resolve_dynamic_sources(tree, downtown.id)
        assert result['content'][1]['props']['products'][0]['title'] == 'Burger'

        # No links for this location: tree is returned untouched
        assert resolve_dynamic_sources(tree, mission.id) is tree

    def test_promo_overrides_only_present_fields(self, create_location):
        from catalog.models import Promotion
        from content.dynamic import resolve_dynamic_sources

        location = create_location()
        promo = Promotion.objects.create(name='Happy Hour', description=None)
        tree = {'zones': {'main': [{'type': 'PromoSection', 'props': {
            'title': 'Fallback',
            'description': 'Keep me',
            'contentSource': {'source': 'dynamic', 'selectedId': str(promo.id)},
        }}]}}

        props = resolve_dynamic_sources(tree, location.id)['zones']['main'][0]['props']
        assert props['title'] == 'Happy Hour'
        assert props['description'] == 'Keep me'
        assert props['imageUrl'] == ''

    def test_static_components_untouched(self, create_location):
        from content.dynamic import resolve_dynamic_sources

        location = create_location()
        tree = {'content': [{'type': 'ProductsSection', 'props': {'contentSource': {'source': 'static'}}}]}
        assert resolve_dynamic_sources(tree, location.id) is tree

    def test_rendered_page_includes_dynamic_content(self, create_location):
        from catalog.models import Promotion
        from catalog.relationships import link
        from content.models import PageGroup
        from content.publishing import publish, render_for_location

        location = create_location()
        promo = Promotion.objects.create(name='[[name]] special')
        link('location_promotions', location.id, promo.id)
        publish(PageGroup, 'location', {'content': [{'type': 'PromoSection', 'props': {
            'contentSource': {'source': 'dynamic', 'dynamicMode': 'perLocation'},
        }}]})

        data = render_for_location('location', location)
        assert data['content'][0]['props']['title'] == 'Galaxy Grill Downtown special'


@pytest.mark.django_db
class TestContentAPI:

    def test_get_page(self, api_client):
        from content.models import Page
        from content.publishing import publish

        publish(Page, '/about', {'title': 'About'})
        response = api_client.get('/api/v1/pages/', {'path': '/about'})
        assert response.status_code == 200
        assert response.data['published_data'] == {'title': 'About'}
        assert response.data['is_published'] is True

    def test_get_missing_page(self, api_client):
        response = api_client.get('/api/v1/pages/', {'path': '/missing'})
        assert response.status_code == 404
        assert response.data['error']['code'] == 'NOT_FOUND'

    def test_page_requires_path(self, api_client):
        response = api_client.get('/api/v1/pages/')
        assert response.status_code == 400

    def test_publisher_can_publish_page(self, publisher_client):
        client, _ = publisher_client
        response = client.post('/api/v1/pages/publish/', {
            'path': '/about',
            'data': {'title': 'About'},
        }, format='json')
        assert response.status_code == 200
        assert response.data['paths'] == ['/about']

    def test_editor_cannot_publish(self, editor_client):
        client, _ = editor_client
        response = client.post('/api/v1/pages/publish/', {
            'path': '/about',
            'data': {'title': 'About'},
        }, format='json')
        assert response.status_code == 403

    def test_anonymous_cannot_save_draft(self, api_client):
        response = api_client.post('/api/v1/pages/draft/', {
            'path': '/about',
            'data': {'title': 'About'},
        }, format='json')
        assert response.status_code == 401

    def test_editor_can_save_draft(self, editor_client):
        client, _ = editor_client
        response = client.post('/api/v1/pages/draft/', {
            'path': '/about',
            'data': {'title': 'Draft'},
        }, format='json')
        assert response.status_code == 200
        assert response.data['draft_data'] == {'title': 'Draft'}
        assert response.data['is_published'] is False

    def test_page_path_must_be_absolute(self, editor_client):
        client, _ = editor_client
        response = client.post('/api/v1/pages/draft/', {
            'path': 'about',
            'data': {},
        }, format='json')
        assert response.status_code == 400

    def test_publish_page_group_reports_paths(self, publisher_client, create_location):
        client, _ = publisher_client
        create_location()

        response = client.post('/api/v1/page-groups/location/publish/', {
            'data': {'title': '[[name]]'},
        }, format='json')
        assert response.status_code == 200
        assert response.data['revalidated'] == 1
        assert response.data['paths'] == ['/ca/san-francisco/123-market-st']

    def test_page_group_draft_and_detail(self, editor_client):
        client, _ = editor_client
        client.post('/api/v1/page-groups/location/draft/', {'data': {'title': 'Draft'}}, format='json')

        response = client.get('/api/v1/page-groups/location/')
        assert response.status_code == 200
        assert response.data['draft_data'] == {'title': 'Draft'}
        assert response.data['published_data'] is None

    def test_render_location(self, api_client, create_location):
        from content.models import PageGroup
        from content.publishing import publish

        create_location()
        publish(PageGroup, 'location', {'title': 'Welcome to [[name]]'})

        response = api_client.get('/api/v1/render/ca/san-francisco/123-market-st/')
        assert response.status_code == 200
        assert response.data['data'] == {'title': 'Welcome to Galaxy Grill Downtown'}
        assert response.data['location']['path'] == '/ca/san-francisco/123-market-st'

    def test_render_unknown_location(self, api_client):
        response = api_client.get('/api/v1/render/ca/san-francisco/nowhere/')
        assert response.status_code == 404

    def test_preview_requires_authentication(self, api_client, create_location):
        create_location()
        response = api_client.get('/api/v1/render/ca/san-francisco/123-market-st/', {'preview': 'true'})
        assert response.status_code == 401
        assert response.data['error']['code'] == 'UNAUTHORIZED'

    def test_editor_can_preview_draft(self, editor_client, create_location):
        from content.models import PageGroup
        from content.publishing import save_draft

        client, _ = editor_client
        create_location()
        save_draft(PageGroup, 'location', {'title': 'Draft for [[name]]'})

        response = client.get('/api/v1/render/ca/san-francisco/123-market-st/', {'preview': 'true'})
        assert response.status_code == 200
        assert response.data['data'] == {'title': 'Draft for Galaxy Grill Downtown'}

    def test_render_city(self, api_client, create_location, settings):
        from content.models import PageGroup
        from content.publishing import publish

        settings.CITY_PAGE_GROUP = 'city'
        create_location()
        publish(PageGroup, 'city', {'title': '[[city.city]] has [[locations.0.name]]'})

        response = api_client.get('/api/v1/render/ca/san-francisco/')
        assert response.status_code == 200
        # List indexes are not mapping keys, so that marker stays
        assert response.data['data'] == {'title': 'San Francisco has [[locations.0.name]]'}
