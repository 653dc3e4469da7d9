"""
Tests for catalog app - entity CRUD, link relations and cascading deletes.
"""
import pytest
from django.contrib.auth import get_user_model
from django.db import DatabaseError
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from catalog.exceptions import CascadeDeleteError, EntityNotFound, ValidationFailure


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
    def _create_location(name="Galaxy Grill Downtown", line1="123 Market St"):
        from locations.models import Location
        return Location.objects.create(
            page_group_slug='location',
            name=name,
            address_region='CA',
            address_city='San Francisco',
            address_line1=line1,
        )
    return _create_location


@pytest.fixture
def catalog():
    """One of each catalog entity."""
    from catalog.models import Article, Product, Promotion
    return {
        'article': Article.objects.create(title='Grand opening', category='News'),
        'product': Product.objects.create(name='Burger', category='Mains', price='9.50'),
        'promotion': Promotion.objects.create(name='Happy Hour'),
    }


@pytest.fixture
def fully_linked(create_location, catalog):
    """A location linked to every entity, and every entity linked to each other."""
    from catalog.relationships import link

    location = create_location()
    link('location_articles', location.id, catalog['article'].id)
    link('location_products', location.id, catalog['product'].id)
    link('location_promotions', location.id, catalog['promotion'].id)
    link('article_products', catalog['article'].id, catalog['product'].id)
    link('article_promotions', catalog['article'].id, catalog['promotion'].id)
    link('product_promotions', catalog['product'].id, catalog['promotion'].id)
    return location, catalog


def _link_counts():
    from catalog.relationships import RELATIONS
    return {name: relation.model.objects.count() for name, relation in RELATIONS.items()}


@pytest.mark.django_db
class TestEntityServices:

    def test_partial_update_keeps_other_fields(self, catalog):
        from catalog.models import Product
        from catalog.services import update_entity

        original = catalog['product']
        Product.objects.filter(id=original.id).update(description='Double patty')
        original.refresh_from_db()

        update_entity(Product, original.id, price='11.00')
        product = Product.objects.get(id=original.id)
        assert str(product.price) == '11.00'
        assert product.name == 'Burger'
        assert product.category == 'Mains'
        assert product.description == 'Double patty'
        assert product.created_at == original.created_at
        assert product.updated_at > original.updated_at

    def test_update_missing_entity(self):
        from catalog.models import Article
        from catalog.services import update_entity

        with pytest.raises(EntityNotFound):
            update_entity(Article, 9999, title='Ghost')

    def test_update_unknown_field(self, catalog):
        from catalog.models import Promotion
        from catalog.services import update_entity

        with pytest.raises(ValidationFailure):
            update_entity(Promotion, catalog['promotion'].id, price='1.00')

    def test_get_by_ids_skips_missing(self, catalog):
        from catalog.models import Product
        from catalog.services import get_by_ids

        extra = Product.objects.create(name='Fries')
        found = get_by_ids(Product, [catalog['product'].id, extra.id, 9999])
        assert {product.id for product in found} == {catalog['product'].id, extra.id}
        assert get_by_ids(Product, []) == []

    def test_get_by_id(self, catalog):
        from catalog.models import Article
        from catalog.services import get_by_id

        assert get_by_id(Article, catalog['article'].id) == catalog['article']
        assert get_by_id(Article, 9999) is None

    def test_list_by_category(self, catalog):
        from catalog.models import Article
        from catalog.services import list_by_category

        Article.objects.create(title='Menu update', category='Updates')
        assert list_by_category(Article, 'News') == [catalog['article']]
        assert list_by_category(Article, 'Recipes') == []

    def test_list_entities_newest_first(self, catalog):
        from catalog.models import Promotion
        from catalog.services import list_entities

        newer = Promotion.objects.create(name='Late night')
        assert list(list_entities(Promotion)) == [newer, catalog['promotion']]


@pytest.mark.django_db
class TestLinks:

    def test_link_is_idempotent(self, create_location, catalog):
        from catalog.models import LocationProduct
        from catalog.relationships import link

        location = create_location()
        first = link('location_products', location.id, catalog['product'].id)
        second = link('location_products', location.id, catalog['product'].id)
        assert first.pk == second.pk
        assert LocationProduct.objects.count() == 1

    def test_link_requires_both_endpoints(self, create_location):
        from catalog.relationships import link

        location = create_location()
        with pytest.raises(EntityNotFound):
            link('location_products', location.id, 9999)

    def test_unknown_relation(self):
        from catalog.relationships import link

        with pytest.raises(ValidationFailure):
            link('location_menus', 1, 1)

    def test_related_from_either_side(self, fully_linked):
        from catalog.relationships import related

        location, catalog = fully_linked
        products = related('location_products', 'location', location.id)
        assert products == [catalog['product']]
        assert products[0].link_id is not None

        locations = related('location_products', 'product', catalog['product'].id)
        assert locations == [location]

    def test_unlink(self, fully_linked):
        from catalog.relationships import unlink

        location, catalog = fully_linked
        assert unlink('location_articles', location.id, catalog['article'].id) is True
        assert unlink('location_articles', location.id, catalog['article'].id) is False

    def test_sync_overrides_replaces_location_links(self, create_location, catalog):
        from catalog.models import LocationProduct, Product
        from catalog.relationships import link, related, sync_overrides

        downtown = create_location()
        mission = create_location(name="Galaxy Grill Mission", line1="482 Valencia St")
        fries = Product.objects.create(name='Fries')
        link('location_products', downtown.id, catalog['product'].id)

        written = sync_overrides('location_products', [
            {'location_ids': [downtown.id, mission.id], 'product_ids': [fries.id]},
            {'location_ids': [mission.id], 'product_ids': [fries.id, catalog['product'].id]},
        ])

        assert written == 3
        assert LocationProduct.objects.count() == 3
        assert related('location_products', 'location', downtown.id) == [fries]

    def test_sync_overrides_rejects_entity_relations(self):
        from catalog.relationships import sync_overrides

        with pytest.raises(ValidationFailure):
            sync_overrides('article_products', [])


@pytest.mark.django_db
class TestCascadingDelete:

    def test_cascade_plan_covers_every_relation(self):
        from catalog.relationships import CASCADE_PLAN, RELATIONS

        planned = {name for entries in CASCADE_PLAN.values() for name, _ in entries}
        assert planned == set(RELATIONS)
        assert [name for name, _ in CASCADE_PLAN['location']] == [
            'location_articles', 'location_products', 'location_promotions',
        ]

    def test_delete_location(self, fully_linked):
        from catalog.relationships import delete_entity
        from locations.models import Location

        location, _ = fully_linked
        purged = delete_entity('location', location.id)

        assert purged == {'location_articles': 1, 'location_products': 1, 'location_promotions': 1}
        assert not Location.objects.filter(id=location.id).exists()
        counts = _link_counts()
        assert counts['location_articles'] == counts['location_products'] == counts['location_promotions'] == 0
        assert counts['article_products'] == 1

    def test_delete_article(self, fully_linked):
        from catalog.relationships import delete_entity

        _, catalog = fully_linked
        purged = delete_entity('article', catalog['article'].id)

        assert purged == {'location_articles': 1, 'article_products': 1, 'article_promotions': 1}
        counts = _link_counts()
        assert counts['location_products'] == 1
        assert counts['product_promotions'] == 1

    def test_delete_product(self, fully_linked):
        from catalog.models import Product
        from catalog.relationships import delete_entity

        _, catalog = fully_linked
        delete_entity('product', catalog['product'].id)

        assert not Product.objects.exists()
        counts = _link_counts()
        assert counts['location_products'] == counts['article_products'] == counts['product_promotions'] == 0
        assert counts['location_promotions'] == 1

    def test_delete_promotion(self, fully_linked):
        from catalog.relationships import delete_entity

        _, catalog = fully_linked
        delete_entity('promotion', catalog['promotion'].id)

        counts = _link_counts()
        assert counts['location_promotions'] == counts['article_promotions'] == counts['product_promotions'] == 0
        assert counts['location_articles'] == 1

    def test_delete_missing_entity(self):
        from catalog.relationships import delete_entity

        with pytest.raises(EntityNotFound):
            delete_entity('product', 9999)

    def test_delete_unknown_kind(self):
        from catalog.relationships import delete_entity

        with pytest.raises(ValidationFailure):
            delete_entity('menu', 1)

    def test_failed_delete_rolls_back(self, fully_linked, monkeypatch):
        from catalog.models import Product
        from catalog.relationships import delete_entity

        _, catalog = fully_linked
        before = _link_counts()

        def _fail(self, *args, **kwargs):
            raise DatabaseError('disk full')

        monkeypatch.setattr(Product, 'delete', _fail)
        with pytest.raises(CascadeDeleteError):
            delete_entity('product', catalog['product'].id)

        assert Product.objects.filter(id=catalog['product'].id).exists()
        assert _link_counts() == before


@pytest.mark.django_db
class TestCatalogAPI:

    def test_list_products_by_category(self, api_client, catalog):
        from catalog.models import Product
        Product.objects.create(name='Fries', category='Sides')

        response = api_client.get('/api/v1/products/', {'category': 'Mains'})
        assert response.status_code == 200
        assert [product['name'] for product in response.data['results']] == ['Burger']

    def test_list_products_by_ids(self, api_client, catalog):
        response = api_client.get('/api/v1/products/', {'ids': f"{catalog['product'].id},x,9999"})
        assert response.status_code == 200
        assert len(response.data['results']) == 1

    def test_create_article(self, authenticated_client):
        client, _ = authenticated_client
        response = client.post('/api/v1/articles/', {
            'title': 'New menu',
            'category': 'News',
            'content': 'Tacos are back.',
        }, format='json')
        assert response.status_code == 201
        assert response.data['title'] == 'New menu'

    def test_create_requires_authentication(self, api_client):
        response = api_client.post('/api/v1/promotions/', {'name': 'Free fries'}, format='json')
        assert response.status_code == 401

    def test_negative_price_rejected(self, authenticated_client):
        client, _ = authenticated_client
        response = client.post('/api/v1/products/', {'name': 'Refund', 'price': '-1.00'}, format='json')
        assert response.status_code == 400

    def test_put_is_a_partial_update(self, authenticated_client, catalog):
        client, _ = authenticated_client
        product = catalog['product']

        response = client.put(f'/api/v1/products/{product.id}/', {'price': '12.00'}, format='json')
        assert response.status_code == 200
        assert response.data['name'] == 'Burger'
        assert response.data['price'] == '12.00'

    def test_update_missing(self, authenticated_client):
        client, _ = authenticated_client
        response = client.patch('/api/v1/articles/9999/', {'title': 'Ghost'}, format='json')
        assert response.status_code == 404
        assert response.data['error']['code'] == 'NOT_FOUND'

    def test_delete_reports_purged_links(self, authenticated_client, fully_linked):
        client, _ = authenticated_client
        _, catalog = fully_linked

        response = client.delete(f"/api/v1/promotions/{catalog['promotion'].id}/")
        assert response.status_code == 200
        assert sum(response.data['purged_links'].values()) == 3

    def test_link_and_list_relation(self, authenticated_client, create_location, catalog):
        client, _ = authenticated_client
        location = create_location()

        response = client.post('/api/v1/relationships/location_products/', {
            'location_id': location.id,
            'product_id': catalog['product'].id,
        }, format='json')
        assert response.status_code == 201

        response = client.get('/api/v1/relationships/location_products/', {'location_id': location.id})
        assert response.status_code == 200
        assert response.data['total'] == 1
        assert response.data['results'][0]['name'] == 'Burger'

        response = client.get('/api/v1/relationships/location_products/', {'product_id': catalog['product'].id})
        assert response.data['results'][0]['path'] == location.path

    def test_link_missing_endpoint(self, authenticated_client, create_location):
        client, _ = authenticated_client
        location = create_location()

        response = client.post('/api/v1/relationships/location_products/', {
            'location_id': location.id,
            'product_id': 9999,
        }, format='json')
        assert response.status_code == 404

    def test_link_requires_both_ids(self, authenticated_client):
        client, _ = authenticated_client
        response = client.post('/api/v1/relationships/location_products/', {'location_id': 1}, format='json')
        assert response.status_code == 400

    def test_unknown_relation(self, api_client):
        response = api_client.get('/api/v1/relationships/location_menus/', {'location_id': 1})
        assert response.status_code == 400
        assert response.data['error']['code'] == 'VALIDATION_ERROR'

    def test_unlink(self, authenticated_client, fully_linked):
        client, _ = authenticated_client
        location, catalog = fully_linked

        response = client.delete(
            f"/api/v1/relationships/location_articles/?location_id={location.id}&article_id={catalog['article'].id}"
        )
        assert response.status_code == 200
        assert response.data['removed'] is True

    def test_remove_link_by_id(self, authenticated_client, fully_linked):
        from catalog.models import ProductPromotion
        client, _ = authenticated_client
        row = ProductPromotion.objects.get()

        response = client.delete(f'/api/v1/relationships/product_promotions/{row.id}/')
        assert response.status_code == 200
        assert not ProductPromotion.objects.exists()

    def test_sync(self, authenticated_client, create_location, catalog):
        client, _ = authenticated_client
        location = create_location()

        response = client.post('/api/v1/relationships/location_promotions/sync/', {
            'overrides': [{'location_ids': [location.id], 'promotion_ids': [catalog['promotion'].id]}],
        }, format='json')
        assert response.status_code == 200
        assert response.data['links'] == 1


@pytest.fixture
def admin_logged_in(client, user_model):
    user = user_model.objects.create_superuser(
        username='admin@example.com',
        email='admin@example.com',
        password='adminpass123',
    )
    client.force_login(user)
    return client, user


@pytest.mark.django_db
class TestCatalogAdmin:

    def test_delete_confirmation_lists_links_as_deletable(self, rf, admin_logged_in, fully_linked):
        from django.contrib import admin
        from catalog.models import Article

        _, user = admin_logged_in
        _, catalog = fully_linked
        request = rf.post('/')
        request.user = user

        model_admin = admin.site._registry[Article]
        _, model_count, perms_needed, protected = model_admin.get_deleted_objects([catalog['article']], request)

        assert protected == []
        assert not perms_needed
        assert model_count['location articles'] == 1
        assert model_count['article products'] == 1
        assert model_count['article promotions'] == 1

    def test_admin_delete_purges_links(self, admin_logged_in, fully_linked):
        from catalog.models import Article

        client, _ = admin_logged_in
        _, catalog = fully_linked
        article = catalog['article']

        response = client.post(f'/admin/catalog/article/{article.id}/delete/', {'post': 'yes'})
        assert response.status_code == 302
        assert not Article.objects.filter(id=article.id).exists()
        counts = _link_counts()
        assert counts['location_articles'] == counts['article_products'] == counts['article_promotions'] == 0
        assert counts['location_products'] == 1

    def test_admin_bulk_delete_purges_links(self, admin_logged_in, fully_linked):
        from catalog.models import Product

        client, _ = admin_logged_in
        _, catalog = fully_linked

        response = client.post('/admin/catalog/product/', {
            'action': 'delete_selected',
            '_selected_action': [catalog['product'].id],
            'post': 'yes',
        })
        assert response.status_code == 302
        assert not Product.objects.exists()
        counts = _link_counts()
        assert counts['location_products'] == counts['article_products'] == counts['product_promotions'] == 0
        assert counts['location_promotions'] == 1
