"""
Tests for accounts app authentication.
"""
import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken


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
def authenticated_client(api_client, create_user):
    user = create_user()
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {str(refresh.access_token)}')
    return api_client, user


@pytest.mark.django_db
class TestAuthentication:

    def test_login_success(self, api_client, create_user):
        user = create_user()
        response = api_client.post('/api/v1/auth/login/', {
            'email': user.email,
            'password': 'testpass123'
        }, format='json')
        assert response.status_code == 200
        assert 'token' in response.data
        assert 'refresh_token' in response.data
        assert response.data['user']['role'] == 'editor'
        assert response.data['user']['can_publish'] is False

    def test_login_invalid_credentials(self, api_client, create_user):
        create_user()
        response = api_client.post('/api/v1/auth/login/', {
            'email': 'editor@example.com',
            'password': 'wrongpassword'
        }, format='json')
        assert response.status_code == 400

    def test_login_missing_fields(self, api_client):
        response = api_client.post('/api/v1/auth/login/', {
            'email': 'editor@example.com'
        }, format='json')
        assert response.status_code == 400

    def test_me_endpoint_authenticated(self, authenticated_client):
        client, user = authenticated_client
        response = client.get('/api/v1/auth/me/')
        assert response.status_code == 200
        assert response.data['user']['email'] == user.email

    def test_me_endpoint_unauthenticated(self, api_client):
        response = api_client.get('/api/v1/auth/me/')
        assert response.status_code == 401

    def test_logout_success(self, authenticated_client):
        client, user = authenticated_client
        refresh = RefreshToken.for_user(user)
        response = client.post('/api/v1/auth/logout/', {
            'refresh_token': str(refresh)
        }, format='json')
        assert response.status_code == 200

    def test_logout_with_garbage_token(self, authenticated_client):
        client, _ = authenticated_client
        response = client.post('/api/v1/auth/logout/', {
            'refresh_token': 'not-a-token'
        }, format='json')
        assert response.status_code == 400


@pytest.mark.django_db
class TestRoles:

    def test_editor_cannot_publish(self, create_user):
        assert create_user().can_publish is False

    def test_publisher_can_publish(self, create_user):
        assert create_user(email='pub@example.com', role='publisher').can_publish is True

    def test_superuser_can_publish(self, user_model):
        admin = user_model.objects.create_superuser(
            email='admin@example.com', username='admin@example.com', password='testpass123'
        )
        assert admin.can_publish is True
