"""
URL routing for catalog app.
"""
from django.urls import path, include
from rest_framework.routers import SimpleRouter
from .views import (
    ArticleViewSet,
    ProductViewSet,
    PromotionViewSet,
    relation_link_detail,
    relation_links,
    relation_sync,
)

router = SimpleRouter()
router.register(r'articles', ArticleViewSet, basename='article')
router.register(r'products', ProductViewSet, basename='product')
router.register(r'promotions', PromotionViewSet, basename='promotion')

urlpatterns = [
    path('', include(router.urls)),
    # Link relations, e.g. /relationships/location_products/
    path('relationships/<str:relation>/', relation_links, name='relation-links'),
    path('relationships/<str:relation>/sync/', relation_sync, name='relation-sync'),
    path('relationships/<str:relation>/<int:link_id>/', relation_link_detail, name='relation-link-detail'),
]
