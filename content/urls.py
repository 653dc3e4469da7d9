"""
URL routing for content app.
"""
from django.urls import path
from .views import (
    page_detail,
    page_group_detail,
    page_group_publish,
    page_group_save_draft,
    page_publish,
    page_save_draft,
    render_city,
    render_location,
)

urlpatterns = [
    # Standalone pages (addressed by ?path=)
    path('pages/', page_detail, name='page-detail'),
    path('pages/publish/', page_publish, name='page-publish'),
    path('pages/draft/', page_save_draft, name='page-draft'),
    # Page groups (templates shared by many locations)
    path('page-groups/<slug:slug>/', page_group_detail, name='page-group-detail'),
    path('page-groups/<slug:slug>/publish/', page_group_publish, name='page-group-publish'),
    path('page-groups/<slug:slug>/draft/', page_group_save_draft, name='page-group-draft'),
    # Per-location and per-city rendering
    path('render/<slug:region>/<slug:city>/', render_city, name='render-city'),
    path('render/<slug:region>/<slug:city>/<slug:line1>/', render_location, name='render-location'),
]
