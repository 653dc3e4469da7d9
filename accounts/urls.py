"""
URL routing for accounts app.
"""
from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView

from .auth import login, logout, me

urlpatterns = [
    path('login/', login, name='login'),
    path('logout/', logout, name='logout'),
    path('me/', me, name='me'),
    path('token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
]
