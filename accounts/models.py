"""
Editor account models.
"""
from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """
    Custom User model extending Django's AbstractUser.
    Used by the page editor and catalog dashboard; anonymous callers only read.
    """
    ROLE_CHOICES = [
        ('editor', 'Editor'),
        ('publisher', 'Publisher'),
    ]

    email = models.EmailField(unique=True)
    role = models.CharField(
        max_length=20,
        choices=ROLE_CHOICES,
        default='editor',
        help_text="Editors save drafts and manage the catalog; publishers can also publish"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['username']

    class Meta:
        db_table = 'users'
        ordering = ['-created_at']

    def __str__(self):
        return self.email

    @property
    def can_publish(self):
        """Publishers and superusers may overwrite published content."""
        return self.is_superuser or self.role == 'publisher'
