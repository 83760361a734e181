"""Django app configuration for filetree app."""

from django.apps import AppConfig


class FiletreeConfig(AppConfig):
    """Configuration for filetree app."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'server.apps.filetree'
    verbose_name = 'File tree'
