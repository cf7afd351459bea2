from django.apps import AppConfig


class CatalogConfig(AppConfig):
    """App configuration for the shared book catalogue and its file store."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "catalog"
