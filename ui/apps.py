from django.apps import AppConfig


class UiConfig(AppConfig):
    """Public landing page."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "ui"
