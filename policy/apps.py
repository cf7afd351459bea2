from django.apps import AppConfig


class PolicyConfig(AppConfig):
    """Row-level authorization rules shared by views, services and the API."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "policy"
