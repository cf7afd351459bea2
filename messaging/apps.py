from django.apps import AppConfig


class MessagingConfig(AppConfig):
    """App configuration for direct messages and the live inbox socket."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "messaging"

    def ready(self):  # pragma: no cover - import side effects
        from . import notify  # noqa: F401
