from django.apps import AppConfig


class AccountsConfig(AppConfig):
    """App configuration for accounts (profiles, roles)."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "accounts"

    def ready(self) -> None:  # pragma: no cover (import-time hook)
        # Import signal handlers that assign the first role on profile creation.
        from . import signals  # noqa: F401
        return super().ready()
