from django.apps import AppConfig


class ReviewsConfig(AppConfig):
    """App configuration for star ratings and written reviews of books."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "reviews"
