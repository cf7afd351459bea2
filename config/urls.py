"""URL routing for TextAssess."""
from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import include, path


urlpatterns = [
    path("admin/", admin.site.urls),
    path("accounts/", include("accounts.urls")),
    path("books/", include("catalog.urls")),
    path("reviews/", include("reviews.urls")),
    path("messages/", include("messaging.urls")),
    path("", include("ui.urls")),
    # REST API, schema and docs
    path("", include("api.urls")),
]

if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
