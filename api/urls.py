"""API routes: versioned REST endpoints, OpenAPI schema and Swagger UI."""
from django.urls import path, include
from rest_framework.routers import DefaultRouter
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerSplitView

from .views import BookViewSet, MessageViewSet, ProfileViewSet, ReviewViewSet, RoleViewSet

router = DefaultRouter()
router.register(r"api/v1/books", BookViewSet, basename="books")
router.register(r"api/v1/reviews", ReviewViewSet, basename="reviews")
router.register(r"api/v1/messages", MessageViewSet, basename="messages")
router.register(r"api/v1/profiles", ProfileViewSet, basename="profiles")
router.register(r"api/v1/roles", RoleViewSet, basename="roles")

urlpatterns = [
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    # Split view serves the initializer as a script file, keeping CSP free of inline JS
    path("docs/", SpectacularSwaggerSplitView.as_view(url_name="schema"), name="swagger-ui"),
    path("", include(router.urls)),
]
