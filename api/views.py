"""REST API v1 viewsets.

Every write goes through the same service functions as the HTML views,
so the policy engine decides here exactly as it does there.
"""
from __future__ import annotations

from django.db.models import Avg, Value
from django.db.models.functions import Coalesce
from django.http import FileResponse, Http404
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema, inline_serializer, OpenApiParameter
from rest_framework import mixins, serializers, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounts.models import Profile, Role, UserRole
from accounts.services import first_role_subquery, reassign_role, save_profile
from catalog.models import Book
from catalog.services import delete_book, open_book, submit_book
from messaging.models import Message
from messaging.services import mailbox, mark_read, send_message, unread_count
from policy.engine import BOOKS, MESSAGES, PROFILES, REVIEWS, USER_ROLES, get_visible, visible
from policy.middleware import get_actor
from reviews.models import Review
from reviews.services import create_review, delete_review
from .permissions import IsAuthenticatedOrReadOnly
from .serializers import (
    BookSerializer,
    BookUploadSerializer,
    MessageCreateSerializer,
    MessageSerializer,
    ProfileSerializer,
    ReviewSerializer,
    RoleAssignSerializer,
    UserRoleSerializer,
)


class BookViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = BookSerializer
    permission_classes = [IsAuthenticatedOrReadOnly]
    filterset_fields = ["category", "uploaded_by"]
    search_fields = ["title", "author", "isbn"]
    ordering_fields = ["upload_date", "title", "author"]
    ordering = ["-upload_date", "-id"]

    def get_queryset(self):
        qs = Book.objects.select_related("uploaded_by").annotate(average_rating=Avg("reviews__rating"))
        return visible(get_actor(self.request), BOOKS, qs)

    def get_serializer_class(self):
        if self.action == "create":
            return BookUploadSerializer
        return BookSerializer

    @extend_schema(request=BookUploadSerializer, responses={201: BookSerializer})
    def create(self, request, *args, **kwargs):
        upload = BookUploadSerializer(data=request.data)
        upload.is_valid(raise_exception=True)
        data = dict(upload.validated_data)
        book = submit_book(get_actor(request), data.pop("file"), **data)
        out = BookSerializer(book, context=self.get_serializer_context())
        return Response(out.data, status=status.HTTP_201_CREATED)

    def perform_destroy(self, instance):
        delete_book(get_actor(self.request), instance)

    @extend_schema(responses={(200, "application/octet-stream"): OpenApiTypes.BINARY})
    @action(detail=True, methods=["get"])
    def download(self, request, pk=None):
        book = self.get_object()
        try:
            fh = open_book(get_actor(request), book)
        except FileNotFoundError as exc:
            raise Http404("The book file is missing.") from exc
        return FileResponse(fh, as_attachment=True, filename=book.file_name)


class ReviewViewSet(
    mixins.ListModelMixin,
    mixins.CreateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = ReviewSerializer
    permission_classes = [IsAuthenticatedOrReadOnly]
    filterset_fields = ["book", "user", "rating"]
    ordering_fields = ["created_at", "rating"]
    ordering = ["-created_at", "-id"]

    def get_queryset(self):
        qs = Review.objects.select_related("book", "user")
        return visible(get_actor(self.request), REVIEWS, qs)

    def perform_create(self, serializer):
        data = serializer.validated_data
        serializer.instance = create_review(
            get_actor(self.request), data["book"], data["rating"], data.get("review_text", "")
        )

    def perform_destroy(self, instance):
        delete_review(get_actor(self.request), instance)


class MessageViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = MessageSerializer
    permission_classes = [IsAuthenticated]
    search_fields = ["subject", "content", "sender__email"]
    ordering_fields = ["created_at"]
    filterset_fields = ["is_read", "book"]

    def get_queryset(self):
        box = self.request.query_params.get("box", "all")
        return mailbox(get_actor(self.request), box)

    def get_object(self):
        qs = Message.objects.select_related("sender", "recipient", "book")
        return get_visible(get_actor(self.request), MESSAGES, qs, pk=self.kwargs["pk"])

    @extend_schema(
        parameters=[OpenApiParameter("box", str, enum=["all", "sent", "received"])],
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    @extend_schema(request=MessageCreateSerializer, responses={201: MessageSerializer})
    def create(self, request, *args, **kwargs):
        incoming = MessageCreateSerializer(data=request.data)
        incoming.is_valid(raise_exception=True)
        data = incoming.validated_data
        message = send_message(
            get_actor(request),
            data["recipient_email"],
            data["subject"],
            data["content"],
            book=data.get("book"),
        )
        return Response(MessageSerializer(message).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=None, responses=MessageSerializer)
    @action(detail=True, methods=["post"])
    def read(self, request, pk=None):
        message = mark_read(get_actor(request), self.get_object())
        return Response(MessageSerializer(message).data)

    @extend_schema(responses=inline_serializer("UnreadCount", fields={"unread": serializers.IntegerField()}))
    @action(detail=False, methods=["get"])
    def unread(self, request):
        return Response({"unread": unread_count(get_actor(request))})


class ProfileViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    serializer_class = ProfileSerializer
    permission_classes = [IsAuthenticated]
    lookup_field = "user"
    search_fields = ["full_name", "email", "institution"]
    ordering_fields = ["created_at", "full_name"]
    ordering = ["-created_at"]

    def _base(self):
        return Profile.objects.select_related("user").annotate(
            role=Coalesce(first_role_subquery(), Value(Role.STUDENT))
        )

    def get_queryset(self):
        return visible(get_actor(self.request), PROFILES, self._base())

    def get_object(self):
        return get_visible(get_actor(self.request), PROFILES, self._base(), user_id=self.kwargs["user"])

    @action(detail=False, methods=["get", "patch"])
    def me(self, request):
        actor = get_actor(request)
        profile = self._base().filter(user_id=actor.id).first()
        if request.method == "GET":
            if profile is None:
                raise Http404("You have not created a profile yet.")
            return Response(ProfileSerializer(profile).data)
        if profile is None:
            profile = Profile(user_id=actor.id, email=request.user.email)
        serializer = ProfileSerializer(profile, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        for field, value in serializer.validated_data.items():
            setattr(profile, field, value)
        save_profile(actor, profile)
        profile = self._base().get(pk=profile.pk)
        return Response(ProfileSerializer(profile).data)


class RoleViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    serializer_class = UserRoleSerializer
    permission_classes = [IsAuthenticated]
    filterset_fields = ["role", "user"]
    ordering_fields = ["created_at"]
    ordering = ["created_at", "id"]

    def get_queryset(self):
        return visible(get_actor(self.request), USER_ROLES, UserRole.objects.all())

    @extend_schema(request=RoleAssignSerializer, responses=UserRoleSerializer)
    @action(detail=False, methods=["post"])
    def assign(self, request):
        incoming = RoleAssignSerializer(data=request.data)
        incoming.is_valid(raise_exception=True)
        row = reassign_role(get_actor(request), incoming.validated_data["user"], incoming.validated_data["role"])
        return Response(UserRoleSerializer(row).data)
