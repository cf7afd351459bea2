"""Serializers for REST API v1.

Writes go through the service layer, so the write-side serializers here
only shape and type-check input; authorization happens in the services.
"""
from __future__ import annotations

from rest_framework import serializers

from accounts.models import Profile, Role, UserRole
from catalog.models import Book
from messaging.models import Message
from policy.engine import BOOKS, DELETE, REVIEWS, permits
from policy.middleware import get_actor
from reviews.models import MAX_RATING, MIN_RATING, Review


def _actor(serializer):
    request = serializer.context.get("request")
    return get_actor(request) if request is not None else None


class BookSerializer(serializers.ModelSerializer):
    uploaded_by = serializers.PrimaryKeyRelatedField(read_only=True)
    average_rating = serializers.FloatField(read_only=True, allow_null=True, default=None)
    can_delete = serializers.SerializerMethodField()

    class Meta:
        model = Book
        fields = (
            "id",
            "title",
            "author",
            "description",
            "category",
            "isbn",
            "file_name",
            "file_size",
            "uploaded_by",
            "upload_date",
            "average_rating",
            "can_delete",
        )
        read_only_fields = fields

    def get_can_delete(self, obj) -> bool:
        actor = _actor(self)
        return bool(actor is not None and permits(actor, DELETE, BOOKS, obj))


class BookUploadSerializer(serializers.Serializer):
    file = serializers.FileField(write_only=True)
    title = serializers.CharField(max_length=300)
    author = serializers.CharField(max_length=200, required=False, allow_blank=True, default="")
    description = serializers.CharField(required=False, allow_blank=True, default="")
    category = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")
    isbn = serializers.CharField(max_length=32, required=False, allow_blank=True, default="")
    edition = serializers.CharField(max_length=50, required=False, allow_blank=True, default="")


class ReviewSerializer(serializers.ModelSerializer):
    user = serializers.PrimaryKeyRelatedField(read_only=True)
    rating = serializers.IntegerField(min_value=MIN_RATING, max_value=MAX_RATING)
    book_title = serializers.CharField(source="book.title", read_only=True)
    can_delete = serializers.SerializerMethodField()

    class Meta:
        model = Review
        fields = ("id", "book", "book_title", "user", "rating", "review_text", "created_at", "can_delete")
        read_only_fields = ("user", "created_at")

    def get_can_delete(self, obj) -> bool:
        actor = _actor(self)
        return bool(actor is not None and permits(actor, DELETE, REVIEWS, obj))


class MessageSerializer(serializers.ModelSerializer):
    sender_email = serializers.EmailField(source="sender.email", read_only=True)
    recipient_email = serializers.EmailField(source="recipient.email", read_only=True)

    class Meta:
        model = Message
        fields = (
            "id",
            "sender",
            "sender_email",
            "recipient",
            "recipient_email",
            "book",
            "subject",
            "content",
            "is_read",
            "created_at",
        )
        read_only_fields = fields


class MessageCreateSerializer(serializers.Serializer):
    recipient_email = serializers.EmailField()
    subject = serializers.CharField(max_length=200)
    content = serializers.CharField()
    book = serializers.PrimaryKeyRelatedField(queryset=Book.objects.all(), required=False, allow_null=True)


class ProfileSerializer(serializers.ModelSerializer):
    role = serializers.CharField(read_only=True, default=Role.STUDENT)

    class Meta:
        model = Profile
        fields = ("user", "full_name", "email", "phone", "institution", "role", "created_at", "updated_at")
        read_only_fields = ("user", "email", "role", "created_at", "updated_at")


class UserRoleSerializer(serializers.ModelSerializer):
    class Meta:
        model = UserRole
        fields = ("id", "user", "role", "created_at")
        read_only_fields = fields


class RoleAssignSerializer(serializers.Serializer):
    user = serializers.IntegerField(min_value=1)
    role = serializers.ChoiceField(choices=Role.choices)
