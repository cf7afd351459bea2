"""Book review model."""
from __future__ import annotations

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import Q

from catalog.models import Book

MIN_RATING = 1
MAX_RATING = 5


class Review(models.Model):
    """A 1–5 star rating with optional text.

    One review per user per book is what the UI expects, but it is not a
    storage constraint: a user may post several reviews of the same book.
    """

    book = models.ForeignKey(Book, on_delete=models.CASCADE, related_name="reviews")
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="reviews")
    rating = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(MIN_RATING), MaxValueValidator(MAX_RATING)],
    )
    review_text = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        constraints = [
            models.CheckConstraint(
                condition=Q(rating__gte=MIN_RATING) & Q(rating__lte=MAX_RATING),
                name="reviews_review_rating_range",
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.book_id}:{self.user_id}={self.rating}"
