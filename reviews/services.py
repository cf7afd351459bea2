"""Review operations."""
from __future__ import annotations

import logging

from django.core.exceptions import ValidationError

from catalog.models import Book
from policy.actor import Actor
from policy.engine import DELETE, INSERT, REVIEWS, authorize, visible
from policy.exceptions import AuthenticationRequired
from .models import MAX_RATING, MIN_RATING, Review

logger = logging.getLogger(__name__)


def create_review(actor: Actor, book: Book, rating, text: str = "") -> Review:
    if not actor.is_authenticated:
        raise AuthenticationRequired("You must be logged in to review books.")
    try:
        rating = int(rating)
    except (TypeError, ValueError) as exc:
        raise ValidationError({"rating": "Rating must be a whole number."}) from exc
    if not MIN_RATING <= rating <= MAX_RATING:
        raise ValidationError({"rating": f"Rating must be between {MIN_RATING} and {MAX_RATING}."})
    review = Review(book=book, user_id=actor.id, rating=rating, review_text=(text or "").strip())
    authorize(actor, INSERT, REVIEWS, review)
    review.full_clean(exclude=["user"])
    review.save()
    logger.info("actor %s reviewed book %s (%s stars)", actor.id, book.pk, rating)
    return review


def delete_review(actor: Actor, review: Review) -> None:
    authorize(actor, DELETE, REVIEWS, review)
    pk = review.pk
    review.delete()
    logger.info("actor %s deleted review %s", actor.id, pk)


def my_reviews(actor: Actor):
    """The actor's own reviews with book title and author, newest first."""
    qs = visible(actor, REVIEWS, Review.objects.select_related("book"))
    return qs.filter(user_id=actor.id).order_by("-created_at", "-id")
