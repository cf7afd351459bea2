"""Forms for book reviews."""
from __future__ import annotations

from django import forms

from catalog.models import Book
from .models import MAX_RATING, MIN_RATING, Review


class ReviewForm(forms.ModelForm):
    book = forms.ModelChoiceField(queryset=Book.objects.order_by("title"), empty_label="Select a book")
    rating = forms.TypedChoiceField(
        choices=[(i, i) for i in range(MIN_RATING, MAX_RATING + 1)],
        coerce=int,
        initial=MAX_RATING,
        label="Rating",
    )

    class Meta:
        model = Review
        fields = ("book", "rating", "review_text")
        widgets = {
            "review_text": forms.Textarea(attrs={"rows": 3, "maxlength": 2000}),
        }
