from __future__ import annotations

from django import forms

from catalog.models import Book


class ComposeForm(forms.Form):
    recipient_email = forms.EmailField(label="Recipient e-mail")
    subject = forms.CharField(max_length=200)
    content = forms.CharField(widget=forms.Textarea(attrs={"rows": 5}))
    book = forms.ModelChoiceField(
        queryset=Book.objects.order_by("title"),
        required=False,
        empty_label="No related book",
    )
