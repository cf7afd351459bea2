"""Forms for submitting books."""
from __future__ import annotations

from django import forms

from .validators import validate_upload


class BookSubmitForm(forms.Form):
    """Book submission (25 MB cap, PDF/EPUB/MOBI/TXT)."""

    title = forms.CharField(max_length=300)
    author = forms.CharField(max_length=200, required=False)
    edition = forms.CharField(max_length=50, required=False)
    category = forms.CharField(max_length=100, required=False, help_text="e.g. Mathematics, Science")
    isbn = forms.CharField(max_length=32, required=False, label="ISBN")
    description = forms.CharField(
        required=False,
        widget=forms.Textarea(attrs={"rows": 3, "placeholder": "Brief description of the book"}),
    )
    file = forms.FileField(widget=forms.ClearableFileInput(attrs={"accept": ".pdf,.epub,.mobi,.txt"}))

    def clean_file(self):
        f = self.cleaned_data.get("file")
        if f:
            validate_upload(f)
        return f
