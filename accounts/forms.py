"""Forms for sign-up, sign-in, profile editing and role assignment."""
from __future__ import annotations

from django import forms
from django.contrib.auth import get_user_model
from django.contrib.auth.forms import AuthenticationForm, UserCreationForm

from .models import Profile, Role, SIGNUP_ROLES
from .services import register_user

User = get_user_model()


class SignUpForm(UserCreationForm):
    """Sign-up with contact details and a self-service role.

    Admin is deliberately not offered; it is granted by another admin.
    """

    email = forms.EmailField(required=True)
    full_name = forms.CharField(max_length=200)
    phone = forms.CharField(max_length=50, required=False)
    institution = forms.CharField(max_length=200, required=False)
    role = forms.ChoiceField(
        choices=[(r.value, r.label) for r in SIGNUP_ROLES],
        initial=Role.STUDENT,
    )

    class Meta:
        model = User
        fields = ("email",)

    def clean_email(self):
        email = (self.cleaned_data.get("email") or "").strip().lower()
        if User.objects.filter(email__iexact=email).exists() or User.objects.filter(username__iexact=email).exists():
            raise forms.ValidationError("An account with this e-mail already exists.")
        return email

    def clean_full_name(self):
        name = (self.cleaned_data.get("full_name") or "").strip()
        if not name:
            raise forms.ValidationError("Full name is required.")
        return name

    def _post_clean(self):
        # Let password validators compare against the e-mail login name.
        email = self.cleaned_data.get("email")
        if email:
            self.instance.username = email
        super()._post_clean()

    def save(self, commit: bool = True):
        return register_user(
            email=self.cleaned_data["email"],
            password=self.cleaned_data["password1"],
            full_name=self.cleaned_data["full_name"],
            role=self.cleaned_data["role"],
            phone=self.cleaned_data.get("phone", ""),
            institution=self.cleaned_data.get("institution", ""),
        )


class EmailAuthenticationForm(AuthenticationForm):
    def __init__(self, request=None, *args, **kwargs):
        super().__init__(request, *args, **kwargs)
        self.fields["username"].label = "E-mail"

    def clean_username(self):
        return (self.cleaned_data.get("username") or "").strip().lower()


class ProfileForm(forms.ModelForm):
    """Edit contact details. E-mail is owned by the identity record."""

    class Meta:
        model = Profile
        fields = ("full_name", "phone", "institution")


class RoleAssignForm(forms.Form):
    role = forms.ChoiceField(choices=Role.choices)
