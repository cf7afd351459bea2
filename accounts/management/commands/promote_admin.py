"""Grant the admin role to an existing account.

Operator tool for bootstrapping: nobody can choose admin at sign-up, and
only an admin can reassign roles through the application.
"""
from __future__ import annotations

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from accounts.models import Role, UserRole
from accounts.services import find_user_by_email


class Command(BaseCommand):
    help = "Make the account with the given e-mail an admin (replaces its current role)."

    def add_arguments(self, parser):
        parser.add_argument("email")

    def handle(self, *args, **options):
        user = find_user_by_email(options["email"])
        if user is None:
            raise CommandError(f"No account with e-mail {options['email']!r}.")
        with transaction.atomic():
            UserRole.objects.filter(user=user).delete()
            UserRole.objects.create(user=user, role=Role.ADMIN)
        self.stdout.write(self.style.SUCCESS(f"{user.email} is now an admin."))
