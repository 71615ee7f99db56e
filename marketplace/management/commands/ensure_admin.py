import os

from django.core.management.base import BaseCommand, CommandError
from rest_framework.exceptions import ValidationError

from marketplace.models import AdminProfile, User
from marketplace.services.accounts import normalize_email, register_admin


class Command(BaseCommand):
    help = "Ensure an administrator account exists (idempotent). Reads ADMIN_EMAIL / ADMIN_PASSWORD by default."

    def add_arguments(self, parser):
        parser.add_argument("--email", default=os.getenv("ADMIN_EMAIL"))
        parser.add_argument("--password", default=os.getenv("ADMIN_PASSWORD"))
        parser.add_argument("--full-name", default=os.getenv("ADMIN_FULL_NAME", "Administrator"))

    def handle(self, *args, **opts):
        email, password = opts["email"], opts["password"]
        if not email or not password:
            raise CommandError("email and password are required (--email/--password or ADMIN_EMAIL/ADMIN_PASSWORD)")

        user = User.objects.filter(email=normalize_email(email)).first()
        if user is None:
            try:
                profile = register_admin({"email": email, "password": password, "full_name": opts["full_name"]})
            except ValidationError as e:
                raise CommandError(f"could not create administrator: {e.detail}")
            self.stdout.write(self.style.SUCCESS(f"created: {profile.user.email}"))
            return

        if user.role != "admin":
            raise CommandError(f"{user.email} exists with role {user.role}")
        user.set_password(password)
        user.is_active = True
        user.is_staff = True
        user.failed_login_attempts = 0
        user.account_locked_until = None
        user.save()
        AdminProfile.objects.get_or_create(user=user, defaults={"full_name": opts["full_name"]})
        self.stdout.write(self.style.SUCCESS(f"ok: {user.email} (admin)"))
