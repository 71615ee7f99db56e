from django.core.management.base import BaseCommand

from marketplace.services.agreements import expire_due


class Command(BaseCommand):
    help = "Mark active commission agreements whose expiry date has passed as expired."

    def handle(self, *args, **opts):
        count = expire_due()
        self.stdout.write(self.style.SUCCESS(f"expired {count} agreement(s)"))
