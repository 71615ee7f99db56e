from django.core.management.base import BaseCommand

from marketplace.services.otp import cleanup


class Command(BaseCommand):
    help = "Expire stale OTPs and purge OTP logs past the retention window."

    def handle(self, *args, **opts):
        result = cleanup()
        self.stdout.write(self.style.SUCCESS(f"expired {result['expired']}, deleted {result['deleted']}"))
