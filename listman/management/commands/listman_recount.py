"""Management command to rebuild list subscriber counters."""

from django.core.management.base import BaseCommand

from listman.models import MailingList


class Command(BaseCommand):
    help = "Recompute MailingList.total_subscribers from active subscriptions"

    def handle(self, *args, **options):
        fixed = MailingList.recount_subscribers()
        self.stdout.write(self.style.SUCCESS(f"Corrected {fixed} list counters."))
