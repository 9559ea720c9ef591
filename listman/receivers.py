"""
GlobalStats receivers.

Connected in ListmanConfig.ready(). Signals are sent inside the sender's
transaction.atomic() block, so these updates commit or roll back together
with the operation that triggered them.
"""

from django.db.models.signals import post_save
from django.dispatch import receiver

from listman.models import Automation, GlobalStats, MailingList
from listman.signals import contact_created, contact_deleted, engagement_updated


@receiver(contact_created)
def count_created_contact(sender, contact, **kwargs):
    GlobalStats.increment(total_users=1)


@receiver(contact_deleted)
def count_deleted_contact(sender, contact, was_active=True, **kwargs):
    # Already counted when it was deactivated
    if not was_active:
        return
    GlobalStats.increment(total_users=-1, total_users_deleted=1)


@receiver(engagement_updated)
def count_mail_sent(sender, contact, deltas, **kwargs):
    GlobalStats.increment(total_mail_sent=deltas.get("sent", 0))


@receiver(post_save, sender=MailingList)
def count_created_list(sender, instance, created, raw=False, **kwargs):
    if created and not raw:
        GlobalStats.increment(total_lists=1)


@receiver(post_save, sender=Automation)
def count_created_automation(sender, instance, created, raw=False, **kwargs):
    if created and not raw:
        GlobalStats.increment(total_automations=1)
