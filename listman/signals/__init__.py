"""
Listman signals - public event API.

All membership signals are sent inside the sender's transaction, so
receivers that write to the database commit or roll back with it.

Emitted signals:
- contact_created: services.contact.register()
- contact_deleted: services.contact.deactivate() / delete()
- list_subscribed: any add-style membership operation
- list_unsubscribed: remove / transfer / reconcile_set
- automation_enrolled: automation attached (or transfer-tagged)
- automation_cancelled: automation detached by reconcile_set
- engagement_updated: services.membership.update_engagement()
"""

from django.dispatch import Signal

# Contact lifecycle (sender=Contact)
contact_created = Signal()  # contact
contact_deleted = Signal()  # contact, hard=bool, was_active=bool

# Membership (sender=Contact)
list_subscribed = Signal()  # contact, mailing_list, source
list_unsubscribed = Signal()  # contact, mailing_list
automation_enrolled = Signal()  # contact, automation, mailing_list
automation_cancelled = Signal()  # contact, automation_id

# Engagement (sender=Contact)
engagement_updated = Signal()  # contact, deltas=dict
