"""Contact model (Contact Store aggregate root).

Data architecture:
    Contact
        Aggregate root. Every membership operation locks this row
        (select_for_update) before touching its children, which serializes
        concurrent operations on the same contact.

    ListAssociation / AutomationAssociation
        Active links. At most one per (contact, list) and per
        (contact, automation), enforced by unique constraints.

    ListHistory / AutomationHistory
        Append-only audit logs. A row is only ever changed to close an
        open entry.
"""

import uuid as uuid_lib

from django.db import models
from django.utils.translation import gettext_lazy as _


class Contact(models.Model):
    """Person that may subscribe to lists and be enrolled in automations."""

    code = models.SlugField(_("code"), max_length=50, unique=True)
    uuid = models.UUIDField(default=uuid_lib.uuid4, editable=False, unique=True)

    email = models.EmailField(_("email"), unique=True)
    full_name = models.CharField(_("full name"), max_length=200)

    is_active = models.BooleanField(_("active"), default=True, db_index=True)

    # Engagement counters
    emails_sent = models.PositiveIntegerField(_("emails sent"), default=0)
    emails_delivered = models.PositiveIntegerField(_("emails delivered"), default=0)
    emails_opened = models.PositiveIntegerField(_("emails opened"), default=0)
    emails_clicked = models.PositiveIntegerField(_("emails clicked"), default=0)

    # Derived on save()
    open_rate = models.FloatField(_("open rate"), default=0)
    click_rate = models.FloatField(_("click rate"), default=0)
    engagement_score = models.FloatField(
        _("engagement score"),
        default=50,
        help_text=_("0-100, neutral until the first email is sent"),
    )

    # Audit
    created_at = models.DateTimeField(_("created at"), auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(_("updated at"), auto_now=True)
    created_by = models.CharField(_("created by"), max_length=255, blank=True)
    updated_by = models.CharField(_("updated by"), max_length=255, blank=True)

    class Meta:
        verbose_name = _("contact")
        verbose_name_plural = _("contacts")
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.full_name} <{self.email}>"

    @property
    def active_list_codes(self) -> set[str]:
        return set(
            self.list_associations.values_list("mailing_list__code", flat=True)
        )

    @property
    def active_automation_ids(self) -> set[int]:
        return set(
            self.automation_associations.values_list("automation_id", flat=True)
        )

    def save(self, *args, **kwargs):
        if self.email:
            self.email = self.email.lower().strip()
        if self.full_name:
            self.full_name = self.full_name.strip()

        self._compute_engagement()

        update_fields = kwargs.get("update_fields")
        if update_fields is not None:
            kwargs["update_fields"] = set(update_fields) | {
                "open_rate",
                "click_rate",
                "engagement_score",
            }
        super().save(*args, **kwargs)

    def _compute_engagement(self):
        """Recompute open/click rates and the 0-100 engagement score."""
        if self.emails_delivered > 0:
            self.open_rate = self.emails_opened / self.emails_delivered * 100
        if self.emails_opened > 0:
            self.click_rate = self.emails_clicked / self.emails_opened * 100

        if self.emails_sent <= 0:
            return

        delivery_rate = self.emails_delivered / self.emails_sent * 100
        score = self.open_rate * 0.4 + self.click_rate * 0.4 + delivery_rate * 0.2
        self.engagement_score = min(100.0, max(0.0, score))
