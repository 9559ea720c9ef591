"""Append-only membership audit logs."""

from django.db import models
from django.utils.translation import gettext_lazy as _

from listman.models.association import Source


class ListHistory(models.Model):
    """Closed list subscription. Written once, when the association ends."""

    contact = models.ForeignKey(
        "listman.Contact",
        on_delete=models.CASCADE,
        related_name="list_history",
        verbose_name=_("contact"),
    )
    mailing_list = models.ForeignKey(
        "listman.MailingList",
        on_delete=models.CASCADE,
        related_name="history",
        verbose_name=_("list"),
    )
    subscribed_at = models.DateTimeField(_("subscribed at"))
    unsubscribed_at = models.DateTimeField(_("unsubscribed at"), db_index=True)
    source = models.CharField(
        _("source"),
        max_length=20,
        choices=Source.choices,
        default=Source.MANUAL,
    )

    class Meta:
        verbose_name = _("list history entry")
        verbose_name_plural = _("list history")
        ordering = ["unsubscribed_at", "id"]
        indexes = [
            models.Index(
                fields=["contact", "mailing_list"],
                name="listman_listhist_contact_idx",
            ),
        ]

    def __str__(self):
        return f"{self.contact_id} left list {self.mailing_list_id} at {self.unsubscribed_at}"


class AutomationStatus(models.TextChoices):
    ACTIVE = "active", _("Active")
    COMPLETED = "completed", _("Completed")
    PAUSED = "paused", _("Paused")
    FAILED = "failed", _("Failed")
    CANCELLED = "cancelled", _("Cancelled")


class AutomationHistory(models.Model):
    """
    Automation journey log.

    Opened with status=active on enrollment. The only permitted change is
    closing an active entry (status + completed_at).
    """

    contact = models.ForeignKey(
        "listman.Contact",
        on_delete=models.CASCADE,
        related_name="automation_history",
        verbose_name=_("contact"),
    )
    automation = models.ForeignKey(
        "listman.Automation",
        on_delete=models.CASCADE,
        related_name="history",
        verbose_name=_("automation"),
    )
    mailing_list = models.ForeignKey(
        "listman.MailingList",
        on_delete=models.SET_NULL,
        related_name="automation_history",
        null=True,
        blank=True,
        verbose_name=_("list"),
    )
    added_at = models.DateTimeField(_("added at"))
    completed_at = models.DateTimeField(_("completed at"), null=True, blank=True)
    status = models.CharField(
        _("status"),
        max_length=20,
        choices=AutomationStatus.choices,
        default=AutomationStatus.ACTIVE,
        db_index=True,
    )
    transferred_by = models.CharField(_("transferred by"), max_length=100, blank=True)
    steps_completed = models.PositiveIntegerField(_("steps completed"), default=0)

    class Meta:
        verbose_name = _("automation history entry")
        verbose_name_plural = _("automation history")
        ordering = ["added_at", "id"]
        indexes = [
            models.Index(
                fields=["contact", "automation", "status"],
                name="listman_autohist_status_idx",
            ),
        ]

    def __str__(self):
        return f"{self.contact_id} in automation {self.automation_id} [{self.status}]"
