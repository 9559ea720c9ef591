"""Active contact links to lists and automations."""

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class Source(models.TextChoices):
    MANUAL = "manual", _("Manual")
    IMPORT = "import", _("Import")
    API = "api", _("API")
    FORM = "form", _("Form")
    AUTOMATION = "automation", _("Automation")
    CAMPAIGN = "campaign", _("Campaign")
    TRANSFER = "transfer", _("Transfer")


class ListAssociation(models.Model):
    """Active subscription of a contact to a list."""

    contact = models.ForeignKey(
        "listman.Contact",
        on_delete=models.CASCADE,
        related_name="list_associations",
        verbose_name=_("contact"),
    )
    mailing_list = models.ForeignKey(
        "listman.MailingList",
        on_delete=models.CASCADE,
        related_name="associations",
        verbose_name=_("list"),
    )
    subscribed_at = models.DateTimeField(_("subscribed at"), default=timezone.now)
    source = models.CharField(
        _("source"),
        max_length=20,
        choices=Source.choices,
        default=Source.MANUAL,
    )

    class Meta:
        verbose_name = _("list association")
        verbose_name_plural = _("list associations")
        ordering = ["subscribed_at", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=["contact", "mailing_list"],
                name="listman_unique_list_association",
            ),
        ]

    def __str__(self):
        return f"{self.contact_id} -> list {self.mailing_list_id}"


class AutomationAssociation(models.Model):
    """
    Active enrollment of a contact in an automation.

    step_number/next_step_time tell the runtime scheduler where to resume.
    """

    contact = models.ForeignKey(
        "listman.Contact",
        on_delete=models.CASCADE,
        related_name="automation_associations",
        verbose_name=_("contact"),
    )
    automation = models.ForeignKey(
        "listman.Automation",
        on_delete=models.CASCADE,
        related_name="associations",
        verbose_name=_("automation"),
    )
    step_number = models.PositiveIntegerField(_("step number"), default=1)
    started_at = models.DateTimeField(_("started at"), default=timezone.now)
    next_step_time = models.DateTimeField(_("next step time"), null=True, blank=True)

    class Meta:
        verbose_name = _("automation association")
        verbose_name_plural = _("automation associations")
        ordering = ["started_at", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=["contact", "automation"],
                name="listman_unique_automation_association",
            ),
        ]
        indexes = [
            models.Index(
                fields=["automation", "next_step_time"],
                name="listman_autoassoc_next_idx",
            ),
        ]

    def __str__(self):
        return f"{self.contact_id} -> automation {self.automation_id} @ step {self.step_number}"
