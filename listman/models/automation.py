"""Automation and AutomationStep models (Automation Directory)."""

import uuid as uuid_lib

from django.db import models
from django.utils.translation import gettext_lazy as _


class StepType(models.TextChoices):
    SEND_WEBHOOK = "sendWebhook", _("Send webhook")
    WAIT_SUBSCRIBER = "waitSubscriber", _("Wait")
    MOVE_SUBSCRIBER = "moveSubscriber", _("Move subscriber")
    REMOVE_SUBSCRIBER = "removeSubscriber", _("Remove subscriber")
    DELETE_SUBSCRIBER = "deleteSubscriber", _("Delete subscriber")
    SEND_MAIL = "sendMail", _("Send mail")


class WaitUnit(models.TextChoices):
    SECONDS = "seconds", _("Seconds")
    MINUTES = "minutes", _("Minutes")
    HOURS = "hours", _("Hours")
    DAYS = "days", _("Days")
    WEEKS = "weeks", _("Weeks")
    MONTHS = "months", _("Months")


class Automation(models.Model):
    """
    Ordered sequence of steps executed over time for enrolled contacts.

    total_users_processed counts enrollment events, not unique contacts:
    a contact that leaves and re-enters is counted twice.
    """

    code = models.SlugField(_("code"), max_length=50, unique=True)
    uuid = models.UUIDField(default=uuid_lib.uuid4, editable=False, unique=True)
    name = models.CharField(_("name"), max_length=200)
    description = models.TextField(_("description"), blank=True)
    is_active = models.BooleanField(_("active"), default=False)

    # Denormalized counter
    total_users_processed = models.PositiveIntegerField(
        _("users processed"),
        default=0,
    )

    metadata = models.JSONField(_("metadata"), default=dict, blank=True)

    created_at = models.DateTimeField(_("created at"), auto_now_add=True)
    updated_at = models.DateTimeField(_("updated at"), auto_now=True)

    class Meta:
        verbose_name = _("automation")
        verbose_name_plural = _("automations")
        ordering = ["name"]

    def __str__(self):
        return f"{self.name} ({self.code})"

    def ordered_steps(self) -> list["AutomationStep"]:
        """Steps ordered by step_count."""
        return list(self.steps.order_by("step_count", "id"))


class AutomationStep(models.Model):
    """Single step of an automation. Only waitSubscriber uses the wait fields."""

    automation = models.ForeignKey(
        Automation,
        on_delete=models.CASCADE,
        related_name="steps",
        verbose_name=_("automation"),
    )
    step_count = models.PositiveIntegerField(_("sequence number"))
    step_type = models.CharField(
        _("type"),
        max_length=20,
        choices=StepType.choices,
    )
    title = models.CharField(_("title"), max_length=200)

    wait_duration = models.PositiveIntegerField(
        _("wait duration"),
        null=True,
        blank=True,
    )
    wait_unit = models.CharField(
        _("wait unit"),
        max_length=10,
        choices=WaitUnit.choices,
        blank=True,
    )

    class Meta:
        verbose_name = _("automation step")
        verbose_name_plural = _("automation steps")
        ordering = ["automation", "step_count"]

    def __str__(self):
        return f"{self.step_count}. {self.title} [{self.step_type}]"
