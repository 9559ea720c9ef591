"""MailingList model (List Directory).

A list drives zero or one automation. The list -> automation mapping is the
single source for "which automations does this membership require":
reconcile_set asks MailingList.objects.required_automation_ids() instead of
walking individual lists.
"""

import uuid as uuid_lib
from collections.abc import Iterable

from django.db import models
from django.db.models import Count
from django.utils.translation import gettext_lazy as _


class MailingListQuerySet(models.QuerySet):
    def with_automation_in(self, automation_ids: Iterable[int]) -> "MailingListQuerySet":
        """Lists whose bound automation is in the given set."""
        return self.filter(automation_id__in=list(automation_ids))

    def automation_map(self, codes: Iterable[str]) -> dict[str, int | None]:
        """Map list code -> bound automation id (None when unbound)."""
        return dict(
            self.filter(code__in=list(codes)).values_list("code", "automation_id")
        )

    def required_automation_ids(
        self,
        codes: Iterable[str],
        among: Iterable[int] | None = None,
    ) -> set[int]:
        """
        Automations required by membership in the given lists.

        Args:
            codes: List codes the contact is (or will be) subscribed to
            among: Restrict the answer to these automation ids
        """
        qs = self.filter(code__in=list(codes)).exclude(automation=None)
        if among is not None:
            qs = qs.with_automation_in(among)
        return set(qs.values_list("automation_id", flat=True))


class MailingList(models.Model):
    """
    Named collection of contacts, optionally driving one automation.

    total_subscribers is a denormalized cache of the number of
    ListAssociation rows pointing here. Membership services keep it in
    the same transaction as the association change; recount_subscribers()
    rebuilds it from scratch.
    """

    code = models.SlugField(_("code"), max_length=50, unique=True)
    uuid = models.UUIDField(default=uuid_lib.uuid4, editable=False, unique=True)
    name = models.CharField(_("name"), max_length=200)
    description = models.TextField(_("description"), blank=True)

    automation = models.ForeignKey(
        "listman.Automation",
        on_delete=models.SET_NULL,
        related_name="lists",
        null=True,
        blank=True,
        verbose_name=_("automation"),
    )

    is_active = models.BooleanField(_("active"), default=True)

    # Denormalized counter
    total_subscribers = models.PositiveIntegerField(_("subscribers"), default=0)

    metadata = models.JSONField(_("metadata"), default=dict, blank=True)

    created_at = models.DateTimeField(_("created at"), auto_now_add=True)
    updated_at = models.DateTimeField(_("updated at"), auto_now=True)

    objects = MailingListQuerySet.as_manager()

    class Meta:
        verbose_name = _("mailing list")
        verbose_name_plural = _("mailing lists")
        ordering = ["name"]

    def __str__(self):
        return f"{self.name} ({self.code})"

    @classmethod
    def recount_subscribers(cls) -> int:
        """
        Rebuild total_subscribers from association rows.

        Returns the number of lists whose counter was corrected.
        """
        fixed = 0
        counted = cls.objects.annotate(actual=Count("associations"))
        for mailing_list in counted:
            if mailing_list.total_subscribers != mailing_list.actual:
                cls.objects.filter(pk=mailing_list.pk).update(
                    total_subscribers=mailing_list.actual
                )
                fixed += 1
        return fixed
