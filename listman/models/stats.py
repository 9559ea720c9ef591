"""
GlobalStats singleton (platform-wide counters).

Counters are bumped by receivers in listman.receivers while the sender's
transaction is open, never directly by membership services.
"""

from django.db import models
from django.db.models import F
from django.utils.translation import gettext_lazy as _


class GlobalStats(models.Model):
    """Singleton row of platform counters, keyed by LISTMAN["STATS_KEY"]."""

    key = models.CharField(_("key"), max_length=20, primary_key=True)

    total_users = models.IntegerField(_("users"), default=0)
    total_users_deleted = models.PositiveIntegerField(_("users deleted"), default=0)
    total_mail_sent = models.PositiveIntegerField(_("mail sent"), default=0)
    total_lists = models.PositiveIntegerField(_("lists"), default=0)
    total_automations = models.PositiveIntegerField(_("automations"), default=0)

    updated_at = models.DateTimeField(_("updated at"), auto_now=True)

    class Meta:
        db_table = "listman_global_stats"
        verbose_name = _("global stats")
        verbose_name_plural = _("global stats")

    def __str__(self):
        return f"stats:{self.key}"

    @classmethod
    def load(cls) -> "GlobalStats":
        """Fetch the singleton, creating it on first use."""
        from listman.conf import listman_settings

        stats, _ = cls.objects.get_or_create(key=listman_settings.STATS_KEY)
        return stats

    @classmethod
    def increment(cls, **deltas: int) -> None:
        """
        Atomically add deltas to counters (upsert if absent).

        Usage:
            GlobalStats.increment(total_mail_sent=3)
        """
        deltas = {field: delta for field, delta in deltas.items() if delta}
        if not deltas:
            return
        stats = cls.load()
        cls.objects.filter(pk=stats.pk).update(
            **{field: F(field) + delta for field, delta in deltas.items()}
        )
