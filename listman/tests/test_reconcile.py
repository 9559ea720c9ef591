"""Tests for membership.reconcile_set()."""

from datetime import timedelta

import pytest

from listman.exceptions import NotFoundError, ValidationError
from listman.models import AutomationHistory, AutomationStatus, ListHistory, Source
from listman.services import membership
from listman.signals import automation_cancelled


pytestmark = pytest.mark.django_db


def refresh(*objs):
    for obj in objs:
        obj.refresh_from_db()


class TestReconcileScenarios:
    """Empty contact -> [L1, L2] -> [L2]."""

    def test_scenario_a_from_empty(
        self, contact, list_one, list_two, automation_a, automation_b
    ):
        result = membership.reconcile_set("c-001", ["L1", "L2"])

        assert result.added_automations == ["automation-a", "automation-b"]
        assert result.removed_automations == []
        assert result.contact.list_associations.count() == 2
        assert result.contact.automation_associations.count() == 2
        assert set(
            result.contact.list_associations.values_list("source", flat=True)
        ) == {Source.AUTOMATION}

        refresh(list_one, list_two, automation_a, automation_b)
        assert list_one.total_subscribers == 1
        assert list_two.total_subscribers == 1
        assert automation_a.total_users_processed == 1
        assert automation_b.total_users_processed == 1

        nurture = result.contact.automation_associations.get(automation=automation_b)
        assert nurture.step_number == 2
        assert nurture.next_step_time - nurture.started_at == timedelta(days=2)

    def test_scenario_b_drop_list(
        self, contact, list_one, list_two, automation_a, automation_b
    ):
        membership.reconcile_set("c-001", ["L1", "L2"])

        result = membership.reconcile_set("c-001", ["L2"])

        assert result.removed_automations == ["automation-a"]
        assert result.added_automations == []
        assert result.contact.active_list_codes == {"L2"}
        assert result.contact.active_automation_ids == {automation_b.pk}

        refresh(list_one, list_two, automation_a, automation_b)
        assert list_one.total_subscribers == 0
        assert list_two.total_subscribers == 1
        assert automation_a.total_users_processed == 1
        assert automation_b.total_users_processed == 1

        cancelled = AutomationHistory.objects.get(contact=contact, automation=automation_a)
        assert cancelled.status == AutomationStatus.CANCELLED
        assert cancelled.completed_at is not None
        untouched = AutomationHistory.objects.get(contact=contact, automation=automation_b)
        assert untouched.status == AutomationStatus.ACTIVE

        closed = ListHistory.objects.get(contact=contact)
        assert closed.mailing_list == list_one
        assert closed.source == Source.AUTOMATION


class TestReconcileBehavior:
    def test_idempotent(self, contact, list_one, list_two, automation_a):
        membership.reconcile_set("c-001", ["L1", "L2"])
        membership.reconcile_set("c-001", ["L2"])

        again = membership.reconcile_set("c-001", ["L2"])

        assert again.removed_automations == []
        assert again.added_automations == []
        refresh(list_one, list_two, automation_a)
        assert list_one.total_subscribers == 0
        assert list_two.total_subscribers == 1
        assert automation_a.total_users_processed == 1
        assert ListHistory.objects.filter(contact=contact).count() == 1
        assert AutomationHistory.objects.filter(contact=contact).count() == 2

    def test_shared_automation_survives(self, contact, list_one, list_three, automation_a):
        """Automation still required by a remaining list is not detached."""
        membership.reconcile_set("c-001", ["L1", "L3"])

        result = membership.reconcile_set("c-001", ["L3"])

        assert result.removed_automations == []
        assert result.contact.active_automation_ids == {automation_a.pk}
        assert (
            AutomationHistory.objects.get(contact=contact).status
            == AutomationStatus.ACTIVE
        )

    def test_swap_to_list_with_same_automation(
        self, contact, list_one, list_three, automation_a
    ):
        """Required set comes from the desired lists, not the current ones."""
        membership.reconcile_set("c-001", ["L1"])

        result = membership.reconcile_set("c-001", ["L3"])

        assert result.removed_automations == []
        assert result.added_automations == []
        assert result.contact.active_list_codes == {"L3"}
        assert result.contact.active_automation_ids == {automation_a.pk}
        automation_a.refresh_from_db()
        assert automation_a.total_users_processed == 1

    def test_empty_desired_set_clears_everything(
        self, contact, list_one, list_two, automation_a, automation_b
    ):
        membership.reconcile_set("c-001", ["L1", "L2"])

        result = membership.reconcile_set("c-001", [])

        assert result.removed_automations == ["automation-a", "automation-b"]
        assert not result.contact.list_associations.exists()
        assert not result.contact.automation_associations.exists()
        assert not AutomationHistory.objects.filter(
            contact=contact, status=AutomationStatus.ACTIVE
        ).exists()

    def test_detaches_automation_started_elsewhere(
        self, contact, list_one, list_plain, automation_a
    ):
        """Enrollment made by add() is detached when reconcile drops its list."""
        membership.add("c-001", "L1")

        result = membership.reconcile_set("c-001", ["plain"])

        assert result.removed_automations == ["automation-a"]
        assert result.contact.active_list_codes == {"plain"}
        assert not result.contact.automation_associations.exists()

    def test_reports_only_enrolled_automations(self, contact, list_one, list_plain):
        """Transfer opens L1 without enrolling, so dropping L1 detaches nothing."""
        membership.add("c-001", "plain")
        membership.transfer("c-001", "plain", "L1")
        cancelled = []

        def record(sender, automation_id, **kwargs):
            cancelled.append(automation_id)

        automation_cancelled.connect(record)
        try:
            result = membership.reconcile_set("c-001", [])
        finally:
            automation_cancelled.disconnect(record)

        assert result.removed_automations == []
        assert cancelled == []
        assert not result.contact.list_associations.exists()

    def test_closes_stray_history_without_reporting(self, contact, list_one, list_plain):
        membership.add("c-001", "plain")
        membership.transfer("c-001", "plain", "L1", automation_code="automation-a")

        result = membership.reconcile_set("c-001", [])

        assert result.removed_automations == []
        entry = AutomationHistory.objects.get(contact=contact)
        assert entry.status == AutomationStatus.CANCELLED
        assert entry.completed_at is not None

    def test_list_without_automation(self, contact, list_plain):
        result = membership.reconcile_set("c-001", ["plain"])

        assert result.added_automations == []
        list_plain.refresh_from_db()
        assert list_plain.total_subscribers == 1

    def test_duplicates_in_desired_set(self, contact, list_plain):
        membership.reconcile_set("c-001", ["plain", "plain"])

        list_plain.refresh_from_db()
        assert list_plain.total_subscribers == 1


class TestReconcileValidation:
    def test_unknown_list_rejected_before_mutation(self, contact, list_one):
        membership.reconcile_set("c-001", ["L1"])

        with pytest.raises(NotFoundError, match="LIST_NOT_FOUND"):
            membership.reconcile_set("c-001", ["ghost"])

        list_one.refresh_from_db()
        assert list_one.total_subscribers == 1
        assert contact.active_list_codes == {"L1"}

    @pytest.mark.parametrize("bad", ["L1", None, {"L1": True}, ["bad id"]])
    def test_malformed_desired_set(self, contact, list_one, bad):
        with pytest.raises(ValidationError):
            membership.reconcile_set("c-001", bad)

    def test_missing_contact(self, list_one):
        with pytest.raises(NotFoundError, match="CONTACT_NOT_FOUND"):
            membership.reconcile_set("c-404", ["L1"])
