"""Tests for contact registration and deletion."""

from unittest.mock import patch

import pytest
from django.db import IntegrityError

from listman.exceptions import ConflictError, NotFoundError, ValidationError
from listman.models import Contact, GlobalStats
from listman.services import contact as contact_service
from listman.services import membership


pytestmark = pytest.mark.django_db


class TestLookup:
    def test_get(self, contact):
        assert contact_service.get("c-001") == contact

    def test_get_inactive(self, contact):
        contact.is_active = False
        contact.save()
        assert contact_service.get("c-001") is None

    def test_get_by_email_case_insensitive(self, contact):
        assert contact_service.get_by_email("  JANE@example.com ") == contact


class TestRegister:
    def test_register_new_contact(self, db):
        before = GlobalStats.load().total_users

        cust, created = contact_service.register(
            "  New@Example.com ", " New Person ", created_by="api-system"
        )

        assert created is True
        assert cust.email == "new@example.com"
        assert cust.full_name == "New Person"
        assert cust.created_by == "api-system"
        assert cust.code.startswith("c-")
        assert GlobalStats.load().total_users == before + 1

    def test_register_with_explicit_code(self, db):
        cust, _ = contact_service.register("a@example.com", "A", code="lead-42")
        assert cust.code == "lead-42"

    def test_register_with_list(self, list_one, automation_a):
        cust, created = contact_service.register(
            "new@example.com", "New", list_code="L1", source="form"
        )

        assert created is True
        assert cust.active_list_codes == {"L1"}
        assert cust.active_automation_ids == {automation_a.pk}
        list_one.refresh_from_db()
        assert list_one.total_subscribers == 1

    def test_existing_email_with_list_subscribes(self, contact, list_plain):
        cust, created = contact_service.register("jane@example.com", "Jane", list_code="plain")

        assert created is False
        assert cust.pk == contact.pk
        assert cust.active_list_codes == {"plain"}

    def test_existing_email_without_list_conflicts(self, contact):
        with pytest.raises(ConflictError, match="CONTACT_EXISTS"):
            contact_service.register("jane@example.com", "Jane")

    def test_existing_email_already_on_list_conflicts(self, contact, list_plain):
        membership.add("c-001", "plain")

        with pytest.raises(ConflictError, match="ALREADY_SUBSCRIBED"):
            contact_service.register("jane@example.com", "Jane", list_code="plain")

    @pytest.mark.parametrize("email", ["", "not-an-email", "a@b", None])
    def test_invalid_email(self, db, email):
        with pytest.raises(ValidationError, match="INVALID_EMAIL"):
            contact_service.register(email, "Someone")

    def test_missing_name(self, db):
        with pytest.raises(ValidationError, match="INVALID_NAME"):
            contact_service.register("a@example.com", "   ")

    def test_unknown_list_creates_nothing(self, db):
        with pytest.raises(NotFoundError, match="LIST_NOT_FOUND"):
            contact_service.register("a@example.com", "A", list_code="ghost")

        assert not Contact.objects.exists()

    def test_taken_code_conflicts(self, contact):
        with pytest.raises(ConflictError, match="CONTACT_EXISTS"):
            contact_service.register("other@example.com", "Other", code="c-001")

        assert not Contact.objects.filter(email="other@example.com").exists()

    def test_insert_race_conflicts(self, db):
        """Unique violation at insert time surfaces as a Conflict."""
        before = GlobalStats.load().total_users

        with patch.object(
            Contact.objects, "create", side_effect=IntegrityError("duplicate")
        ):
            with pytest.raises(ConflictError, match="CONTACT_EXISTS"):
                contact_service.register("a@example.com", "A", code="lead-42")

        assert GlobalStats.load().total_users == before

    def test_deactivated_email_conflicts_with_or_without_list(self, contact, list_plain):
        contact_service.deactivate("c-001")

        with pytest.raises(ConflictError, match="CONTACT_EXISTS"):
            contact_service.register("jane@example.com", "Jane")
        with pytest.raises(ConflictError, match="CONTACT_EXISTS"):
            contact_service.register("jane@example.com", "Jane", list_code="plain")

        list_plain.refresh_from_db()
        assert list_plain.total_subscribers == 0


class TestDeactivate:
    def test_deactivate(self, contact, list_plain):
        membership.add("c-001", "plain")
        stats = GlobalStats.load()

        result = contact_service.deactivate("c-001", updated_by="admin")

        assert result.is_active is False
        assert result.updated_by == "admin"
        assert contact_service.get("c-001") is None
        # Memberships are kept
        list_plain.refresh_from_db()
        assert list_plain.total_subscribers == 1

        after = GlobalStats.load()
        assert after.total_users == stats.total_users - 1
        assert after.total_users_deleted == stats.total_users_deleted + 1

    def test_deactivated_contact_rejects_membership_changes(self, contact, list_plain):
        contact_service.deactivate("c-001")

        with pytest.raises(NotFoundError):
            membership.add("c-001", "plain")

    def test_deactivate_twice(self, contact):
        contact_service.deactivate("c-001")

        with pytest.raises(NotFoundError):
            contact_service.deactivate("c-001")


class TestDelete:
    def test_delete_releases_list_counters(self, contact, list_one, list_plain):
        membership.multi_add("c-001", ["L1", "plain"])
        stats = GlobalStats.load()

        contact_service.delete("c-001")

        assert not Contact.objects.filter(code="c-001").exists()
        list_one.refresh_from_db()
        list_plain.refresh_from_db()
        assert list_one.total_subscribers == 0
        assert list_plain.total_subscribers == 0

        after = GlobalStats.load()
        assert after.total_users == stats.total_users - 1
        assert after.total_users_deleted == stats.total_users_deleted + 1

    def test_delete_after_deactivate_counts_once(self, contact):
        contact_service.deactivate("c-001")
        stats = GlobalStats.load()

        contact_service.delete("c-001")

        after = GlobalStats.load()
        assert after.total_users == stats.total_users
        assert after.total_users_deleted == stats.total_users_deleted

    def test_delete_missing(self, db):
        with pytest.raises(NotFoundError):
            contact_service.delete("c-404")
