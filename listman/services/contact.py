"""Contact service - registration and removal.

All write operations that touch >1 record use transaction.atomic().
"""

import logging
import uuid as uuid_lib

from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_email
from django.db import IntegrityError, transaction
from django.db.models import F

from listman.exceptions import ConflictError, NotFoundError, ValidationError
from listman.gates import Gates
from listman.models import Contact, MailingList
from listman.services import membership
from listman.signals import contact_created, contact_deleted

logger = logging.getLogger(__name__)


def get(code: str) -> Contact | None:
    """Get active contact by unique code."""
    try:
        return Contact.objects.get(code=code, is_active=True)
    except Contact.DoesNotExist:
        return None


def get_by_email(email: str) -> Contact | None:
    """Get active contact by email."""
    try:
        return Contact.objects.get(email__iexact=email.strip(), is_active=True)
    except Contact.DoesNotExist:
        return None


def register(
    email: str,
    full_name: str,
    list_code: str | None = None,
    source: str | None = None,
    created_by: str = "",
    code: str | None = None,
) -> tuple[Contact, bool]:
    """
    Create a contact, optionally subscribing it to a list.

    If the email belongs to an active contact and a list is given, that
    contact is subscribed instead.

    Returns:
        (contact, created)

    Raises:
        ValidationError: Missing name, malformed email or codes
        NotFoundError: List absent
        ConflictError: Email already registered (no list given, or the
            contact is deactivated), code taken, or existing contact
            already on the list
    """
    if not full_name or not full_name.strip():
        raise ValidationError("INVALID_NAME")

    email = (email or "").strip().lower()
    try:
        validate_email(email)
    except DjangoValidationError:
        raise ValidationError("INVALID_EMAIL", email=email)

    if list_code is not None:
        Gates.identifier_format(list_code, "list ID")
    if code is not None:
        Gates.identifier_format(code, "contact ID")

    existing = Contact.objects.filter(email=email).first()
    if existing:
        # Deactivated contacts keep their email
        if list_code is None or not existing.is_active:
            raise ConflictError("CONTACT_EXISTS", contact_code=existing.code)
        return membership.add(existing.code, list_code, source), False

    if code is not None and Contact.objects.filter(code=code).exists():
        raise ConflictError("CONTACT_EXISTS", contact_code=code)

    if list_code is not None and not MailingList.objects.filter(code=list_code).exists():
        raise NotFoundError("LIST_NOT_FOUND", list_code=list_code)

    code = code or f"c-{uuid_lib.uuid4().hex[:12]}"
    try:
        with transaction.atomic():
            contact = Contact.objects.create(
                code=code,
                email=email,
                full_name=full_name,
                created_by=created_by,
                updated_by=created_by,
            )
            contact_created.send(sender=Contact, contact=contact)

            if list_code is not None:
                contact = membership.add(contact.code, list_code, source)
    except IntegrityError:
        # Concurrent registration with the same email or code
        raise ConflictError("CONTACT_EXISTS", contact_code=code, email=email)

    logger.info("Contact %s registered", contact.code)
    return contact, True


def deactivate(code: str, updated_by: str = "") -> Contact:
    """
    Soft delete: hide the contact, keeping its memberships and history.

    Raises:
        NotFoundError: Contact absent or already inactive
    """
    Gates.identifier_format(code, "contact ID")

    with transaction.atomic():
        try:
            contact = Contact.objects.select_for_update().get(code=code, is_active=True)
        except Contact.DoesNotExist:
            raise NotFoundError("CONTACT_NOT_FOUND", contact_code=code)

        contact.is_active = False
        if updated_by:
            contact.updated_by = updated_by
        contact.save(update_fields=["is_active", "updated_by", "updated_at"])
        contact_deleted.send(sender=Contact, contact=contact, hard=False, was_active=True)

    logger.info("Contact %s deactivated", code)
    return contact


def delete(code: str) -> None:
    """
    Hard delete: remove the contact and everything attached to it.

    Subscriber counters of the lists it was still on are decremented.
    Inactive contacts can be deleted too.

    Raises:
        NotFoundError: Contact absent
    """
    Gates.identifier_format(code, "contact ID")

    with transaction.atomic():
        try:
            contact = Contact.objects.select_for_update().get(code=code)
        except Contact.DoesNotExist:
            raise NotFoundError("CONTACT_NOT_FOUND", contact_code=code)

        list_ids = list(contact.list_associations.values_list("mailing_list_id", flat=True))
        MailingList.objects.filter(pk__in=list_ids, total_subscribers__gt=0).update(
            total_subscribers=F("total_subscribers") - 1
        )

        was_active = contact.is_active
        contact.delete()
        contact_deleted.send(
            sender=Contact, contact=contact, hard=True, was_active=was_active
        )

    logger.info("Contact %s deleted", code)
