"""Membership service - list subscriptions and automation enrollment.

Every operation is one transaction.atomic() unit:
    1. validate identifiers (Gates) - no database access
    2. lock the contact row (select_for_update), serializing operations
       on the same contact
    3. resolve lists/automations and run conflict checks
    4. mutate associations, history rows, counters (F expressions) and
       emit signals (GlobalStats receivers run in the same transaction)

Anything raised before step 4 leaves the database untouched; anything
raised during step 4 rolls the whole operation back.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from listman.conf import listman_settings
from listman.exceptions import NotFoundError, ValidationError
from listman.gates import Gates
from listman.models import (
    Automation,
    AutomationAssociation,
    AutomationHistory,
    AutomationStatus,
    Contact,
    ListAssociation,
    ListHistory,
    MailingList,
    Source,
)
from listman.scheduling import initial_timing
from listman.signals import (
    automation_cancelled,
    automation_enrolled,
    engagement_updated,
    list_subscribed,
    list_unsubscribed,
)

logger = logging.getLogger(__name__)


@dataclass
class ReconcileResult:
    """Outcome of reconcile_set()."""

    contact: Contact
    removed_automations: list[str] = field(default_factory=list)
    added_automations: list[str] = field(default_factory=list)


# ======================================================================
# Operations
# ======================================================================


def add(contact_code: str, list_code: str, source: str | None = None) -> Contact:
    """
    Subscribe contact to a list, enrolling it in the list's automation.

    Raises:
        ValidationError: Malformed codes or unknown source
        NotFoundError: Contact or list absent
        ConflictError: Contact already subscribed to the list
    """
    Gates.identifier_format(contact_code, "contact ID")
    Gates.identifier_format(list_code, "list ID")
    source = _clean_source(source)

    with transaction.atomic():
        contact = _lock_contact(contact_code)
        mailing_list = _get_list(list_code)
        Gates.single_membership(contact, mailing_list)

        now = timezone.now()
        _subscribe(contact, mailing_list, source, now)
        _touch(contact)

    logger.info("Contact %s subscribed to list %s (%s)", contact.code, list_code, source)
    return contact


def remove(contact_code: str, list_code: str) -> Contact:
    """
    Unsubscribe contact from a list.

    Automations reached through the list are left running.

    Raises:
        ValidationError: Malformed codes
        NotFoundError: Contact absent or not subscribed to the list
    """
    Gates.identifier_format(contact_code, "contact ID")
    Gates.identifier_format(list_code, "list ID")

    with transaction.atomic():
        contact = _lock_contact(contact_code)
        association = (
            contact.list_associations.select_related("mailing_list")
            .filter(mailing_list__code=list_code)
            .first()
        )
        if association is None:
            raise NotFoundError(
                "LIST_MEMBERSHIP_NOT_FOUND",
                contact_code=contact_code,
                list_code=list_code,
            )

        _close_list(contact, association, timezone.now())
        _touch(contact)

    logger.info("Contact %s unsubscribed from list %s", contact.code, list_code)
    return contact


def transfer(
    contact_code: str,
    old_list_code: str,
    new_list_code: str,
    automation_code: str | None = None,
    transferred_by: str = "manual",
) -> Contact:
    """
    Move contact from one list to another.

    The old subscription is closed only if present. When automation_code is
    given, an active history entry is appended and the automation counter
    bumped even if the contact is already enrolled in it.

    Raises:
        ValidationError: Malformed codes or old == new
        NotFoundError: Contact, new list or automation absent
        ConflictError: Contact already subscribed to the new list
    """
    Gates.identifier_format(contact_code, "contact ID")
    Gates.identifier_format(old_list_code, "current list ID")
    Gates.identifier_format(new_list_code, "new list ID")
    Gates.distinct_transfer(old_list_code, new_list_code)
    if automation_code is not None:
        Gates.identifier_format(automation_code, "automation ID")

    with transaction.atomic():
        contact = _lock_contact(contact_code)
        new_list = _get_list(new_list_code)
        automation = _get_automation(automation_code) if automation_code else None
        Gates.single_membership(contact, new_list)

        now = timezone.now()
        old_association = (
            contact.list_associations.select_related("mailing_list")
            .filter(mailing_list__code=old_list_code)
            .first()
        )
        if old_association is not None:
            _close_list(contact, old_association, now)

        _open_list(contact, new_list, listman_settings.TRANSFER_SOURCE, now)

        if automation is not None:
            AutomationHistory.objects.create(
                contact=contact,
                automation=automation,
                mailing_list=new_list,
                added_at=now,
                transferred_by=transferred_by,
                status=AutomationStatus.ACTIVE,
            )
            Automation.objects.filter(pk=automation.pk).update(
                total_users_processed=F("total_users_processed") + 1
            )
            automation_enrolled.send(
                sender=Contact,
                contact=contact,
                automation=automation,
                mailing_list=new_list,
            )

        _touch(contact)

    logger.info(
        "Contact %s transferred from list %s to %s",
        contact.code,
        old_list_code,
        new_list_code,
    )
    return contact


def reconcile_set(contact_code: str, desired_list_codes) -> ReconcileResult:
    """
    Make the contact's subscriptions equal desired_list_codes.

    The diff is taken from a single snapshot of the current membership.
    Order:
        1. removed/added lists
        2. automations referenced by removed lists
        3. automations required by the desired lists
        4. detach (2) - (3) where enrolled, cancelling open history entries
        5. close removed subscriptions, open added ones
        6. attach automations of added lists not already enrolled

    Idempotent: a second call with the same set changes nothing.

    Raises:
        ValidationError: desired_list_codes is not a list of codes
        NotFoundError: Contact or any desired list absent
    """
    Gates.identifier_format(contact_code, "contact ID")
    desired = Gates.identifier_list(desired_list_codes)

    with transaction.atomic():
        contact = _lock_contact(contact_code)

        desired_lists = {
            ml.code: ml
            for ml in MailingList.objects.select_related("automation").filter(
                code__in=desired
            )
        }
        missing = [code for code in desired if code not in desired_lists]
        if missing:
            raise NotFoundError("LIST_NOT_FOUND", list_codes=missing)

        # 1. diff against one snapshot
        current = {
            assoc.mailing_list.code: assoc
            for assoc in contact.list_associations.select_related("mailing_list")
        }
        removed_codes = [code for code in current if code not in desired_lists]
        added_codes = [code for code in desired if code not in current]

        # 2. automations reachable through removed lists
        removed_map = MailingList.objects.automation_map(removed_codes)
        candidates = list(
            dict.fromkeys(
                removed_map[code]
                for code in removed_codes
                if removed_map.get(code) is not None
            )
        )

        # 3. automations still required by the desired set
        still_required = MailingList.objects.required_automation_ids(
            desired, among=candidates
        )

        # 4. detach
        now = timezone.now()
        to_detach = [pk for pk in candidates if pk not in still_required]
        codes_by_id = dict(
            Automation.objects.filter(pk__in=to_detach).values_list("pk", "code")
        )
        detached = [pk for pk in to_detach if _detach(contact, pk, now)]

        # 5. membership
        for code in removed_codes:
            _close_list(contact, current[code], now)
        for code in added_codes:
            _open_list(contact, desired_lists[code], listman_settings.RECONCILE_SOURCE, now)

        # 6. attach
        enrolled = contact.active_automation_ids
        added_automations = []
        for code in added_codes:
            mailing_list = desired_lists[code]
            automation = mailing_list.automation
            if automation is None or automation.pk in enrolled:
                continue
            _attach(contact, automation, mailing_list, now)
            enrolled.add(automation.pk)
            added_automations.append(automation.code)

        _touch(contact)

    removed_automations = [codes_by_id[pk] for pk in detached]
    logger.info(
        "Contact %s reconciled: lists -%s +%s, automations -%s +%s",
        contact.code,
        removed_codes,
        added_codes,
        removed_automations,
        added_automations,
    )
    return ReconcileResult(
        contact=contact,
        removed_automations=removed_automations,
        added_automations=added_automations,
    )


def multi_add(contact_code: str, list_codes, source: str | None = None) -> Contact:
    """
    Subscribe contact to several lists at once.

    All codes are validated before anything changes. Lists the contact is
    already subscribed to are skipped without failing the batch.

    Raises:
        ValidationError: Empty/malformed list, unknown source, or any list absent
        NotFoundError: Contact absent
    """
    Gates.identifier_format(contact_code, "contact ID")
    codes = Gates.identifier_list(list_codes, allow_empty=False)
    source = _clean_source(source)

    with transaction.atomic():
        contact = _lock_contact(contact_code)

        lists = {
            ml.code: ml
            for ml in MailingList.objects.select_related("automation").filter(
                code__in=codes
            )
        }
        missing = [code for code in codes if code not in lists]
        if missing:
            raise ValidationError("UNKNOWN_LISTS", list_codes=missing)

        now = timezone.now()
        subscribed = contact.active_list_codes
        added = []
        for code in codes:
            if code in subscribed:
                continue
            _subscribe(contact, lists[code], source, now)
            added.append(code)

        _touch(contact)

    logger.info("Contact %s subscribed to lists %s (%s)", contact.code, added, source)
    return contact


def update_engagement(
    contact_code: str,
    sent: int = 0,
    delivered: int = 0,
    opened: int = 0,
    clicked: int = 0,
) -> Contact:
    """
    Add engagement deltas to the contact (and GlobalStats mail counter).

    Raises:
        ValidationError: Malformed code or negative/non-integer delta
        NotFoundError: Contact absent
    """
    Gates.identifier_format(contact_code, "contact ID")
    deltas = Gates.engagement_deltas(
        sent=sent, delivered=delivered, opened=opened, clicked=clicked
    )

    with transaction.atomic():
        contact = _lock_contact(contact_code)
        contact.emails_sent += deltas["sent"]
        contact.emails_delivered += deltas["delivered"]
        contact.emails_opened += deltas["opened"]
        contact.emails_clicked += deltas["clicked"]
        contact.save(
            update_fields=[
                "emails_sent",
                "emails_delivered",
                "emails_opened",
                "emails_clicked",
                "updated_at",
            ]
        )
        engagement_updated.send(sender=Contact, contact=contact, deltas=deltas)

    return contact


# ======================================================================
# Internals (call inside transaction.atomic())
# ======================================================================


def _lock_contact(code: str) -> Contact:
    """Active contact with row-level lock. MUST be inside transaction.atomic()."""
    try:
        return Contact.objects.select_for_update().get(code=code, is_active=True)
    except Contact.DoesNotExist:
        raise NotFoundError("CONTACT_NOT_FOUND", contact_code=code)


def _get_list(code: str) -> MailingList:
    try:
        return MailingList.objects.select_related("automation").get(code=code)
    except MailingList.DoesNotExist:
        raise NotFoundError("LIST_NOT_FOUND", list_code=code)


def _get_automation(code: str) -> Automation:
    try:
        return Automation.objects.get(code=code)
    except Automation.DoesNotExist:
        raise NotFoundError("AUTOMATION_NOT_FOUND", automation_code=code)


def _clean_source(source: str | None) -> str:
    source = source or listman_settings.DEFAULT_SOURCE
    if source not in Source.values:
        raise ValidationError(
            "INVALID_SOURCE",
            message=f"Invalid source: {source}",
            allowed=list(Source.values),
        )
    return source


def _touch(contact: Contact) -> None:
    contact.save(update_fields=["updated_at"])


def _subscribe(
    contact: Contact, mailing_list: MailingList, source: str, now: datetime
) -> None:
    """Open a subscription and enroll in the list's automation if needed."""
    _open_list(contact, mailing_list, source, now)

    automation = mailing_list.automation
    if automation is None:
        return
    if contact.automation_associations.filter(automation=automation).exists():
        return
    _attach(contact, automation, mailing_list, now)


def _open_list(
    contact: Contact, mailing_list: MailingList, source: str, now: datetime
) -> ListAssociation:
    association = ListAssociation.objects.create(
        contact=contact,
        mailing_list=mailing_list,
        subscribed_at=now,
        source=source,
    )
    MailingList.objects.filter(pk=mailing_list.pk).update(
        total_subscribers=F("total_subscribers") + 1
    )
    list_subscribed.send(
        sender=Contact, contact=contact, mailing_list=mailing_list, source=source
    )
    return association


def _close_list(contact: Contact, association: ListAssociation, now: datetime) -> None:
    mailing_list = association.mailing_list
    ListHistory.objects.create(
        contact=contact,
        mailing_list=mailing_list,
        subscribed_at=association.subscribed_at,
        unsubscribed_at=now,
        source=association.source,
    )
    association.delete()
    MailingList.objects.filter(pk=mailing_list.pk, total_subscribers__gt=0).update(
        total_subscribers=F("total_subscribers") - 1
    )
    list_unsubscribed.send(sender=Contact, contact=contact, mailing_list=mailing_list)


def _attach(
    contact: Contact,
    automation: Automation,
    mailing_list: MailingList,
    now: datetime,
) -> AutomationAssociation:
    timing = initial_timing(automation.ordered_steps(), now=now)
    association = AutomationAssociation.objects.create(
        contact=contact,
        automation=automation,
        step_number=timing.step_number,
        started_at=now,
        next_step_time=timing.next_step_time,
    )
    AutomationHistory.objects.create(
        contact=contact,
        automation=automation,
        mailing_list=mailing_list,
        added_at=now,
        status=AutomationStatus.ACTIVE,
    )
    Automation.objects.filter(pk=automation.pk).update(
        total_users_processed=F("total_users_processed") + 1
    )
    automation_enrolled.send(
        sender=Contact,
        contact=contact,
        automation=automation,
        mailing_list=mailing_list,
    )
    return association


def _detach(contact: Contact, automation_id: int, now: datetime) -> bool:
    """
    End enrollment and close open history entries.

    Returns False (and sends nothing) when the contact was not enrolled.
    """
    deleted, _ = contact.automation_associations.filter(
        automation_id=automation_id
    ).delete()
    contact.automation_history.filter(
        automation_id=automation_id,
        status=AutomationStatus.ACTIVE,
    ).update(status=AutomationStatus.CANCELLED, completed_at=now)
    if not deleted:
        return False
    automation_cancelled.send(
        sender=Contact, contact=contact, automation_id=automation_id
    )
    return True
