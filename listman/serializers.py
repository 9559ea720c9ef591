"""JSON representation of contacts for response envelopes."""

from datetime import datetime

from listman.models import Contact


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def contact_to_dict(contact: Contact) -> dict:
    """Contact with active associations, history and engagement."""
    list_associations = [
        {
            "listId": assoc.mailing_list.code,
            "subscribedAt": _iso(assoc.subscribed_at),
            "source": assoc.source,
        }
        for assoc in contact.list_associations.select_related("mailing_list")
    ]
    automation_associations = [
        {
            "automationId": assoc.automation.code,
            "stepNumber": assoc.step_number,
            "startedAt": _iso(assoc.started_at),
            "nextStepTime": _iso(assoc.next_step_time),
        }
        for assoc in contact.automation_associations.select_related("automation")
    ]
    list_history = [
        {
            "listId": entry.mailing_list.code,
            "subscribedAt": _iso(entry.subscribed_at),
            "unsubscribedAt": _iso(entry.unsubscribed_at),
            "source": entry.source,
        }
        for entry in contact.list_history.select_related("mailing_list")
    ]
    automation_history = [
        {
            "automationId": entry.automation.code,
            "listId": entry.mailing_list.code if entry.mailing_list else None,
            "addedAt": _iso(entry.added_at),
            "completedAt": _iso(entry.completed_at),
            "status": entry.status,
            "transferredBy": entry.transferred_by,
            "stepsCompleted": entry.steps_completed,
        }
        for entry in contact.automation_history.select_related(
            "automation", "mailing_list"
        )
    ]

    return {
        "id": contact.code,
        "uuid": str(contact.uuid),
        "email": contact.email,
        "fullName": contact.full_name,
        "isActive": contact.is_active,
        "listAssociations": list_associations,
        "automationAssociations": automation_associations,
        "listHistory": list_history,
        "automationHistory": automation_history,
        "engagementHistory": {
            "totalEmailsSent": contact.emails_sent,
            "totalEmailsDelivered": contact.emails_delivered,
            "totalEmailsOpened": contact.emails_opened,
            "totalEmailsClicked": contact.emails_clicked,
            "openRate": contact.open_rate,
            "clickRate": contact.click_rate,
            "engagementScore": contact.engagement_score,
        },
        "createdAt": _iso(contact.created_at),
        "updatedAt": _iso(contact.updated_at),
    }
