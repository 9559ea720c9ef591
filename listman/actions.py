"""
Contact action dispatcher.

Translates {contactId, action, data} requests into membership operations
and wraps the outcome in a response envelope:

    {"success": True, "message": ..., "data": ...}
    {"success": False, "message": ..., "errorKind": "BadRequest" | "NotFound" | "Conflict"}
"""

from collections.abc import Callable

from listman.exceptions import ListmanError, ValidationError
from listman.gates import Gates
from listman.serializers import contact_to_dict
from listman.services import membership


def _add_to_list(contact_code: str, data: dict) -> tuple[str, dict]:
    contact = membership.add(contact_code, data.get("listId"), data.get("source"))
    return "Contact added to list successfully", contact_to_dict(contact)


def _remove_from_list(contact_code: str, data: dict) -> tuple[str, dict]:
    contact = membership.remove(contact_code, data.get("listId"))
    return "Contact removed from list successfully", contact_to_dict(contact)


def _transfer_list(contact_code: str, data: dict) -> tuple[str, dict]:
    contact = membership.transfer(
        contact_code,
        data.get("listId"),
        data.get("newListId"),
        automation_code=data.get("automationId") or None,
        transferred_by=data.get("transferredBy") or "manual",
    )
    return "Contact transferred successfully", contact_to_dict(contact)


def _update_list_associations(contact_code: str, data: dict) -> tuple[str, dict]:
    result = membership.reconcile_set(contact_code, data.get("listIds", []))
    return (
        "Contact lists and automations updated successfully",
        {
            "contact": contact_to_dict(result.contact),
            "removedAutomations": result.removed_automations,
            "addedAutomations": result.added_automations,
        },
    )


def _multi_list_add(contact_code: str, data: dict) -> tuple[str, dict]:
    contact = membership.multi_add(
        contact_code, data.get("listIds", []), data.get("source")
    )
    return "Contact added to multiple lists successfully", contact_to_dict(contact)


def _update_engagement(contact_code: str, data: dict) -> tuple[str, dict]:
    contact = membership.update_engagement(
        contact_code,
        sent=data.get("emailsSent"),
        delivered=data.get("emailsDelivered"),
        opened=data.get("emailsOpened"),
        clicked=data.get("emailsClicked"),
    )
    return "Engagement updated successfully", contact_to_dict(contact)


ACTIONS: dict[str, Callable[[str, dict], tuple[str, dict]]] = {
    "addToList": _add_to_list,
    "removeFromList": _remove_from_list,
    "transferList": _transfer_list,
    "updateListAssociations": _update_list_associations,
    "multiListAdd": _multi_list_add,
    "updateEngagement": _update_engagement,
}


def failure(exc: ListmanError) -> dict:
    return {"success": False, "message": exc.message, "errorKind": exc.kind}


def dispatch(payload: dict) -> dict:
    """
    Run one contact action.

    Args:
        payload: {"contactId": str, "action": str, "data": dict}

    Returns:
        Success or failure envelope. Unexpected exceptions propagate.
    """
    try:
        contact_code = payload.get("contactId")
        Gates.identifier_format(contact_code, "contact ID")

        handler = ACTIONS.get(payload.get("action"))
        if handler is None:
            raise ValidationError("INVALID_ACTION", action=payload.get("action"))

        data = payload.get("data") or {}
        if not isinstance(data, dict):
            raise ValidationError("INVALID_ACTION", message="data must be an object")

        message, result = handler(contact_code, data)
    except ListmanError as exc:
        return failure(exc)

    return {"success": True, "message": message, "data": result}
