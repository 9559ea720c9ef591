"""
Contact action endpoint.

Flow:
    1. Parses JSON body {contactId, action, data}
    2. Calls listman.actions.dispatch()
    3. Maps the envelope's errorKind onto an HTTP status
"""

from __future__ import annotations

import json
import logging

from django.http import JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from listman.actions import dispatch

logger = logging.getLogger("listman.views")

STATUS_BY_KIND = {
    "BadRequest": 400,
    "NotFound": 404,
    "Conflict": 409,
}


@method_decorator(csrf_exempt, name="dispatch")
class ContactActionView(View):
    """
    PUT endpoint for contact membership actions.

    Expects a JSON body:
        {"contactId": "c-123", "action": "addToList", "data": {"listId": "news"}}
    """

    http_method_names = ["put"]

    def put(self, request):
        try:
            payload = json.loads(request.body)
        except (json.JSONDecodeError, ValueError):
            return JsonResponse(
                {"success": False, "message": "Invalid JSON", "errorKind": "BadRequest"},
                status=400,
            )
        if not isinstance(payload, dict):
            return JsonResponse(
                {
                    "success": False,
                    "message": "Request body must be an object",
                    "errorKind": "BadRequest",
                },
                status=400,
            )

        try:
            envelope = dispatch(payload)
        except Exception:
            logger.exception("Contact action %s failed", payload.get("action"))
            return JsonResponse(
                {"success": False, "message": "Internal server error"},
                status=500,
            )

        if envelope["success"]:
            return JsonResponse(envelope)

        logger.warning(
            "Contact action %s rejected: %s",
            payload.get("action"),
            envelope["message"],
        )
        return JsonResponse(envelope, status=STATUS_BY_KIND.get(envelope["errorKind"], 400))
