"""Listman exceptions."""


class BaseError(Exception):
    """
    Structured exception carrying a machine-readable code.

    Usage:
        raise ListmanError("LIST_NOT_FOUND", list_code="newsletter")

    Subclasses provide ``_default_messages`` so callers only pass a code.
    """

    _default_messages: dict[str, str] = {}

    def __init__(self, code: str, message: str | None = None, **data):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(f"[{code}] {self.message}")

    def as_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "data": self.data}


class ListmanError(BaseError):
    """
    Structured exception for membership operations.

    ``kind`` maps the error onto the public taxonomy used in response
    envelopes (BadRequest, NotFound, Conflict).

    Usage:
        try:
            membership.add("C-001", "newsletter")
        except ListmanError as e:
            if e.kind == "Conflict":
                handle_duplicate()
    """

    kind = "Internal"
    status_code = 500

    _default_messages = {
        # BadRequest
        "INVALID_ID": "Valid identifier is required",
        "INVALID_LIST_IDS": "Valid array of list IDs is required",
        "SAME_LIST_TRANSFER": "Current and new list must differ",
        "UNKNOWN_LISTS": "One or more lists not found",
        "INVALID_ENGAGEMENT": "Engagement deltas must be non-negative integers",
        "INVALID_EMAIL": "Invalid email format",
        "INVALID_NAME": "Full name is required",
        "INVALID_ACTION": "Invalid action specified",
        "INVALID_SOURCE": "Invalid subscription source",
        # NotFound
        "CONTACT_NOT_FOUND": "Contact not found",
        "LIST_NOT_FOUND": "List not found",
        "AUTOMATION_NOT_FOUND": "Automation not found",
        "LIST_MEMBERSHIP_NOT_FOUND": "Contact is not in this list",
        # Conflict
        "ALREADY_SUBSCRIBED": "Contact is already in this list",
        "CONTACT_EXISTS": "Contact with this email already exists",
    }

    def as_dict(self) -> dict:
        d = super().as_dict()
        d["kind"] = self.kind
        return d


class ValidationError(ListmanError):
    """Malformed input. Raised before any mutation."""

    kind = "BadRequest"
    status_code = 400


class NotFoundError(ListmanError):
    """Contact, list, automation or membership absent."""

    kind = "NotFound"
    status_code = 404


class ConflictError(ListmanError):
    """Duplicate active membership or contact."""

    kind = "Conflict"
    status_code = 409
