"""
Listman Gates - Validation rules checked before any mutation.

M1: IdentifierFormat - Codes are non-empty slugs
M2: IdentifierList - Batch arguments are lists of well-formed codes
M3: DistinctTransfer - A transfer moves between two different lists
M4: SingleMembership - Max 1 active association per (contact, list)
M5: EngagementDeltas - Engagement deltas are non-negative integers
"""

from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_slug

from listman.exceptions import ConflictError, ListmanError, ValidationError


class Gates:
    """Listman validation gates."""

    # =========================================================================
    # M1: Identifier Format
    # =========================================================================

    @classmethod
    def identifier_format(cls, value, field: str = "id") -> str:
        """
        M1: Identifier must be a non-empty slug.

        Returns:
            The identifier, unchanged

        Raises:
            ValidationError: If value is not a well-formed code
        """
        if not isinstance(value, str) or not value:
            raise ValidationError(
                "INVALID_ID", message=f"Valid {field} is required", field=field
            )
        try:
            validate_slug(value)
        except DjangoValidationError:
            raise ValidationError(
                "INVALID_ID",
                message=f"Valid {field} is required",
                field=field,
                value=value,
            )
        return value

    @classmethod
    def check_identifier_format(cls, value, field: str = "id") -> bool:
        """Check without raising (returns bool)."""
        try:
            cls.identifier_format(value, field)
            return True
        except ListmanError:
            return False

    # =========================================================================
    # M2: Identifier List
    # =========================================================================

    @classmethod
    def identifier_list(cls, values, allow_empty: bool = True) -> list[str]:
        """
        M2: Batch argument must be a list of well-formed codes.

        Duplicates are dropped, first occurrence wins.

        Raises:
            ValidationError: If not a list, empty (when disallowed), or any
                element is malformed
        """
        if not isinstance(values, (list, tuple)):
            raise ValidationError("INVALID_LIST_IDS", message="listIds must be an array")
        if not values and not allow_empty:
            raise ValidationError("INVALID_LIST_IDS")

        invalid = [v for v in values if not cls.check_identifier_format(v)]
        if invalid:
            raise ValidationError(
                "INVALID_LIST_IDS",
                message="One or more invalid list IDs provided",
                invalid=[str(v) for v in invalid],
            )
        return list(dict.fromkeys(values))

    # =========================================================================
    # M3: Distinct Transfer
    # =========================================================================

    @classmethod
    def distinct_transfer(cls, old_list_code: str, new_list_code: str) -> None:
        """
        M3: Transfer source and target must differ.

        Raises:
            ValidationError: If both codes are equal
        """
        if old_list_code == new_list_code:
            raise ValidationError("SAME_LIST_TRANSFER", list_code=old_list_code)

    # =========================================================================
    # M4: Single Membership
    # =========================================================================

    @classmethod
    def single_membership(cls, contact, mailing_list) -> None:
        """
        M4: Contact may hold at most one active association per list.

        Raises:
            ConflictError: If the contact is already subscribed
        """
        if contact.list_associations.filter(mailing_list=mailing_list).exists():
            raise ConflictError(
                "ALREADY_SUBSCRIBED",
                contact_code=contact.code,
                list_code=mailing_list.code,
            )

    @classmethod
    def check_single_membership(cls, contact, mailing_list) -> bool:
        """Check without raising (returns bool)."""
        try:
            cls.single_membership(contact, mailing_list)
            return True
        except ListmanError:
            return False

    # =========================================================================
    # M5: Engagement Deltas
    # =========================================================================

    @classmethod
    def engagement_deltas(cls, **deltas) -> dict[str, int]:
        """
        M5: Each delta is a non-negative int (None counts as 0).

        Raises:
            ValidationError: On negative, fractional or non-numeric deltas
        """
        cleaned = {}
        for name, value in deltas.items():
            if value is None:
                value = 0
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValidationError("INVALID_ENGAGEMENT", field=name, value=value)
            cleaned[name] = value
        return cleaned
