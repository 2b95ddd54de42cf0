"""Reasons attached to denied authorization decisions."""

from enum import StrEnum


class DenialReason(StrEnum):
    """Why authorize returned False."""

    EXPIRED_GRANT = "expired_grant"
    UNKNOWN_ROLE = "unknown_role"
    NOT_IN_MATRIX = "not_in_matrix"
    NOT_ASSIGNED = "not_assigned"
    PRIVATE_ITEM = "private_item"
