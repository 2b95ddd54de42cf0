"""Capabilities that can be granted on a shared item."""

from enum import StrEnum


class Permission(StrEnum):
    """Item-type independent capabilities."""

    VIEW = "view"
    EDIT = "edit"
    DELETE = "delete"
    SHARE = "share"
    EXPORT = "export"
    ARCHIVE = "archive"
    RESTORE = "restore"
    MANAGE_COLLABORATORS = "manage_collaborators"
    MANAGE_ROLES = "manage_roles"
    UPDATE_PROGRESS = "update_progress"
    ADD_MILESTONES = "add_milestones"
    DELETE_MILESTONES = "delete_milestones"
    ADD_RESOURCES = "add_resources"
    DELETE_RESOURCES = "delete_resources"
    COMPLETE = "complete"
    REOPEN = "reopen"
    CHECK_IN = "check_in"
    MANAGE_RISKS = "manage_risks"
