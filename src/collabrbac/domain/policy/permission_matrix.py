"""Permission matrix - single source of truth for role capabilities.

Every grant a role carries unconditionally lives in ``ROLE_PERMISSIONS``.
Capabilities a role only has in some situations (collaborators completing
items assigned to them) live in ``CONDITIONAL_PERMISSIONS`` and are resolved
by the contextual authorizer, never by a plain lookup.
"""

from collections.abc import Iterable

from collabrbac.domain.value_objects import Permission, Role

P = Permission

_VIEWER: frozenset[Permission] = frozenset({P.VIEW})

_COLLABORATOR: frozenset[Permission] = _VIEWER | {
    P.EXPORT,
    P.UPDATE_PROGRESS,
    P.ADD_RESOURCES,
    P.CHECK_IN,
}

_ADMIN: frozenset[Permission] = _COLLABORATOR | {
    P.EDIT,
    P.SHARE,
    P.ARCHIVE,
    P.RESTORE,
    P.MANAGE_COLLABORATORS,
    P.ADD_MILESTONES,
    P.DELETE_MILESTONES,
    P.DELETE_RESOURCES,
    P.COMPLETE,
    P.REOPEN,
    P.MANAGE_RISKS,
}

_CREATOR: frozenset[Permission] = _ADMIN | {P.DELETE, P.MANAGE_ROLES}

ROLE_PERMISSIONS: dict[Role, frozenset[Permission]] = {
    Role.CREATOR: _CREATOR,
    Role.ADMIN: _ADMIN,
    Role.COLLABORATOR: _COLLABORATOR,
    Role.VIEWER: _VIEWER,
}

CONDITIONAL_PERMISSIONS: dict[Role, frozenset[Permission]] = {
    Role.COLLABORATOR: frozenset({P.COMPLETE}),
}


def capabilities(role: Role | str | None) -> frozenset[Permission]:
    """Permissions role holds unconditionally. Unknown roles hold none."""
    parsed = Role.parse(role)
    if parsed is None:
        return frozenset()
    return ROLE_PERMISSIONS[parsed]


def conditional_capabilities(role: Role | str | None) -> frozenset[Permission]:
    parsed = Role.parse(role)
    if parsed is None:
        return frozenset()
    return CONDITIONAL_PERMISSIONS.get(parsed, frozenset())


def has(role: Role | str | None, permission: Permission) -> bool:
    return permission in capabilities(role)


def has_any(role: Role | str | None, permissions: Iterable[Permission]) -> bool:
    caps = capabilities(role)
    return any(p in caps for p in permissions)


def has_all(role: Role | str | None, permissions: Iterable[Permission]) -> bool:
    """AND over permissions. An unknown role never passes, even for an empty list."""
    if Role.parse(role) is None:
        return False
    caps = capabilities(role)
    return all(p in caps for p in permissions)


def role_permissions(role: Role | str | None) -> list[Permission]:
    """Granted permissions in declaration order, for listings."""
    caps = capabilities(role)
    return [p for p in Permission if p in caps]


def can_edit(role: Role | str | None) -> bool:
    return has(role, P.EDIT)


def can_delete(role: Role | str | None) -> bool:
    return has(role, P.DELETE)


def can_manage_collaborators(role: Role | str | None) -> bool:
    return has(role, P.MANAGE_COLLABORATORS)


def can_manage_milestones(role: Role | str | None) -> bool:
    return has_all(role, [P.ADD_MILESTONES, P.DELETE_MILESTONES])


def can_manage_resources(role: Role | str | None) -> bool:
    return has_all(role, [P.ADD_RESOURCES, P.DELETE_RESOURCES])


def can_archive(role: Role | str | None) -> bool:
    return has(role, P.ARCHIVE)


def can_update_progress(role: Role | str | None) -> bool:
    return has(role, P.UPDATE_PROGRESS)


def is_creator_or_admin(role: Role | str | None) -> bool:
    return Role.parse(role) in (Role.CREATOR, Role.ADMIN)


def is_read_only(role: Role | str | None) -> bool:
    return Role.parse(role) == Role.VIEWER
