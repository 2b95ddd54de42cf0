"""Collaborator roles and their hierarchy."""

from enum import StrEnum


class Role(StrEnum):
    """Roles a collaborator can hold on a shared item."""

    CREATOR = "creator"
    ADMIN = "admin"
    COLLABORATOR = "collaborator"
    VIEWER = "viewer"

    @classmethod
    def parse(cls, value: "str | Role | None") -> "Role | None":
        """Return the role for value, or None when it names no known role."""
        if value is None:
            return None
        try:
            return cls(str(value).lower())
        except ValueError:
            return None

    @property
    def rank(self) -> int:
        return _RANKS[self]


_RANKS: dict[Role, int] = {
    Role.CREATOR: 4,
    Role.ADMIN: 3,
    Role.COLLABORATOR: 2,
    Role.VIEWER: 1,
}

#: Roles ordered from most to least privileged.
ROLE_HIERARCHY: tuple[Role, ...] = (
    Role.CREATOR,
    Role.ADMIN,
    Role.COLLABORATOR,
    Role.VIEWER,
)

#: Roles that may be handed out through invites, staged changes and templates.
ASSIGNABLE_ROLES: frozenset[Role] = frozenset(
    {Role.ADMIN, Role.COLLABORATOR, Role.VIEWER}
)


def is_higher_role(role: Role, other: Role) -> bool:
    """True when role strictly outranks other."""
    return role.rank > other.rank
