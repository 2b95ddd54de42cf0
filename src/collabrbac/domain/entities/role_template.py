"""Role template - reusable collaborator to role mapping."""

from dataclasses import dataclass, field

from collabrbac.domain.exceptions import ValidationError
from collabrbac.domain.value_objects import Role


@dataclass(frozen=True)
class RoleTemplate:
    """Named bundle of role assignments. Never assigns the creator role."""

    id: str
    name: str
    description: str = ""
    role_assignments: dict[str, Role] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.id or not self.name:
            raise ValidationError("Role template requires id and name")
        for collaborator_id, role in self.role_assignments.items():
            if role == Role.CREATOR:
                raise ValidationError(
                    f"Role template {self.id} cannot assign creator to {collaborator_id}"
                )
