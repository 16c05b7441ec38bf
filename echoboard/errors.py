"""Domain error kinds raised by the membership directory.

Every error carries the entity ids and constraint names needed to build a
user-facing message upstream. Nothing in the core catches these; the HTTP
layer maps them to status codes in ``echoboard.app.errors``.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError


class EchoBoardError(Exception):
    """Base class for all domain failures."""

    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def context(self) -> dict[str, Any]:
        """Structured details for the error, excluding the message."""
        return {}


class ValidationError(EchoBoardError):
    """A field-level constraint on User or Project was violated."""

    kind = "validation_error"

    def __init__(
        self,
        entity: str,
        field: str,
        constraint: str,
        message: Optional[str] = None,
    ):
        super().__init__(message or f"Invalid {entity} {field}: {constraint}")
        self.entity = entity
        self.field = field
        self.constraint = constraint

    def context(self) -> dict[str, Any]:
        return {
            "entity": self.entity,
            "field": self.field,
            "constraint": self.constraint,
        }

    @classmethod
    def from_pydantic(
        cls, entity: str, exc: PydanticValidationError
    ) -> ValidationError:
        """Convert the first pydantic error into a domain ValidationError."""
        first = exc.errors()[0]
        loc = first.get("loc") or ("__root__",)
        field = str(loc[0])
        return cls(
            entity=entity,
            field=field,
            constraint=first.get("type", "invalid"),
            message=f"Invalid {entity} {field}: {first.get('msg', 'invalid value')}",
        )


class DuplicateMembership(EchoBoardError):
    """A membership row already exists for the (project, user) pair."""

    kind = "duplicate_membership"

    def __init__(self, project_id: Optional[int], user_id: Optional[int]):
        super().__init__(
            f"User {user_id} already has a membership in project {project_id}"
        )
        self.project_id = project_id
        self.user_id = user_id

    def context(self) -> dict[str, Any]:
        return {"project_id": self.project_id, "user_id": self.user_id}


class CapacityExceeded(EchoBoardError):
    """The project already has ``max_members`` active members."""

    kind = "capacity_exceeded"

    def __init__(self, project_id: Optional[int], max_members: int):
        super().__init__(
            f"Project {project_id} has reached its limit of {max_members} members"
        )
        self.project_id = project_id
        self.max_members = max_members

    def context(self) -> dict[str, Any]:
        return {"project_id": self.project_id, "max_members": self.max_members}


class InvalidStateTransition(EchoBoardError):
    """An operation was invoked against an entity in a state that forbids it."""

    kind = "invalid_state_transition"

    def __init__(
        self,
        entity: str,
        entity_id: Optional[int],
        current: str,
        attempted: str,
    ):
        super().__init__(f"Cannot {attempted} {entity} {entity_id} while {current}")
        self.entity = entity
        self.entity_id = entity_id
        self.current = current
        self.attempted = attempted

    def context(self) -> dict[str, Any]:
        return {
            "entity": self.entity,
            "entity_id": self.entity_id,
            "current": self.current,
            "attempted": self.attempted,
        }


class NotFound(EchoBoardError):
    """A referenced user, project, or membership does not exist."""

    kind = "not_found"

    def __init__(self, entity: str, entity_id: Any):
        super().__init__(f"{entity.capitalize()} '{entity_id}' not found")
        self.entity = entity
        self.entity_id = entity_id

    def context(self) -> dict[str, Any]:
        return {"entity": self.entity, "entity_id": self.entity_id}
