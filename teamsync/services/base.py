"""Helpers shared by the resource services."""

from typing import TypeVar

from teamsync.core.authorization import Operation, ResourceKind, ensure_resource_access
from teamsync.core.exceptions import NotFoundException
from teamsync.models.actor import SessionUser
from teamsync.repositories.base import ScopedRepository

EntityT = TypeVar("EntityT")


def get_accessible(
    repo: ScopedRepository[EntityT],
    kind: ResourceKind,
    entity_id: str,
    actor: SessionUser,
    operation: Operation,
) -> EntityT:
    """
    Fetch an entity and check the actor may perform the operation on it.

    Existence is checked first: a missing id is NOT_FOUND for every
    actor, a super admin included, and never FORBIDDEN.

    Raises:
        NotFoundException: If no entity has this id
        ForbiddenException: If the entity is outside the actor's scope
    """
    entity = repo.get_by_id(entity_id)
    if entity is None:
        raise NotFoundException(f"{kind.value.capitalize()} {entity_id} not found")
    ensure_resource_access(actor, kind, operation, repo.scope_of(entity))
    return entity


def apply_changes(entity: object, changes: dict) -> None:
    for field, value in changes.items():
        setattr(entity, field, value)
