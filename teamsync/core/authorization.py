"""
Role and tenant scoping rules.

Every permission in the API is one entry of POLICIES, keyed by
(role, resource kind, operation). The value is the scope rule the actor
must satisfy against the resource's scope keys:

- GLOBAL: no comparison, any resource
- TENANT: actor.tenant_id == resource.tenant_id
- CLIENT: actor.client_id == resource.client_id
- SELF:   actor.id == resource.employee_id (the acting user for activity logs)

A missing entry means the operation is forbidden for that role. The
functions below only read the actor and an already-fetched scope; they
never touch the database.
"""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Iterable

from teamsync.core.exceptions import ForbiddenException, TenantIdRequiredException
from teamsync.models.actor import SessionUser
from teamsync.models.role import UserRole


class Operation(str, Enum):
    LIST = "list"
    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class ResourceKind(str, Enum):
    TENANT = "tenant"
    CLIENT = "client"
    BRANCH = "branch"
    EMPLOYEE = "employee"
    EVENT = "event"
    ASSIGNMENT = "assignment"
    CONTRACT = "contract"
    INVOICE = "invoice"
    PLAN = "plan"
    ACTIVITY_LOG = "activity_log"


class ScopeRule(str, Enum):
    GLOBAL = "global"
    TENANT = "tenant"
    CLIENT = "client"
    SELF = "self"


@dataclass(frozen=True)
class ResourceScope:
    """Scope keys of a single fetched resource."""

    tenant_id: str | None = None
    client_id: str | None = None
    employee_id: str | None = None


@dataclass(frozen=True)
class ListScope:
    """Equality conditions applied to a list query. None means unconstrained."""

    tenant_id: str | None = None
    client_id: str | None = None
    employee_id: str | None = None

    def conditions(self) -> dict[str, str]:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }

    @property
    def is_empty(self) -> bool:
        return not self.conditions()


ALL_OPERATIONS = frozenset(Operation)
READ_ONLY = frozenset({Operation.LIST, Operation.READ})

# Kinds whose list endpoints a super admin must narrow to one tenant
TENANT_SCOPED_KINDS = frozenset(
    {
        ResourceKind.CLIENT,
        ResourceKind.BRANCH,
        ResourceKind.EMPLOYEE,
        ResourceKind.EVENT,
        ResourceKind.ASSIGNMENT,
        ResourceKind.CONTRACT,
        ResourceKind.INVOICE,
    }
)

TENANT_ADMIN_KINDS = TENANT_SCOPED_KINDS


def _grant(
    role: UserRole,
    kinds: Iterable[ResourceKind],
    operations: Iterable[Operation],
    rule: ScopeRule,
) -> dict[tuple[UserRole, ResourceKind, Operation], ScopeRule]:
    return {(role, kind, op): rule for kind in kinds for op in operations}


POLICIES: dict[tuple[UserRole, ResourceKind, Operation], ScopeRule] = {
    **_grant(UserRole.SUPER_ADMIN, ResourceKind, ALL_OPERATIONS, ScopeRule.GLOBAL),
    # Tenant admin: full control inside its own tenant
    **_grant(UserRole.TENANT_ADMIN, TENANT_ADMIN_KINDS, ALL_OPERATIONS, ScopeRule.TENANT),
    **_grant(
        UserRole.TENANT_ADMIN,
        [ResourceKind.TENANT],
        [Operation.LIST, Operation.READ, Operation.UPDATE],
        ScopeRule.TENANT,
    ),
    **_grant(UserRole.TENANT_ADMIN, [ResourceKind.PLAN], READ_ONLY, ScopeRule.GLOBAL),
    **_grant(UserRole.TENANT_ADMIN, [ResourceKind.ACTIVITY_LOG], READ_ONLY, ScopeRule.TENANT),
    # Client admin: manages its branches, reads the rest of its client
    **_grant(
        UserRole.CLIENT_ADMIN,
        [ResourceKind.BRANCH],
        [Operation.LIST, Operation.READ, Operation.CREATE, Operation.UPDATE],
        ScopeRule.CLIENT,
    ),
    **_grant(
        UserRole.CLIENT_ADMIN,
        [
            ResourceKind.CLIENT,
            ResourceKind.EMPLOYEE,
            ResourceKind.EVENT,
            ResourceKind.ASSIGNMENT,
            ResourceKind.CONTRACT,
            ResourceKind.INVOICE,
        ],
        READ_ONLY,
        ScopeRule.CLIENT,
    ),
    **_grant(UserRole.CLIENT_ADMIN, [ResourceKind.PLAN], READ_ONLY, ScopeRule.GLOBAL),
    **_grant(UserRole.CLIENT_ADMIN, [ResourceKind.ACTIVITY_LOG], READ_ONLY, ScopeRule.SELF),
    # Employee: own profile and own assignments
    **_grant(
        UserRole.EMPLOYEE,
        [ResourceKind.EMPLOYEE],
        [Operation.READ, Operation.UPDATE],
        ScopeRule.SELF,
    ),
    **_grant(
        UserRole.EMPLOYEE,
        [ResourceKind.ASSIGNMENT],
        [Operation.LIST, Operation.READ, Operation.UPDATE],
        ScopeRule.SELF,
    ),
    **_grant(UserRole.EMPLOYEE, [ResourceKind.PLAN], READ_ONLY, ScopeRule.GLOBAL),
    **_grant(UserRole.EMPLOYEE, [ResourceKind.ACTIVITY_LOG], READ_ONLY, ScopeRule.SELF),
}

# Fields a role may never write even when it may update the resource
RESTRICTED_FIELDS: dict[tuple[UserRole, ResourceKind], frozenset[str]] = {
    (UserRole.CLIENT_ADMIN, ResourceKind.BRANCH): frozenset({"supervisor_id"}),
    (UserRole.TENANT_ADMIN, ResourceKind.TENANT): frozenset({"admin_id"}),
    (UserRole.EMPLOYEE, ResourceKind.EMPLOYEE): frozenset({"branch_id", "is_active", "email"}),
}

# Fields that are the only writable ones for a role
WRITABLE_FIELDS: dict[tuple[UserRole, ResourceKind], frozenset[str]] = {
    (UserRole.EMPLOYEE, ResourceKind.ASSIGNMENT): frozenset({"status"}),
}


def policy_for(actor: SessionUser, kind: ResourceKind, operation: Operation) -> ScopeRule | None:
    """Return the scope rule granting the operation, or None if not granted."""
    return POLICIES.get((actor.role, kind, operation))


def can(actor: SessionUser, kind: ResourceKind, operation: Operation) -> bool:
    """Role-only capability check: does any scope allow this operation?"""
    return policy_for(actor, kind, operation) is not None


def can_create(actor: SessionUser, kind: ResourceKind) -> bool:
    return can(actor, kind, Operation.CREATE)


def require(actor: SessionUser, kind: ResourceKind, operation: Operation) -> ScopeRule:
    """
    Return the scope rule for an operation, raising if the role lacks it.

    Raises:
        ForbiddenException: If the role has no grant for (kind, operation)
    """
    rule = policy_for(actor, kind, operation)
    if rule is None:
        raise ForbiddenException(
            f"Role {actor.role.value} cannot {operation.value} {kind.value} resources"
        )
    return rule


def _ensure_scope_id(actor: SessionUser, rule: ScopeRule) -> None:
    if rule == ScopeRule.TENANT and not actor.tenant_id:
        raise ForbiddenException("User not associated with a tenant", code="NO_TENANT_ACCESS")
    if rule == ScopeRule.CLIENT and not actor.client_id:
        raise ForbiddenException("User not associated with a client", code="NO_CLIENT_ACCESS")


def _matches(actor: SessionUser, rule: ScopeRule, scope: ResourceScope) -> bool:
    if rule == ScopeRule.GLOBAL:
        return True
    if rule == ScopeRule.TENANT:
        return actor.tenant_id is not None and actor.tenant_id == scope.tenant_id
    if rule == ScopeRule.CLIENT:
        return actor.client_id is not None and actor.client_id == scope.client_id
    if rule == ScopeRule.SELF:
        return actor.id == scope.employee_id
    return False


def resolve_list_scope(
    actor: SessionUser,
    kind: ResourceKind,
    requested: ListScope | None = None,
) -> ListScope:
    """
    Compute the forced filter for a list query.

    The returned scope is always ANDed with the caller's own filters by
    the repository, so request input can narrow a listing but never
    widen it.

    Raises:
        ForbiddenException: If the role cannot list this kind, or lacks
            the tenant/client id its scope rule needs
        TenantIdRequiredException: If a super admin lists tenant-scoped
            data without naming a tenant (or client)
    """
    requested = requested or ListScope()
    rule = require(actor, kind, Operation.LIST)

    if rule == ScopeRule.GLOBAL:
        if kind in TENANT_SCOPED_KINDS and not (requested.tenant_id or requested.client_id):
            raise TenantIdRequiredException("tenantId required for super_admin")
        return ListScope()

    _ensure_scope_id(actor, rule)
    if rule == ScopeRule.TENANT:
        return ListScope(tenant_id=actor.tenant_id)
    if rule == ScopeRule.CLIENT:
        return ListScope(client_id=actor.client_id)
    return ListScope(employee_id=actor.id)


def authorize_resource_access(
    actor: SessionUser,
    kind: ResourceKind,
    operation: Operation,
    scope: ResourceScope,
) -> bool:
    """Whether the actor may perform the operation on a resource with this scope."""
    rule = policy_for(actor, kind, operation)
    if rule is None:
        return False
    return _matches(actor, rule, scope)


def ensure_resource_access(
    actor: SessionUser,
    kind: ResourceKind,
    operation: Operation,
    scope: ResourceScope,
) -> None:
    """
    Raise unless the actor may perform the operation on the resource.

    Callers must have confirmed the resource exists first, so that a
    missing id is reported as NOT_FOUND and never as FORBIDDEN.
    """
    rule = require(actor, kind, operation)
    _ensure_scope_id(actor, rule)
    if not _matches(actor, rule, scope):
        raise ForbiddenException(f"Access to this {kind.value} is not allowed")


def ensure_fields_writable(actor: SessionUser, kind: ResourceKind, field_names: Iterable[str]) -> None:
    """
    Raise if the actor tries to write a field its role may not change.

    Raises:
        ForbiddenException: Naming the first offending field
    """
    names = set(field_names)
    restricted = RESTRICTED_FIELDS.get((actor.role, kind), frozenset())
    writable = WRITABLE_FIELDS.get((actor.role, kind))

    blocked = names & restricted
    if writable is not None:
        blocked |= names - writable

    if blocked:
        field = sorted(blocked)[0]
        raise ForbiddenException(f"Role {actor.role.value} cannot set {field} on {kind.value}")


def resolve_target_tenant(actor: SessionUser, requested_tenant_id: str | None) -> str:
    """
    Decide which tenant a new top-level resource is created in.

    Super admins must name the tenant. Tenant admins always write into
    their own tenant and may not name a different one.

    Raises:
        TenantIdRequiredException: Super admin without tenant id
        ForbiddenException: Any other role, or a foreign tenant id
    """
    if actor.is_super_admin:
        if not requested_tenant_id:
            raise TenantIdRequiredException("tenantId required for super_admin")
        return requested_tenant_id

    if actor.is_tenant_admin:
        _ensure_scope_id(actor, ScopeRule.TENANT)
        if requested_tenant_id and requested_tenant_id != actor.tenant_id:
            raise ForbiddenException("Cannot create resources for another tenant")
        return actor.tenant_id

    raise ForbiddenException("Insufficient permissions")


# Roles whose passwords a tenant admin may reset inside its own tenant
TENANT_ADMIN_RESETTABLE_ROLES = frozenset({UserRole.EMPLOYEE, UserRole.CLIENT_ADMIN})


def may_reset_password(actor: SessionUser, target_role: UserRole | None, scope: ResourceScope) -> bool:
    """
    Whether an admin may set another user's password without knowing it.

    Super admins may reset anyone. Tenant admins may reset employees and
    client admins whose tenant is their own. Self-service changes are
    not covered here: they always require the current password.
    """
    if actor.is_super_admin:
        return True
    if actor.is_tenant_admin:
        return (
            target_role in TENANT_ADMIN_RESETTABLE_ROLES
            and actor.tenant_id is not None
            and actor.tenant_id == scope.tenant_id
        )
    return False
