import pytest

from teamsync.core.authorization import (
    ListScope,
    Operation,
    ResourceKind,
    ResourceScope,
    TENANT_SCOPED_KINDS,
    authorize_resource_access,
    can,
    can_create,
    ensure_fields_writable,
    ensure_resource_access,
    may_reset_password,
    require,
    resolve_list_scope,
    resolve_target_tenant,
)
from teamsync.core.exceptions import ForbiddenException, TenantIdRequiredException
from teamsync.models.actor import SessionUser
from teamsync.models.role import UserRole

SUPER = SessionUser(id="sa", role=UserRole.SUPER_ADMIN)
TENANT_ADMIN = SessionUser(id="ta", role=UserRole.TENANT_ADMIN, tenant_id="t1")
ORPHAN_TENANT_ADMIN = SessionUser(id="ta-x", role=UserRole.TENANT_ADMIN)
CLIENT_ADMIN = SessionUser(id="ca", role=UserRole.CLIENT_ADMIN, client_id="c1")
ORPHAN_CLIENT_ADMIN = SessionUser(id="ca-x", role=UserRole.CLIENT_ADMIN)
EMPLOYEE = SessionUser(id="e1", role=UserRole.EMPLOYEE, tenant_id="t1")


class TestCapabilities:
    """Role-only capability predicates"""

    @pytest.mark.parametrize("kind", list(ResourceKind))
    @pytest.mark.parametrize("operation", list(Operation))
    def test_super_admin_can_do_everything(self, kind, operation):
        assert can(SUPER, kind, operation)

    @pytest.mark.parametrize("kind", sorted(TENANT_SCOPED_KINDS))
    def test_tenant_admin_creates_tenant_scoped_kinds(self, kind):
        assert can_create(TENANT_ADMIN, kind)

    def test_tenant_admin_cannot_create_or_delete_tenants(self):
        assert not can_create(TENANT_ADMIN, ResourceKind.TENANT)
        assert not can(TENANT_ADMIN, ResourceKind.TENANT, Operation.DELETE)
        assert can(TENANT_ADMIN, ResourceKind.TENANT, Operation.UPDATE)

    def test_plans_are_read_only_below_super_admin(self):
        for actor in (TENANT_ADMIN, CLIENT_ADMIN, EMPLOYEE):
            assert can(actor, ResourceKind.PLAN, Operation.READ)
            assert not can(actor, ResourceKind.PLAN, Operation.CREATE)

    def test_client_admin_manages_branches_only(self):
        assert can_create(CLIENT_ADMIN, ResourceKind.BRANCH)
        assert can(CLIENT_ADMIN, ResourceKind.BRANCH, Operation.UPDATE)
        assert not can(CLIENT_ADMIN, ResourceKind.BRANCH, Operation.DELETE)
        assert not can_create(CLIENT_ADMIN, ResourceKind.CLIENT)
        assert not can_create(CLIENT_ADMIN, ResourceKind.EVENT)
        assert can(CLIENT_ADMIN, ResourceKind.EVENT, Operation.LIST)

    def test_employee_capabilities(self):
        assert can(EMPLOYEE, ResourceKind.ASSIGNMENT, Operation.UPDATE)
        assert can(EMPLOYEE, ResourceKind.EMPLOYEE, Operation.READ)
        assert not can(EMPLOYEE, ResourceKind.EMPLOYEE, Operation.LIST)
        assert not can_create(EMPLOYEE, ResourceKind.ASSIGNMENT)
        assert not can(EMPLOYEE, ResourceKind.CLIENT, Operation.READ)

    def test_require_names_role_and_operation(self):
        with pytest.raises(ForbiddenException) as exc_info:
            require(EMPLOYEE, ResourceKind.CLIENT, Operation.DELETE)
        assert "employee" in exc_info.value.message
        assert exc_info.value.code == "FORBIDDEN"


class TestListScope:
    """Forced list filters"""

    def test_tenant_admin_forced_to_own_tenant(self):
        forced = resolve_list_scope(TENANT_ADMIN, ResourceKind.CLIENT, ListScope(tenant_id="t2"))
        assert forced == ListScope(tenant_id="t1")

    def test_client_admin_forced_to_own_client(self):
        forced = resolve_list_scope(CLIENT_ADMIN, ResourceKind.EVENT)
        assert forced == ListScope(client_id="c1")

    def test_employee_forced_to_own_assignments(self):
        forced = resolve_list_scope(EMPLOYEE, ResourceKind.ASSIGNMENT)
        assert forced == ListScope(employee_id="e1")

    def test_super_admin_requires_tenant_for_tenant_scoped_kinds(self):
        with pytest.raises(TenantIdRequiredException) as exc_info:
            resolve_list_scope(SUPER, ResourceKind.CLIENT)
        assert exc_info.value.code == "TENANT_ID_REQUIRED"
        assert exc_info.value.status_code == 400

    def test_super_admin_with_tenant_filter_is_unconstrained(self):
        assert resolve_list_scope(SUPER, ResourceKind.CLIENT, ListScope(tenant_id="t2")).is_empty
        assert resolve_list_scope(SUPER, ResourceKind.BRANCH, ListScope(client_id="c9")).is_empty

    def test_super_admin_lists_tenants_and_plans_without_filter(self):
        assert resolve_list_scope(SUPER, ResourceKind.TENANT).is_empty
        assert resolve_list_scope(SUPER, ResourceKind.PLAN).is_empty

    def test_tenant_admin_without_tenant(self):
        with pytest.raises(ForbiddenException) as exc_info:
            resolve_list_scope(ORPHAN_TENANT_ADMIN, ResourceKind.CLIENT)
        assert exc_info.value.code == "NO_TENANT_ACCESS"

    def test_client_admin_without_client(self):
        with pytest.raises(ForbiddenException) as exc_info:
            resolve_list_scope(ORPHAN_CLIENT_ADMIN, ResourceKind.BRANCH)
        assert exc_info.value.code == "NO_CLIENT_ACCESS"

    def test_role_without_list_grant(self):
        with pytest.raises(ForbiddenException):
            resolve_list_scope(EMPLOYEE, ResourceKind.CLIENT)

    def test_conditions_skip_unset_keys(self):
        assert ListScope(tenant_id="t1").conditions() == {"tenant_id": "t1"}
        assert ListScope().is_empty


class TestResourceAccess:
    """Single-resource scope comparison"""

    def test_tenant_admin_matches_tenant(self):
        scope = ResourceScope(tenant_id="t1", client_id="c1")
        assert authorize_resource_access(TENANT_ADMIN, ResourceKind.CLIENT, Operation.READ, scope)
        assert not authorize_resource_access(
            TENANT_ADMIN, ResourceKind.CLIENT, Operation.READ, ResourceScope(tenant_id="t2")
        )

    def test_client_admin_matches_client(self):
        assert authorize_resource_access(
            CLIENT_ADMIN, ResourceKind.BRANCH, Operation.UPDATE, ResourceScope(tenant_id="t1", client_id="c1")
        )
        assert not authorize_resource_access(
            CLIENT_ADMIN, ResourceKind.BRANCH, Operation.UPDATE, ResourceScope(tenant_id="t1", client_id="c2")
        )

    def test_employee_matches_own_id(self):
        own = ResourceScope(tenant_id="t1", employee_id="e1")
        other = ResourceScope(tenant_id="t1", employee_id="e2")
        assert authorize_resource_access(EMPLOYEE, ResourceKind.ASSIGNMENT, Operation.UPDATE, own)
        assert not authorize_resource_access(EMPLOYEE, ResourceKind.ASSIGNMENT, Operation.UPDATE, other)

    def test_missing_resource_scope_never_matches(self):
        assert not authorize_resource_access(
            TENANT_ADMIN, ResourceKind.BRANCH, Operation.READ, ResourceScope()
        )

    def test_super_admin_matches_anything(self):
        assert authorize_resource_access(SUPER, ResourceKind.INVOICE, Operation.DELETE, ResourceScope(tenant_id="t9"))

    def test_ensure_raises_forbidden_on_mismatch(self):
        with pytest.raises(ForbiddenException) as exc_info:
            ensure_resource_access(
                TENANT_ADMIN, ResourceKind.EVENT, Operation.READ, ResourceScope(tenant_id="t2")
            )
        assert exc_info.value.code == "FORBIDDEN"

    def test_ensure_reports_missing_scope_id(self):
        with pytest.raises(ForbiddenException) as exc_info:
            ensure_resource_access(
                ORPHAN_CLIENT_ADMIN, ResourceKind.BRANCH, Operation.READ, ResourceScope(client_id="c1")
            )
        assert exc_info.value.code == "NO_CLIENT_ACCESS"


class TestFieldRestrictions:
    def test_client_admin_cannot_set_supervisor(self):
        with pytest.raises(ForbiddenException) as exc_info:
            ensure_fields_writable(CLIENT_ADMIN, ResourceKind.BRANCH, {"name": "x", "supervisor_id": "u1"})
        assert "supervisor_id" in exc_info.value.message

    def test_tenant_admin_may_set_supervisor(self):
        ensure_fields_writable(TENANT_ADMIN, ResourceKind.BRANCH, {"supervisor_id": "u1"})

    def test_employee_may_only_send_assignment_status(self):
        ensure_fields_writable(EMPLOYEE, ResourceKind.ASSIGNMENT, {"status": "accepted"})
        with pytest.raises(ForbiddenException):
            ensure_fields_writable(EMPLOYEE, ResourceKind.ASSIGNMENT, {"status": "accepted", "end_date": None})

    def test_employee_profile_restrictions(self):
        ensure_fields_writable(EMPLOYEE, ResourceKind.EMPLOYEE, {"name": "New", "phone": "1"})
        with pytest.raises(ForbiddenException):
            ensure_fields_writable(EMPLOYEE, ResourceKind.EMPLOYEE, {"is_active": False})

    def test_tenant_admin_cannot_reassign_tenant_admin(self):
        with pytest.raises(ForbiddenException):
            ensure_fields_writable(TENANT_ADMIN, ResourceKind.TENANT, {"admin_id": "someone"})


class TestTargetTenant:
    def test_super_admin_must_name_tenant(self):
        with pytest.raises(TenantIdRequiredException):
            resolve_target_tenant(SUPER, None)
        assert resolve_target_tenant(SUPER, "t2") == "t2"

    def test_tenant_admin_defaults_to_own_tenant(self):
        assert resolve_target_tenant(TENANT_ADMIN, None) == "t1"
        assert resolve_target_tenant(TENANT_ADMIN, "t1") == "t1"

    def test_tenant_admin_cannot_target_foreign_tenant(self):
        with pytest.raises(ForbiddenException):
            resolve_target_tenant(TENANT_ADMIN, "t2")

    def test_other_roles_cannot_create_top_level_resources(self):
        with pytest.raises(ForbiddenException):
            resolve_target_tenant(CLIENT_ADMIN, "t1")
        with pytest.raises(ForbiddenException):
            resolve_target_tenant(EMPLOYEE, None)


class TestActivityLogAccess:
    def test_super_admin_lists_all_activity(self):
        assert resolve_list_scope(SUPER, ResourceKind.ACTIVITY_LOG).is_empty

    def test_tenant_admin_sees_own_tenant_activity(self):
        forced = resolve_list_scope(TENANT_ADMIN, ResourceKind.ACTIVITY_LOG, ListScope(tenant_id="t2"))
        assert forced == ListScope(tenant_id="t1")

    def test_others_see_own_activity(self):
        assert resolve_list_scope(CLIENT_ADMIN, ResourceKind.ACTIVITY_LOG) == ListScope(employee_id="ca")
        assert resolve_list_scope(EMPLOYEE, ResourceKind.ACTIVITY_LOG) == ListScope(employee_id="e1")

    def test_only_super_admin_deletes_activity(self):
        assert can(SUPER, ResourceKind.ACTIVITY_LOG, Operation.DELETE)
        for actor in (TENANT_ADMIN, CLIENT_ADMIN, EMPLOYEE):
            assert not can(actor, ResourceKind.ACTIVITY_LOG, Operation.DELETE)
            assert not can_create(actor, ResourceKind.ACTIVITY_LOG)


class TestPasswordReset:
    def test_super_admin_resets_anyone(self):
        assert may_reset_password(SUPER, UserRole.TENANT_ADMIN, ResourceScope(tenant_id="t2"))

    @pytest.mark.parametrize("role", [UserRole.EMPLOYEE, UserRole.CLIENT_ADMIN])
    def test_tenant_admin_resets_own_tenant_users(self, role):
        assert may_reset_password(TENANT_ADMIN, role, ResourceScope(tenant_id="t1"))
        assert not may_reset_password(TENANT_ADMIN, role, ResourceScope(tenant_id="t2"))

    def test_tenant_admin_cannot_reset_admins(self):
        assert not may_reset_password(TENANT_ADMIN, UserRole.TENANT_ADMIN, ResourceScope(tenant_id="t1"))
        assert not may_reset_password(TENANT_ADMIN, UserRole.SUPER_ADMIN, ResourceScope())

    def test_orphan_tenant_admin_resets_nobody(self):
        assert not may_reset_password(ORPHAN_TENANT_ADMIN, UserRole.EMPLOYEE, ResourceScope())

    def test_client_admin_and_employee_never_reset(self):
        assert not may_reset_password(CLIENT_ADMIN, UserRole.EMPLOYEE, ResourceScope(client_id="c1"))
        assert not may_reset_password(EMPLOYEE, UserRole.EMPLOYEE, ResourceScope(tenant_id="t1"))
