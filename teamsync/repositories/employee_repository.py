from sqlalchemy import or_
from sqlalchemy.orm import Query

from teamsync.core.authorization import ListScope, ResourceScope
from teamsync.models.branch import Branch
from teamsync.models.role import UserRole
from teamsync.models.tenant_membership import TenantMembership
from teamsync.models.user import User
from teamsync.repositories.base import ScopedRepository


class EmployeeRepository(ScopedRepository[User]):
    """
    Repository for employees: users with the employee role and a
    tenant membership.

    Scope keys come from the membership (tenant) and the membership's
    branch (client). An employee without a branch belongs to no client.
    """

    model = User

    def base_query(self) -> Query:
        return (
            self.db.query(User)
            .join(TenantMembership, TenantMembership.user_id == User.id)
            .outerjoin(Branch, TenantMembership.branch_id == Branch.id)
            .filter(User.role == UserRole.EMPLOYEE)
        )

    def scope_columns(self) -> dict:
        return {
            "tenant_id": TenantMembership.tenant_id,
            "client_id": Branch.client_id,
            "employee_id": User.id,
        }

    def scope_of(self, employee: User) -> ResourceScope:
        membership = employee.membership
        if membership is None:
            return ResourceScope(employee_id=employee.id)
        return ResourceScope(
            tenant_id=membership.tenant_id,
            client_id=membership.branch.client_id if membership.branch else None,
            employee_id=employee.id,
        )

    def get_by_id(self, entity_id: str) -> User | None:
        """Get an employee by id; other users are not employees"""
        return self.base_query().filter(User.id == entity_id).first()

    def get_with_filters(
        self,
        forced: ListScope,
        requested: ListScope,
        branch_id: str | None = None,
        is_active: bool | None = None,
        search: str | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[User], int]:
        """
        List employees inside the forced scope.

        Args:
            forced: Scope imposed by the actor's role
            requested: Caller supplied tenantId/clientId filters
            branch_id: Only employees placed at this branch
            is_active: Filter on the active flag
            search: Case-insensitive substring of name or email
            page: 1-based page
            limit: Page size

        Returns:
            Tuple of (employees, total count)
        """
        query = self.apply_scopes(self.base_query(), forced, requested)

        if branch_id is not None:
            query = query.filter(TenantMembership.branch_id == branch_id)

        if is_active is not None:
            query = query.filter(User.is_active == is_active)

        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(User.name.ilike(pattern), User.email.ilike(pattern)))

        query = query.order_by(User.created_at.desc(), User.id)
        return self.paginate(query, page, limit)
