from fastapi import BackgroundTasks
from sqlalchemy.orm import Session

from teamsync.core.authorization import (
    ListScope,
    Operation,
    ResourceKind,
    ensure_fields_writable,
    require,
    resolve_list_scope,
    resolve_target_tenant,
)
from teamsync.core.exceptions import (
    ForbiddenException,
    NotFoundException,
    ValidationException,
)
from teamsync.core.identifiers import generate_id
from teamsync.core.logging import get_logger
from teamsync.core.security import hash_password
from teamsync.database import transaction
from teamsync.integrations.email import EmailService
from teamsync.models.activity_log import ActivityType
from teamsync.models.actor import SessionUser
from teamsync.models.branch import Branch
from teamsync.models.role import UserRole
from teamsync.models.tenant_membership import TenantMembership
from teamsync.models.user import User
from teamsync.repositories.branch_repository import BranchRepository
from teamsync.repositories.employee_repository import EmployeeRepository
from teamsync.repositories.tenant_membership_repository import TenantMembershipRepository
from teamsync.repositories.tenant_repository import TenantRepository
from teamsync.repositories.user_repository import UserRepository
from teamsync.schemas.employee_schemas import EmployeeCreate, EmployeeUpdate
from teamsync.services.activity_log_service import record_activity
from teamsync.services.base import get_accessible

logger = get_logger(__name__)

USER_FIELDS = ("name", "email", "phone", "is_active")


class EmployeeService:
    """Service layer for employee onboarding and profiles"""

    def __init__(self, db: Session, email_service: EmailService | None = None):
        self.db = db
        self.repo = EmployeeRepository(db)
        self.user_repo = UserRepository(db)
        self.membership_repo = TenantMembershipRepository(db)
        self.tenant_repo = TenantRepository(db)
        self.branch_repo = BranchRepository(db)
        self.email_service = email_service or EmailService()

    def list_employees(
        self,
        actor: SessionUser,
        tenant_id: str | None = None,
        client_id: str | None = None,
        branch_id: str | None = None,
        is_active: bool | None = None,
        search: str | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[User], int]:
        requested = ListScope(tenant_id=tenant_id, client_id=client_id)
        forced = resolve_list_scope(actor, ResourceKind.EMPLOYEE, requested)
        return self.repo.get_with_filters(
            forced,
            requested,
            branch_id=branch_id,
            is_active=is_active,
            search=search,
            page=page,
            limit=limit,
        )

    def get_employee(self, employee_id: str, actor: SessionUser) -> User:
        return get_accessible(self.repo, ResourceKind.EMPLOYEE, employee_id, actor, Operation.READ)

    def _check_email(self, email: str, exclude_id: str | None = None) -> None:
        if self.user_repo.email_exists(email, exclude_id=exclude_id):
            raise ValidationException(
                f"Email {email} is already registered", code="DUPLICATE_EMPLOYEE_EMAIL"
            )

    def _branch_in_tenant(self, branch_id: str, tenant_id: str) -> Branch:
        branch = self.branch_repo.get_by_id(branch_id)
        if branch is None:
            raise NotFoundException(f"Branch {branch_id} not found")
        if branch.tenant_id != tenant_id:
            raise ForbiddenException("Branch belongs to another tenant")
        return branch

    def create_employee(
        self,
        data: EmployeeCreate,
        actor: SessionUser,
        background_tasks: BackgroundTasks,
    ) -> User:
        """
        Onboard an employee: user row and tenant membership together.

        The password is stored as a bcrypt hash. A welcome email is
        queued after the transaction commits; its outcome is only logged.

        Raises:
            ForbiddenException: Role cannot create employees, foreign
                tenant, or branch of another tenant
            TenantIdRequiredException: Super admin without tenant_id
            NotFoundException: Tenant or branch does not exist
            ValidationException: Email already registered
        """
        require(actor, ResourceKind.EMPLOYEE, Operation.CREATE)
        tenant_id = resolve_target_tenant(actor, data.tenant_id)

        if self.tenant_repo.get_by_id(tenant_id) is None:
            raise NotFoundException(f"Tenant {tenant_id} not found")
        if data.branch_id is not None:
            self._branch_in_tenant(data.branch_id, tenant_id)
        self._check_email(data.email)

        user = User(
            id=generate_id("user"),
            name=data.name,
            email=data.email,
            phone=data.phone,
            password_hash=hash_password(data.password),
            role=UserRole.EMPLOYEE,
            is_active=True,
        )
        membership = TenantMembership(
            id=generate_id("membership"),
            tenant_id=tenant_id,
            user_id=user.id,
            branch_id=data.branch_id,
        )

        with transaction(self.db):
            self.user_repo.add(user)
            self.membership_repo.add(membership)
            record_activity(
                self.db,
                ActivityType.EMPLOYEE_CREATED,
                user_id=actor.id,
                tenant_id=tenant_id,
                entity="employee",
                entity_id=user.id,
                details=user.email,
            )

        self.db.refresh(user)
        logger.info(f"Onboarded employee {user.id} into tenant {tenant_id}", extra={"actor_id": actor.id})
        background_tasks.add_task(self.email_service.send_welcome_email, user.email, user.name)
        return user

    def update_employee(self, employee_id: str, data: EmployeeUpdate, actor: SessionUser) -> User:
        """
        Update an employee profile (only provided fields).

        Employees may edit their own name and phone; email, branch and
        the active flag are admin fields.
        """
        employee = get_accessible(self.repo, ResourceKind.EMPLOYEE, employee_id, actor, Operation.UPDATE)
        changes = data.model_dump(exclude_unset=True)
        ensure_fields_writable(actor, ResourceKind.EMPLOYEE, changes)

        for field in ("name", "email", "is_active"):
            if field in changes and changes[field] is None:
                raise ValidationException(f"{field} cannot be null")

        if "email" in changes:
            self._check_email(changes["email"], exclude_id=employee.id)

        membership = employee.membership
        if "branch_id" in changes and changes["branch_id"] is not None:
            self._branch_in_tenant(changes["branch_id"], membership.tenant_id)

        with transaction(self.db):
            for field in USER_FIELDS:
                if field in changes:
                    setattr(employee, field, changes[field])
            if "branch_id" in changes:
                membership.branch_id = changes["branch_id"]

        self.db.refresh(employee)
        return employee

    def delete_employee(self, employee_id: str, actor: SessionUser) -> None:
        """Delete employee and its membership (cascade)"""
        employee = get_accessible(self.repo, ResourceKind.EMPLOYEE, employee_id, actor, Operation.DELETE)
        tenant_id = employee.tenant_id
        with transaction(self.db):
            self.db.delete(employee)
            record_activity(
                self.db,
                ActivityType.EMPLOYEE_DELETED,
                user_id=actor.id,
                tenant_id=tenant_id,
                entity="employee",
                entity_id=employee_id,
                details=employee.email,
            )
