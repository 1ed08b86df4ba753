from sqlalchemy.orm import Session

from teamsync.core.authorization import Operation, ResourceKind, require, resolve_list_scope
from teamsync.core.exceptions import DuplicateNameException, NotFoundException
from teamsync.core.identifiers import generate_id
from teamsync.models.actor import SessionUser
from teamsync.models.plan import Plan
from teamsync.repositories.plan_repository import PlanRepository
from teamsync.repositories.tenant_repository import TenantRepository
from teamsync.schemas.plan_schemas import PlanCreate, PlanUpdate
from teamsync.services.base import apply_changes


class PlanService:
    """
    Service layer for the plan catalogue.

    Plans are global: every role may read them, only super admins
    maintain them.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = PlanRepository(db)
        self.tenant_repo = TenantRepository(db)

    def list_plans(
        self,
        actor: SessionUser,
        is_active: bool | None = None,
        search: str | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[Plan], int]:
        resolve_list_scope(actor, ResourceKind.PLAN)
        return self.repo.get_with_filters(is_active=is_active, search=search, page=page, limit=limit)

    def _get(self, plan_id: str) -> Plan:
        plan = self.repo.get_by_id(plan_id)
        if plan is None:
            raise NotFoundException(f"Plan {plan_id} not found")
        return plan

    def get_plan(self, plan_id: str, actor: SessionUser) -> Plan:
        plan = self._get(plan_id)
        require(actor, ResourceKind.PLAN, Operation.READ)
        return plan

    def create_plan(self, data: PlanCreate, actor: SessionUser) -> Plan:
        require(actor, ResourceKind.PLAN, Operation.CREATE)
        if self.repo.name_exists(data.name):
            raise DuplicateNameException("plan", f"Plan '{data.name}' already exists")

        plan = Plan(id=generate_id("plan"), **data.model_dump())
        return self.repo.create(plan)

    def update_plan(self, plan_id: str, data: PlanUpdate, actor: SessionUser) -> Plan:
        plan = self._get(plan_id)
        require(actor, ResourceKind.PLAN, Operation.UPDATE)
        changes = data.model_dump(exclude_unset=True)

        for field in ("name", "price", "billing_cycle", "is_active"):
            if field in changes and changes[field] is None:
                changes.pop(field)

        if "name" in changes and self.repo.name_exists(changes["name"], exclude_id=plan.id):
            raise DuplicateNameException("plan", f"Plan '{changes['name']}' already exists")

        apply_changes(plan, changes)
        return self.repo.update(plan)

    def delete_plan(self, plan_id: str, actor: SessionUser) -> None:
        """Delete a plan; tenants on it fall back to no plan"""
        plan = self._get(plan_id)
        require(actor, ResourceKind.PLAN, Operation.DELETE)
        self.tenant_repo.clear_plan(plan.id)
        self.repo.delete(plan)
