from datetime import datetime

from sqlalchemy.orm import Session

from teamsync.core.authorization import (
    ListScope,
    Operation,
    ResourceKind,
    ensure_fields_writable,
    ensure_resource_access,
    require,
    resolve_list_scope,
)
from teamsync.core.exceptions import NotFoundException, ValidationException
from teamsync.core.identifiers import generate_id
from teamsync.models.actor import SessionUser
from teamsync.models.base import as_utc
from teamsync.models.contract import Contract, ContractStatus
from teamsync.repositories.client_repository import ClientRepository
from teamsync.repositories.contract_repository import ContractRepository
from teamsync.schemas.contract_schemas import ContractCreate, ContractUpdate
from teamsync.services.base import apply_changes, get_accessible


def _check_period(start_date: datetime, end_date: datetime | None) -> None:
    if end_date is not None and as_utc(end_date) <= as_utc(start_date):
        raise ValidationException("Contract end date must be after its start date")


class ContractService:
    """Service layer for contract business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ContractRepository(db)
        self.client_repo = ClientRepository(db)

    def list_contracts(
        self,
        actor: SessionUser,
        tenant_id: str | None = None,
        client_id: str | None = None,
        status: ContractStatus | None = None,
        search: str | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[Contract], int]:
        requested = ListScope(tenant_id=tenant_id, client_id=client_id)
        forced = resolve_list_scope(actor, ResourceKind.CONTRACT, requested)
        return self.repo.get_with_filters(
            forced, requested, status=status, search=search, page=page, limit=limit
        )

    def get_contract(self, contract_id: str, actor: SessionUser) -> Contract:
        return get_accessible(self.repo, ResourceKind.CONTRACT, contract_id, actor, Operation.READ)

    def create_contract(self, data: ContractCreate, actor: SessionUser) -> Contract:
        """
        Create a contract with a client; the tenant is the client's.

        Raises:
            ForbiddenException: Role cannot create contracts or client out of scope
            NotFoundException: Client does not exist
        """
        require(actor, ResourceKind.CONTRACT, Operation.CREATE)

        client = self.client_repo.get_by_id(data.client_id)
        if client is None:
            raise NotFoundException(f"Client {data.client_id} not found")
        ensure_resource_access(
            actor, ResourceKind.CONTRACT, Operation.CREATE, self.client_repo.scope_of(client)
        )
        _check_period(data.start_date, data.end_date)

        contract = Contract(
            id=generate_id("contract"),
            tenant_id=client.tenant_id,
            client_id=client.id,
            start_date=data.start_date,
            end_date=data.end_date,
            terms=data.terms,
            status=data.status,
        )
        return self.repo.create(contract)

    def update_contract(self, contract_id: str, data: ContractUpdate, actor: SessionUser) -> Contract:
        contract = get_accessible(self.repo, ResourceKind.CONTRACT, contract_id, actor, Operation.UPDATE)
        changes = data.model_dump(exclude_unset=True)
        ensure_fields_writable(actor, ResourceKind.CONTRACT, changes)

        for field in ("start_date", "status"):
            if field in changes and changes[field] is None:
                changes.pop(field)

        if "start_date" in changes or "end_date" in changes:
            _check_period(
                changes.get("start_date", contract.start_date),
                changes.get("end_date", contract.end_date),
            )

        apply_changes(contract, changes)
        return self.repo.update(contract)

    def delete_contract(self, contract_id: str, actor: SessionUser) -> None:
        """Delete contract and its invoices (cascade)"""
        contract = get_accessible(self.repo, ResourceKind.CONTRACT, contract_id, actor, Operation.DELETE)
        self.repo.delete(contract)
