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
from teamsync.core.exceptions import NotFoundException
from teamsync.core.identifiers import generate_id
from teamsync.models.actor import SessionUser
from teamsync.models.base import utcnow
from teamsync.models.invoice import Invoice
from teamsync.repositories.contract_repository import ContractRepository
from teamsync.repositories.invoice_repository import InvoiceRepository
from teamsync.schemas.invoice_schemas import InvoiceCreate, InvoiceUpdate
from teamsync.services.base import get_accessible


class InvoiceService:
    """Service layer for invoices, scoped through their contract"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = InvoiceRepository(db)
        self.contract_repo = ContractRepository(db)

    def list_invoices(
        self,
        actor: SessionUser,
        tenant_id: str | None = None,
        client_id: str | None = None,
        contract_id: str | None = None,
        paid: bool | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[Invoice], int]:
        requested = ListScope(tenant_id=tenant_id, client_id=client_id)
        forced = resolve_list_scope(actor, ResourceKind.INVOICE, requested)
        return self.repo.get_with_filters(
            forced, requested, contract_id=contract_id, paid=paid, page=page, limit=limit
        )

    def get_invoice(self, invoice_id: str, actor: SessionUser) -> Invoice:
        return get_accessible(self.repo, ResourceKind.INVOICE, invoice_id, actor, Operation.READ)

    def create_invoice(self, data: InvoiceCreate, actor: SessionUser) -> Invoice:
        """
        Issue an invoice under a contract.

        Raises:
            ForbiddenException: Role cannot create invoices or contract out of scope
            NotFoundException: Contract does not exist
        """
        require(actor, ResourceKind.INVOICE, Operation.CREATE)

        contract = self.contract_repo.get_by_id(data.contract_id)
        if contract is None:
            raise NotFoundException(f"Contract {data.contract_id} not found")
        ensure_resource_access(
            actor, ResourceKind.INVOICE, Operation.CREATE, self.contract_repo.scope_of(contract)
        )

        invoice = Invoice(
            id=generate_id("invoice"),
            contract_id=contract.id,
            amount=data.amount,
            due_date=data.due_date,
            paid=data.paid,
            paid_at=utcnow() if data.paid else None,
        )
        return self.repo.create(invoice)

    def update_invoice(self, invoice_id: str, data: InvoiceUpdate, actor: SessionUser) -> Invoice:
        """
        Update an invoice. Marking it paid stamps paid_at; marking it
        unpaid clears it.
        """
        invoice = get_accessible(self.repo, ResourceKind.INVOICE, invoice_id, actor, Operation.UPDATE)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        ensure_fields_writable(actor, ResourceKind.INVOICE, changes)

        if "amount" in changes:
            invoice.amount = changes["amount"]
        if "due_date" in changes:
            invoice.due_date = changes["due_date"]
        if "paid" in changes and changes["paid"] != invoice.paid:
            invoice.paid = changes["paid"]
            invoice.paid_at = utcnow() if invoice.paid else None

        return self.repo.update(invoice)

    def delete_invoice(self, invoice_id: str, actor: SessionUser) -> None:
        invoice = get_accessible(self.repo, ResourceKind.INVOICE, invoice_id, actor, Operation.DELETE)
        self.repo.delete(invoice)
