from sqlalchemy.orm import Query

from teamsync.core.authorization import ListScope, ResourceScope
from teamsync.models.contract import Contract
from teamsync.models.invoice import Invoice
from teamsync.repositories.base import ScopedRepository


class InvoiceRepository(ScopedRepository[Invoice]):
    """
    Repository for Invoice data access.

    Invoices are scoped through their contract: every scoped query joins
    contracts to reach tenant_id and client_id.
    """

    model = Invoice

    def base_query(self) -> Query:
        return self.db.query(Invoice).join(Contract, Invoice.contract_id == Contract.id)

    def scope_columns(self) -> dict:
        return {"tenant_id": Contract.tenant_id, "client_id": Contract.client_id}

    def scope_of(self, invoice: Invoice) -> ResourceScope:
        return ResourceScope(tenant_id=invoice.tenant_id, client_id=invoice.client_id)

    def get_with_filters(
        self,
        forced: ListScope,
        requested: ListScope,
        contract_id: str | None = None,
        paid: bool | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[Invoice], int]:
        """List invoices inside the forced scope, latest due date first"""
        query = self.apply_scopes(self.base_query(), forced, requested)

        if contract_id is not None:
            query = query.filter(Invoice.contract_id == contract_id)

        if paid is not None:
            query = query.filter(Invoice.paid == paid)

        query = query.order_by(Invoice.due_date.desc(), Invoice.id)
        return self.paginate(query, page, limit)
