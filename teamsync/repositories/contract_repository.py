from teamsync.core.authorization import ListScope, ResourceScope
from teamsync.models.contract import Contract, ContractStatus
from teamsync.repositories.base import ScopedRepository


class ContractRepository(ScopedRepository[Contract]):
    """Repository for Contract data access"""

    model = Contract

    def scope_columns(self) -> dict:
        return {"tenant_id": Contract.tenant_id, "client_id": Contract.client_id}

    def scope_of(self, contract: Contract) -> ResourceScope:
        return ResourceScope(tenant_id=contract.tenant_id, client_id=contract.client_id)

    def get_with_filters(
        self,
        forced: ListScope,
        requested: ListScope,
        status: ContractStatus | None = None,
        search: str | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[Contract], int]:
        """
        List contracts inside the forced scope.

        Search matches the contract terms.
        """
        query = self.apply_scopes(self.base_query(), forced, requested)

        if status is not None:
            query = query.filter(Contract.status == status)

        if search:
            query = query.filter(Contract.terms.ilike(f"%{search}%"))

        query = query.order_by(Contract.start_date.desc(), Contract.id)
        return self.paginate(query, page, limit)
