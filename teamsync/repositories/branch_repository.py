from sqlalchemy import func, or_
from sqlalchemy.orm import Query

from teamsync.core.authorization import ListScope, ResourceScope
from teamsync.models.branch import Branch
from teamsync.models.client import Client
from teamsync.repositories.base import ScopedRepository


class BranchRepository(ScopedRepository[Branch]):
    """
    Repository for Branch data access.

    Branches carry only client_id, so every scoped query joins the
    parent client to reach tenant_id.
    """

    model = Branch

    def base_query(self) -> Query:
        return self.db.query(Branch).join(Client, Branch.client_id == Client.id)

    def scope_columns(self) -> dict:
        return {"tenant_id": Client.tenant_id, "client_id": Branch.client_id}

    def scope_of(self, branch: Branch) -> ResourceScope:
        return ResourceScope(tenant_id=branch.tenant_id, client_id=branch.client_id)

    def name_exists(self, client_id: str, name: str, exclude_id: str | None = None) -> bool:
        """Check branch name uniqueness inside one client (case-insensitive)"""
        query = self.db.query(Branch.id).filter(
            Branch.client_id == client_id,
            func.lower(Branch.name) == name.lower(),
        )
        if exclude_id is not None:
            query = query.filter(Branch.id != exclude_id)
        return query.first() is not None

    def get_with_filters(
        self,
        forced: ListScope,
        requested: ListScope,
        search: str | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[Branch], int]:
        """
        List branches inside the forced scope.

        Search matches the branch name or address.
        """
        query = self.apply_scopes(self.base_query(), forced, requested)

        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(Branch.name.ilike(pattern), Branch.address.ilike(pattern)))

        query = query.order_by(Branch.created_at.desc(), Branch.id)
        return self.paginate(query, page, limit)
