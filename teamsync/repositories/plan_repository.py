from sqlalchemy import func

from teamsync.models.plan import Plan
from teamsync.repositories.base import BaseRepository


class PlanRepository(BaseRepository[Plan]):
    """Repository for the global plan catalogue"""

    model = Plan

    def name_exists(self, name: str, exclude_id: str | None = None) -> bool:
        query = self.db.query(Plan.id).filter(func.lower(Plan.name) == name.lower())
        if exclude_id is not None:
            query = query.filter(Plan.id != exclude_id)
        return query.first() is not None

    def get_with_filters(
        self,
        is_active: bool | None = None,
        search: str | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[Plan], int]:
        """List plans, cheapest first"""
        query = self.db.query(Plan)

        if is_active is not None:
            query = query.filter(Plan.is_active == is_active)

        if search:
            query = query.filter(Plan.name.ilike(f"%{search}%"))

        query = query.order_by(Plan.price, Plan.name)
        return self.paginate(query, page, limit)
