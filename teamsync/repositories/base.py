"""Shared repository plumbing: CRUD, pagination and scope filters."""

from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

from sqlalchemy import false
from sqlalchemy.orm import Query, Session

from teamsync.core.authorization import ListScope, ResourceScope
from teamsync.models.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseRepository(Generic[ModelT]):
    """Repository for one model: point lookups and writes"""

    model: type[ModelT]

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, entity_id: str) -> ModelT | None:
        """
        Get an entity by primary key.

        Args:
            entity_id: Entity id

        Returns:
            Entity or None if not found
        """
        return self.db.query(self.model).filter(self.model.id == entity_id).first()

    def add(self, entity: ModelT) -> ModelT:
        """
        Stage an entity without committing.
        Caller responsible for commit. Enables atomic multi-table writes.
        """
        self.db.add(entity)
        self.db.flush()
        return entity

    def create(self, entity: ModelT) -> ModelT:
        """Create entity and commit"""
        self.db.add(entity)
        self.db.commit()
        self.db.refresh(entity)
        return entity

    def update(self, entity: ModelT) -> ModelT:
        """Commit pending changes on an entity"""
        self.db.commit()
        self.db.refresh(entity)
        return entity

    def delete(self, entity: ModelT) -> None:
        """Delete entity and commit"""
        self.db.delete(entity)
        self.db.commit()

    @staticmethod
    def paginate(query: Query, page: int, limit: int) -> tuple[list[Any], int]:
        """
        Apply offset pagination.

        Args:
            query: Fully filtered and ordered query
            page: 1-based page number
            limit: Page size

        Returns:
            Tuple of (items on the page, total count before pagination)
        """
        total = query.order_by(None).count()
        items = query.limit(limit).offset((page - 1) * limit).all()
        return items, total


class ScopedRepository(BaseRepository[ModelT], ABC):
    """
    Repository for a tenant/client/employee scoped model.

    Subclasses declare how the generic scope keys map onto their columns
    (joining a parent table where the key lives one level up). List
    filters and single-resource scope checks are then written once here.
    """

    def base_query(self) -> Query:
        """Query with whatever joins scope_columns() needs"""
        return self.db.query(self.model)

    @abstractmethod
    def scope_columns(self) -> dict:
        """Map of ListScope field name -> column expression"""

    @abstractmethod
    def scope_of(self, entity: ModelT) -> ResourceScope:
        """Scope keys of one fetched entity"""

    def apply_scopes(self, query: Query, *scopes: ListScope) -> Query:
        """
        AND every condition of every scope onto the query.

        A key the model cannot be scoped by matches nothing, so an
        unsupported forced scope yields an empty result rather than an
        unfiltered one.
        """
        columns = self.scope_columns()
        for scope in scopes:
            for key, value in scope.conditions().items():
                column = columns.get(key)
                if column is None:
                    query = query.filter(false())
                else:
                    query = query.filter(column == value)
        return query
