import pytest

from teamsync.core.authorization import ListScope
from teamsync.models.contract import Contract
from teamsync.repositories.base import ScopedRepository
from teamsync.repositories.contract_repository import ContractRepository


class ContractRepositoryWithoutScopeOf(ScopedRepository[Contract]):
    model = Contract

    def scope_columns(self) -> dict:
        return {"tenant_id": Contract.tenant_id}


def test_scoped_repository_requires_scope_methods(db_session):
    with pytest.raises(TypeError):
        ScopedRepository(db_session)
    with pytest.raises(TypeError):
        ContractRepositoryWithoutScopeOf(db_session)


def test_scopes_are_anded(world):
    repo = ContractRepository(world)

    items, total = repo.get_with_filters(ListScope(tenant_id="t1"), ListScope())
    assert [c.id for c in items] == ["k1"]
    assert total == 1

    items, total = repo.get_with_filters(ListScope(tenant_id="t1"), ListScope(client_id="c3"))
    assert items == []
    assert total == 0


def test_unsupported_scope_key_matches_nothing(world):
    repo = ContractRepository(world)

    items, total = repo.get_with_filters(ListScope(employee_id="e1"), ListScope())
    assert items == []
    assert total == 0
