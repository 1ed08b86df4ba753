from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from teamsync.database import get_db
from teamsync.dependencies import Pagination, get_current_actor, get_pagination
from teamsync.models.actor import SessionUser
from teamsync.models.contract import ContractStatus
from teamsync.schemas.common import DataResponse, DeleteAck, ListResponse, PaginationMeta
from teamsync.schemas.contract_schemas import ContractCreate, ContractResponse, ContractUpdate
from teamsync.services.contract_service import ContractService

router = APIRouter()


@router.get("", response_model=ListResponse[ContractResponse])
def list_contracts(
    tenant_id: str | None = Query(None, alias="tenantId"),
    client_id: str | None = Query(None, alias="clientId"),
    contract_status: ContractStatus | None = Query(None, alias="status"),
    search: str | None = Query(None, description="Search contract terms"),
    pagination: Pagination = Depends(get_pagination),
    actor: SessionUser = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    service = ContractService(db)
    contracts, total = service.list_contracts(
        actor,
        tenant_id=tenant_id,
        client_id=client_id,
        status=contract_status,
        search=search,
        page=pagination.page,
        limit=pagination.limit,
    )
    return {"data": contracts, "meta": PaginationMeta.build(total, pagination.page, pagination.limit)}


@router.post("", response_model=DataResponse[ContractResponse], status_code=status.HTTP_201_CREATED)
def create_contract(
    data: ContractCreate,
    actor: SessionUser = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    service = ContractService(db)
    return {"data": service.create_contract(data, actor)}


@router.get("/{contract_id}", response_model=DataResponse[ContractResponse])
def get_contract(
    contract_id: str,
    actor: SessionUser = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    service = ContractService(db)
    return {"data": service.get_contract(contract_id, actor)}


@router.patch("/{contract_id}", response_model=DataResponse[ContractResponse])
def update_contract(
    contract_id: str,
    data: ContractUpdate,
    actor: SessionUser = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    service = ContractService(db)
    return {"data": service.update_contract(contract_id, data, actor)}


@router.delete("/{contract_id}", response_model=DataResponse[DeleteAck])
def delete_contract(
    contract_id: str,
    actor: SessionUser = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """Delete a contract and its invoices"""
    service = ContractService(db)
    service.delete_contract(contract_id, actor)
    return {"data": DeleteAck(id=contract_id)}
