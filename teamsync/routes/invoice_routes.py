from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from teamsync.database import get_db
from teamsync.dependencies import Pagination, get_current_actor, get_pagination
from teamsync.models.actor import SessionUser
from teamsync.schemas.common import DataResponse, DeleteAck, ListResponse, PaginationMeta
from teamsync.schemas.invoice_schemas import InvoiceCreate, InvoiceResponse, InvoiceUpdate
from teamsync.services.invoice_service import InvoiceService

router = APIRouter()


@router.get("", response_model=ListResponse[InvoiceResponse])
def list_invoices(
    tenant_id: str | None = Query(None, alias="tenantId"),
    client_id: str | None = Query(None, alias="clientId"),
    contract_id: str | None = Query(None, alias="contractId"),
    paid: bool | None = Query(None),
    pagination: Pagination = Depends(get_pagination),
    actor: SessionUser = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """List invoices visible to the actor (scoped through their contract)"""
    service = InvoiceService(db)
    invoices, total = service.list_invoices(
        actor,
        tenant_id=tenant_id,
        client_id=client_id,
        contract_id=contract_id,
        paid=paid,
        page=pagination.page,
        limit=pagination.limit,
    )
    return {"data": invoices, "meta": PaginationMeta.build(total, pagination.page, pagination.limit)}


@router.post("", response_model=DataResponse[InvoiceResponse], status_code=status.HTTP_201_CREATED)
def create_invoice(
    data: InvoiceCreate,
    actor: SessionUser = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    service = InvoiceService(db)
    return {"data": service.create_invoice(data, actor)}


@router.get("/{invoice_id}", response_model=DataResponse[InvoiceResponse])
def get_invoice(
    invoice_id: str,
    actor: SessionUser = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    service = InvoiceService(db)
    return {"data": service.get_invoice(invoice_id, actor)}


@router.patch("/{invoice_id}", response_model=DataResponse[InvoiceResponse])
def update_invoice(
    invoice_id: str,
    data: InvoiceUpdate,
    actor: SessionUser = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    """Update an invoice; setting paid stamps paidAt"""
    service = InvoiceService(db)
    return {"data": service.update_invoice(invoice_id, data, actor)}


@router.delete("/{invoice_id}", response_model=DataResponse[DeleteAck])
def delete_invoice(
    invoice_id: str,
    actor: SessionUser = Depends(get_current_actor),
    db: Session = Depends(get_db),
):
    service = InvoiceService(db)
    service.delete_invoice(invoice_id, actor)
    return {"data": DeleteAck(id=invoice_id)}
