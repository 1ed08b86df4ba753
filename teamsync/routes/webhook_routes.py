from fastapi import APIRouter, Depends, Header, Request
from sqlalchemy.orm import Session

from teamsync.database import get_db
from teamsync.integrations.payments import construct_webhook_event
from teamsync.services.tenant_service import TenantService

router = APIRouter()


async def read_raw_body(request: Request) -> bytes:
    """The signature covers the exact bytes received"""
    return await request.body()


@router.post("/stripe")
def stripe_webhook(
    payload: bytes = Depends(read_raw_body),
    stripe_signature: str | None = Header(None, alias="Stripe-Signature"),
    db: Session = Depends(get_db),
):
    """
    Receive subscription events from Stripe.

    Unauthenticated: the Stripe-Signature header is the credential.
    """
    event = construct_webhook_event(payload, stripe_signature)
    TenantService(db).handle_webhook_event(event)
    return {"data": {"received": True}}
