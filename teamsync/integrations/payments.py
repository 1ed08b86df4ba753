"""Payment provider client (official Stripe SDK)."""

import json
from typing import Any, Callable

import stripe

from teamsync.config import settings
from teamsync.core.exceptions import InvalidWebhookException, PaymentProviderException
from teamsync.core.logging import get_logger

logger = get_logger(__name__)


class StripeGateway:
    """
    Customers and subscriptions at Stripe.

    Every SDK failure (connection error or rejected request) is raised
    as PaymentProviderException so callers can revert their own state.
    """

    def __init__(
        self,
        api_key: str | None = None,
        api_base: str | None = None,
        client: stripe.StripeClient | None = None,
    ):
        self.api_key = api_key if api_key is not None else settings.STRIPE_SECRET_KEY
        self.api_base = api_base or settings.STRIPE_API_BASE
        self._client = client

    @property
    def client(self) -> stripe.StripeClient:
        if self._client is None:
            if not self.api_key:
                raise PaymentProviderException("Payment provider is not configured")
            self._client = stripe.StripeClient(self.api_key, base_addresses={"api": self.api_base})
        return self._client

    def _call(self, action: str, method: Callable[..., Any], *args, **kwargs) -> Any:
        try:
            return method(*args, **kwargs)
        except stripe.APIConnectionError as e:
            logger.error(f"Stripe {action} failed: {e}")
            raise PaymentProviderException("Payment provider unavailable") from e
        except stripe.StripeError as e:
            logger.error(f"Stripe {action} rejected with status {e.http_status}: {e}")
            raise PaymentProviderException("Payment provider rejected the request") from e

    def create_customer(self, tenant_id: str, name: str, email: str | None = None) -> str:
        """Create a customer keyed by tenant id; returns the customer id"""
        params: dict[str, Any] = {"name": name, "metadata": {"tenant_id": tenant_id}}
        if email:
            params["email"] = email
        customer = self._call("create customer", self.client.customers.create, params=params)
        logger.info(f"Created Stripe customer {customer.id} for tenant {tenant_id}")
        return customer.id

    def create_subscription(self, customer_id: str, price_id: str, tenant_id: str, plan_id: str) -> dict:
        """
        Subscribe a customer to a price.

        The tenant and plan ids travel as metadata so webhook events can
        be matched back to the tenant.

        Returns:
            Dict with the subscription 'id' and its 'status'
        """
        subscription = self._call(
            "create subscription",
            self.client.subscriptions.create,
            params={
                "customer": customer_id,
                "items": [{"price": price_id}],
                "metadata": {"tenant_id": tenant_id, "plan_id": plan_id},
            },
        )
        logger.info(f"Created Stripe subscription {subscription.id} for tenant {tenant_id}")
        return {"id": subscription.id, "status": subscription.status}

    def cancel_subscription(self, subscription_id: str) -> None:
        """Cancel a subscription immediately"""
        self._call("cancel subscription", self.client.subscriptions.cancel, subscription_id)
        logger.info(f"Cancelled Stripe subscription {subscription_id}")


def construct_webhook_event(
    payload: bytes,
    signature: str | None,
    secret: str | None = None,
) -> dict:
    """
    Authenticate and parse a webhook delivery.

    The SDK checks the signature and timestamp; the verified body is
    returned as plain dicts.

    Args:
        payload: Raw request body, exactly as received
        signature: Value of the Stripe-Signature header
        secret: Endpoint signing secret, defaults to STRIPE_WEBHOOK_SECRET

    Raises:
        InvalidWebhookException: Missing header or secret, bad signature,
            stale timestamp, or a body that is not an event
    """
    secret = secret if secret is not None else settings.STRIPE_WEBHOOK_SECRET
    if not signature:
        raise InvalidWebhookException("Missing Stripe-Signature header")
    if not secret:
        logger.error("STRIPE_WEBHOOK_SECRET not set. Rejecting webhook.")
        raise InvalidWebhookException("Webhook secret is not configured")

    try:
        stripe.Webhook.construct_event(payload, signature, secret)
        event = json.loads(payload)
    except stripe.SignatureVerificationError as e:
        logger.warning(f"Rejected webhook with invalid signature: {e}")
        raise InvalidWebhookException("Invalid webhook signature") from e
    except ValueError as e:
        raise InvalidWebhookException("Invalid webhook payload") from e

    data = event.get("data") if isinstance(event, dict) else None
    if not isinstance(data, dict) or "type" not in event or not isinstance(data.get("object"), dict):
        raise InvalidWebhookException("Invalid webhook payload")
    return event
