from fastapi import BackgroundTasks
from sqlalchemy.orm import Session

from teamsync.core.authorization import (
    Operation,
    ResourceKind,
    ensure_fields_writable,
    require,
    resolve_list_scope,
)
from teamsync.core.exceptions import (
    DuplicateNameException,
    NotFoundException,
    PaymentProviderException,
    ValidationException,
)
from teamsync.core.identifiers import generate_id
from teamsync.core.logging import get_logger
from teamsync.database import transaction
from teamsync.integrations.email import EmailService
from teamsync.integrations.payments import StripeGateway
from teamsync.models.activity_log import ActivityType
from teamsync.models.actor import SessionUser
from teamsync.models.plan import Plan
from teamsync.models.role import UserRole
from teamsync.models.tenant import Tenant
from teamsync.repositories.plan_repository import PlanRepository
from teamsync.repositories.tenant_repository import TenantRepository
from teamsync.repositories.user_repository import UserRepository
from teamsync.schemas.tenant_schemas import TenantCreate, TenantPlanUpdate, TenantUpdate
from teamsync.services.activity_log_service import record_activity
from teamsync.services.base import apply_changes, get_accessible

logger = get_logger(__name__)

# Subscription statuses adopted as the tenant's current subscription
ACTIVE_SUBSCRIPTION_STATUSES = frozenset({"active", "trialing"})


class TenantService:
    """Service layer for tenant management and plan subscriptions"""

    def __init__(
        self,
        db: Session,
        payments: StripeGateway | None = None,
        email_service: EmailService | None = None,
    ):
        self.db = db
        self.tenant_repo = TenantRepository(db)
        self.plan_repo = PlanRepository(db)
        self.user_repo = UserRepository(db)
        self.payments = payments or StripeGateway()
        self.email_service = email_service or EmailService()

    def list_tenants(
        self,
        actor: SessionUser,
        search: str | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[Tenant], int]:
        """
        List tenants visible to the actor.

        Super admins see every tenant, tenant admins only their own.
        """
        forced = resolve_list_scope(actor, ResourceKind.TENANT)
        return self.tenant_repo.get_with_filters(forced, search=search, page=page, limit=limit)

    def get_tenant(self, tenant_id: str, actor: SessionUser) -> Tenant:
        """
        Get tenant details.

        Raises:
            NotFoundException: Unknown tenant id
            ForbiddenException: Tenant outside the actor's scope
        """
        return get_accessible(self.tenant_repo, ResourceKind.TENANT, tenant_id, actor, Operation.READ)

    def _check_admin(self, admin_id: str | None) -> None:
        if admin_id is None:
            return
        admin = self.user_repo.get_by_id(admin_id)
        if admin is None:
            raise NotFoundException(f"User {admin_id} not found")
        if admin.role != UserRole.TENANT_ADMIN:
            raise ValidationException("Tenant admin must have the tenant_admin role")

    def create_tenant(self, data: TenantCreate, actor: SessionUser) -> Tenant:
        """
        Create a tenant (super admin only).

        Raises:
            ForbiddenException: Any role but super admin
            DuplicateNameException: Tenant name already taken
            NotFoundException: Admin user or plan does not exist
        """
        require(actor, ResourceKind.TENANT, Operation.CREATE)

        if self.tenant_repo.name_exists(data.name):
            raise DuplicateNameException("tenant", f"Tenant '{data.name}' already exists")
        self._check_admin(data.admin_id)
        if data.plan_id is not None and self.plan_repo.get_by_id(data.plan_id) is None:
            raise NotFoundException(f"Plan {data.plan_id} not found")

        tenant = Tenant(id=generate_id("tenant"), **data.model_dump())
        with transaction(self.db):
            self.tenant_repo.add(tenant)
            record_activity(
                self.db,
                ActivityType.TENANT_CREATED,
                user_id=actor.id,
                tenant_id=tenant.id,
                entity="tenant",
                entity_id=tenant.id,
                details=tenant.name,
            )
        self.db.refresh(tenant)
        return tenant

    def update_tenant(self, tenant_id: str, data: TenantUpdate, actor: SessionUser) -> Tenant:
        """
        Update tenant details (only provided fields).

        Tenant admins may edit their own tenant but not reassign its admin.

        Raises:
            ForbiddenException: Out of scope, or restricted field
            DuplicateNameException: New name already taken
        """
        tenant = get_accessible(self.tenant_repo, ResourceKind.TENANT, tenant_id, actor, Operation.UPDATE)
        changes = data.model_dump(exclude_unset=True)
        ensure_fields_writable(actor, ResourceKind.TENANT, changes)

        if changes.get("name") is None:
            changes.pop("name", None)
        elif self.tenant_repo.name_exists(changes["name"], exclude_id=tenant.id):
            raise DuplicateNameException("tenant", f"Tenant '{changes['name']}' already exists")
        if "admin_id" in changes:
            self._check_admin(changes["admin_id"])

        apply_changes(tenant, changes)
        return self.tenant_repo.update(tenant)

    def delete_tenant(self, tenant_id: str, actor: SessionUser) -> None:
        """Delete tenant with its clients and memberships (cascade)"""
        tenant = get_accessible(self.tenant_repo, ResourceKind.TENANT, tenant_id, actor, Operation.DELETE)
        # Entries about the tenant survive with tenant_id cleared
        with transaction(self.db):
            self.db.delete(tenant)
            record_activity(
                self.db,
                ActivityType.TENANT_DELETED,
                user_id=actor.id,
                entity="tenant",
                entity_id=tenant_id,
                details=tenant.name,
            )

    def get_tenant_plan(self, tenant_id: str, actor: SessionUser) -> dict:
        """Current plan of a tenant (None when it has none)"""
        tenant = self.get_tenant(tenant_id, actor)
        return {
            "tenant_id": tenant.id,
            "plan": tenant.plan,
            "subscription_status": tenant.subscription_status,
        }

    def _ensure_customer(self, tenant: Tenant) -> str:
        if tenant.stripe_customer_id:
            return tenant.stripe_customer_id
        customer_id = self.payments.create_customer(tenant.id, tenant.name, tenant.email)
        # The customer exists at the provider from now on
        tenant.stripe_customer_id = customer_id
        self.db.commit()
        return customer_id

    def _cancel_quietly(self, subscription_id: str) -> None:
        try:
            self.payments.cancel_subscription(subscription_id)
        except PaymentProviderException:
            logger.error(f"Could not cancel orphaned subscription {subscription_id}")

    def change_plan(
        self,
        tenant_id: str,
        data: TenantPlanUpdate,
        actor: SessionUser,
        background_tasks: BackgroundTasks,
    ) -> dict:
        """
        Move a tenant to another plan and keep the payment provider in sync.

        Flow:
        1. Store the new plan id
        2. If the plan has a Stripe price: ensure a customer, then create
           exactly one subscription
        3. Cancel the previous subscription, if any
        4. Record the new subscription and queue a plan-update email

        If any payment call fails, the plan id is reverted (and a
        subscription created in step 2 is cancelled) before the error
        is returned, so the stored plan and the provider never diverge.

        Raises:
            NotFoundException: Unknown tenant or plan
            ForbiddenException: Tenant outside the actor's scope
            ValidationException: Plan is not active
            PaymentProviderException: Any payment call failed
        """
        tenant = get_accessible(self.tenant_repo, ResourceKind.TENANT, tenant_id, actor, Operation.UPDATE)

        plan = self.plan_repo.get_by_id(data.plan_id)
        if plan is None:
            raise NotFoundException(f"Plan {data.plan_id} not found")
        if not plan.is_active:
            raise ValidationException("Selected plan is not active", code="PLAN_INACTIVE")

        previous_plan_id = tenant.plan_id
        previous_subscription_id = tenant.stripe_subscription_id

        tenant.plan_id = plan.id
        self.db.commit()

        new_subscription = None
        try:
            if plan.stripe_price_id:
                customer_id = self._ensure_customer(tenant)
                new_subscription = self.payments.create_subscription(
                    customer_id, plan.stripe_price_id, tenant.id, plan.id
                )
            if previous_subscription_id:
                self.payments.cancel_subscription(previous_subscription_id)
        except PaymentProviderException:
            self.db.rollback()
            if new_subscription is not None:
                self._cancel_quietly(new_subscription["id"])
            tenant.plan_id = previous_plan_id
            self.db.commit()
            logger.warning(
                f"Plan change for tenant {tenant.id} reverted after payment failure",
                extra={"actor_id": actor.id, "tenant_id": tenant.id},
            )
            raise

        if new_subscription is not None:
            tenant.stripe_subscription_id = new_subscription["id"]
            tenant.subscription_status = new_subscription["status"]
        else:
            tenant.stripe_subscription_id = None
            tenant.subscription_status = None
        record_activity(
            self.db,
            ActivityType.PLAN_CHANGED,
            user_id=actor.id,
            tenant_id=tenant.id,
            entity="plan",
            entity_id=plan.id,
            details=f"{previous_plan_id or 'none'} -> {plan.id}",
        )
        self.db.commit()
        self.db.refresh(tenant)

        logger.info(
            f"Tenant {tenant.id} moved to plan {plan.id}",
            extra={"actor_id": actor.id, "tenant_id": tenant.id},
        )
        self._queue_plan_email(tenant, plan, background_tasks)
        return self.get_tenant_plan(tenant.id, actor)

    def _queue_plan_email(self, tenant: Tenant, plan: Plan, background_tasks: BackgroundTasks) -> None:
        recipient = tenant.email or (tenant.admin.email if tenant.admin else None)
        if recipient is None:
            logger.info(f"No recipient for plan update email of tenant {tenant.id}")
            return
        background_tasks.add_task(
            self.email_service.send_plan_update_email, recipient, tenant.name, plan.name
        )

    # Payment provider webhooks

    def handle_webhook_event(self, event) -> None:
        """
        Apply a verified payment provider event to the tenant it concerns.

        Events for unknown tenants and of unhandled types are acknowledged
        without change so the provider does not retry them.
        """
        event_type = event["type"]
        handlers = {
            "checkout.session.completed": self._sync_checkout,
            "customer.subscription.created": self._sync_subscription,
            "customer.subscription.updated": self._sync_subscription,
            "customer.subscription.deleted": self._sync_subscription_deleted,
        }
        handler = handlers.get(event_type)
        if handler is None:
            logger.info(f"Ignoring webhook event {event.get('id')} of type {event_type}")
            return

        obj = event["data"]["object"]
        tenant = self._tenant_for(obj)
        if tenant is None:
            logger.warning(f"No tenant matches webhook event {event.get('id')} ({event_type})")
            return

        if handler(tenant, obj):
            record_activity(
                self.db,
                ActivityType.SUBSCRIPTION_SYNCED,
                tenant_id=tenant.id,
                entity="subscription",
                entity_id=tenant.stripe_subscription_id or obj.get("subscription") or obj.get("id"),
                details=event_type,
            )
            self.db.commit()
            logger.info(
                f"Synced {event_type} for tenant {tenant.id}",
                extra={"tenant_id": tenant.id},
            )
        else:
            self.db.rollback()
            logger.info(f"Webhook event {event.get('id')} does not change tenant {tenant.id}")

    def _tenant_for(self, obj) -> Tenant | None:
        metadata = obj.get("metadata") or {}
        tenant_id = metadata.get("tenant_id")
        if tenant_id:
            tenant = self.tenant_repo.get_by_id(tenant_id)
            if tenant is not None:
                return tenant
        customer_id = obj.get("customer")
        if isinstance(customer_id, str):
            return self.tenant_repo.get_by_stripe_customer_id(customer_id)
        return None

    def _plan_from_metadata(self, obj) -> Plan | None:
        plan_id = (obj.get("metadata") or {}).get("plan_id")
        return self.plan_repo.get_by_id(plan_id) if plan_id else None

    def _sync_checkout(self, tenant: Tenant, session) -> bool:
        if session.get("customer"):
            tenant.stripe_customer_id = session["customer"]
        if session.get("subscription"):
            tenant.stripe_subscription_id = session["subscription"]
        tenant.subscription_status = "active"
        plan = self._plan_from_metadata(session)
        if plan is not None:
            tenant.plan_id = plan.id
        return True

    def _sync_subscription(self, tenant: Tenant, subscription) -> bool:
        is_current = tenant.stripe_subscription_id == subscription["id"]
        if not is_current and subscription.get("status") not in ACTIVE_SUBSCRIPTION_STATUSES:
            return False

        tenant.stripe_subscription_id = subscription["id"]
        tenant.subscription_status = subscription.get("status")
        if subscription.get("customer"):
            tenant.stripe_customer_id = subscription["customer"]
        plan = self._plan_from_metadata(subscription)
        if plan is not None:
            tenant.plan_id = plan.id
        return True

    def _sync_subscription_deleted(self, tenant: Tenant, subscription) -> bool:
        if tenant.stripe_subscription_id != subscription["id"]:
            return False
        tenant.stripe_subscription_id = None
        tenant.subscription_status = "canceled"
        tenant.plan_id = None
        return True
