from datetime import timedelta

from sqlalchemy.orm import Session

from teamsync.core.authorization import (
    ListScope,
    Operation,
    ResourceKind,
    ResourceScope,
    ensure_fields_writable,
    ensure_resource_access,
    require,
    resolve_list_scope,
    resolve_target_tenant,
)
from teamsync.core.exceptions import DuplicateNameException, NotFoundException, ValidationException
from teamsync.core.identifiers import generate_id
from teamsync.core.logging import get_logger
from teamsync.database import transaction
from teamsync.models.activity_log import ActivityType
from teamsync.models.actor import SessionUser
from teamsync.models.base import utcnow
from teamsync.models.client import Client
from teamsync.models.contract import Contract, ContractStatus
from teamsync.models.role import UserRole
from teamsync.repositories.client_repository import ClientRepository
from teamsync.repositories.contract_repository import ContractRepository
from teamsync.repositories.tenant_repository import TenantRepository
from teamsync.repositories.user_repository import UserRepository
from teamsync.schemas.client_schemas import ClientCreate, ClientUpdate
from teamsync.services.activity_log_service import record_activity
from teamsync.services.base import apply_changes, get_accessible

logger = get_logger(__name__)

INITIAL_CONTRACT_TERMS = "Standard contract terms"
INITIAL_CONTRACT_DAYS = 365


class ClientService:
    """Service layer for client business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ClientRepository(db)
        self.contract_repo = ContractRepository(db)
        self.tenant_repo = TenantRepository(db)
        self.user_repo = UserRepository(db)

    def list_clients(
        self,
        actor: SessionUser,
        tenant_id: str | None = None,
        client_id: str | None = None,
        search: str | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[Client], int]:
        """
        List clients visible to the actor.

        tenant_id/client_id narrow the listing; they are ANDed with the
        actor's forced scope and can never widen it.

        Raises:
            TenantIdRequiredException: Super admin without tenant_id/client_id
        """
        requested = ListScope(tenant_id=tenant_id, client_id=client_id)
        forced = resolve_list_scope(actor, ResourceKind.CLIENT, requested)
        return self.repo.get_with_filters(forced, requested, search=search, page=page, limit=limit)

    def get_client(self, client_id: str, actor: SessionUser) -> Client:
        return get_accessible(self.repo, ResourceKind.CLIENT, client_id, actor, Operation.READ)

    def _check_admin(self, admin_id: str | None) -> None:
        if admin_id is None:
            return
        admin = self.user_repo.get_by_id(admin_id)
        if admin is None:
            raise NotFoundException(f"User {admin_id} not found")
        if admin.role != UserRole.CLIENT_ADMIN:
            raise ValidationException("Client admin must have the client_admin role")

    def create_client(self, data: ClientCreate, actor: SessionUser) -> Client:
        """
        Create a client together with its initial one-year contract.

        Both rows are written in one transaction: if the contract insert
        fails, the client is rolled back as well.

        Raises:
            ForbiddenException: Role cannot create clients, or foreign tenant
            TenantIdRequiredException: Super admin without tenant_id
            NotFoundException: Tenant or admin user does not exist
            DuplicateNameException: Name already used inside the tenant
        """
        require(actor, ResourceKind.CLIENT, Operation.CREATE)
        tenant_id = resolve_target_tenant(actor, data.tenant_id)

        tenant = self.tenant_repo.get_by_id(tenant_id)
        if tenant is None:
            raise NotFoundException(f"Tenant {tenant_id} not found")
        ensure_resource_access(
            actor, ResourceKind.CLIENT, Operation.CREATE, ResourceScope(tenant_id=tenant.id)
        )

        if self.repo.name_exists(tenant.id, data.name):
            raise DuplicateNameException("client", f"Client '{data.name}' already exists in this tenant")
        self._check_admin(data.admin_id)

        client = Client(
            id=generate_id("client"),
            tenant_id=tenant.id,
            name=data.name,
            phone=data.phone,
            address=data.address,
            admin_id=data.admin_id,
        )
        start = utcnow()
        contract = Contract(
            id=generate_id("contract"),
            tenant_id=tenant.id,
            client_id=client.id,
            start_date=start,
            end_date=start + timedelta(days=INITIAL_CONTRACT_DAYS),
            terms=INITIAL_CONTRACT_TERMS,
            status=ContractStatus.ACTIVE,
        )

        with transaction(self.db):
            self.repo.add(client)
            self.contract_repo.add(contract)
            record_activity(
                self.db,
                ActivityType.CLIENT_CREATED,
                user_id=actor.id,
                tenant_id=tenant.id,
                entity="client",
                entity_id=client.id,
                details=client.name,
            )

        self.db.refresh(client)
        logger.info(f"Created client {client.id} in tenant {tenant.id}", extra={"actor_id": actor.id})
        return client

    def update_client(self, client_id: str, data: ClientUpdate, actor: SessionUser) -> Client:
        """Update client details (only provided fields)"""
        client = get_accessible(self.repo, ResourceKind.CLIENT, client_id, actor, Operation.UPDATE)
        changes = data.model_dump(exclude_unset=True)
        ensure_fields_writable(actor, ResourceKind.CLIENT, changes)

        if changes.get("name") is None:
            changes.pop("name", None)
        elif self.repo.name_exists(client.tenant_id, changes["name"], exclude_id=client.id):
            raise DuplicateNameException("client", f"Client '{changes['name']}' already exists in this tenant")
        if "admin_id" in changes:
            self._check_admin(changes["admin_id"])

        apply_changes(client, changes)
        return self.repo.update(client)

    def delete_client(self, client_id: str, actor: SessionUser) -> None:
        """Delete client with its branches and contracts (cascade)"""
        client = get_accessible(self.repo, ResourceKind.CLIENT, client_id, actor, Operation.DELETE)
        with transaction(self.db):
            self.db.delete(client)
            record_activity(
                self.db,
                ActivityType.CLIENT_DELETED,
                user_id=actor.id,
                tenant_id=client.tenant_id,
                entity="client",
                entity_id=client.id,
                details=client.name,
            )
