from sqlalchemy.orm import Session

from teamsync.core.authorization import (
    ListScope,
    Operation,
    ResourceKind,
    ensure_fields_writable,
    ensure_resource_access,
    require,
    resolve_list_scope,
)
from teamsync.core.exceptions import DuplicateNameException, NotFoundException, ValidationException
from teamsync.core.identifiers import generate_id
from teamsync.models.actor import SessionUser
from teamsync.models.branch import Branch
from teamsync.repositories.branch_repository import BranchRepository
from teamsync.repositories.client_repository import ClientRepository
from teamsync.repositories.tenant_membership_repository import TenantMembershipRepository
from teamsync.schemas.branch_schemas import BranchCreate, BranchUpdate
from teamsync.services.base import apply_changes, get_accessible


class BranchService:
    """Service layer for branch business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = BranchRepository(db)
        self.client_repo = ClientRepository(db)
        self.membership_repo = TenantMembershipRepository(db)

    def list_branches(
        self,
        actor: SessionUser,
        tenant_id: str | None = None,
        client_id: str | None = None,
        search: str | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[Branch], int]:
        requested = ListScope(tenant_id=tenant_id, client_id=client_id)
        forced = resolve_list_scope(actor, ResourceKind.BRANCH, requested)
        return self.repo.get_with_filters(forced, requested, search=search, page=page, limit=limit)

    def get_branch(self, branch_id: str, actor: SessionUser) -> Branch:
        return get_accessible(self.repo, ResourceKind.BRANCH, branch_id, actor, Operation.READ)

    def _check_supervisor(self, supervisor_id: str | None, tenant_id: str) -> None:
        if supervisor_id is None:
            return
        if self.membership_repo.get_membership(supervisor_id, tenant_id) is None:
            raise ValidationException("Supervisor must be a member of the branch's tenant")

    def create_branch(self, data: BranchCreate, actor: SessionUser) -> Branch:
        """
        Create a branch under a client.

        The parent client must exist and be inside the actor's scope, so
        an id guessed from another tenant is rejected before any insert.

        Raises:
            ForbiddenException: Role cannot create branches, sets a
                restricted field, or the client is out of scope
            NotFoundException: Client does not exist
            DuplicateNameException: Name already used by the client
            ValidationException: Supervisor is not a member of the tenant
        """
        require(actor, ResourceKind.BRANCH, Operation.CREATE)
        ensure_fields_writable(actor, ResourceKind.BRANCH, data.model_dump(exclude_unset=True))

        client = self.client_repo.get_by_id(data.client_id)
        if client is None:
            raise NotFoundException(f"Client {data.client_id} not found")
        ensure_resource_access(
            actor, ResourceKind.BRANCH, Operation.CREATE, self.client_repo.scope_of(client)
        )

        if self.repo.name_exists(client.id, data.name):
            raise DuplicateNameException("branch", f"Branch '{data.name}' already exists for this client")
        self._check_supervisor(data.supervisor_id, client.tenant_id)

        branch = Branch(
            id=generate_id("branch"),
            client_id=client.id,
            name=data.name,
            address=data.address,
            supervisor_id=data.supervisor_id,
        )
        return self.repo.create(branch)

    def update_branch(self, branch_id: str, data: BranchUpdate, actor: SessionUser) -> Branch:
        """
        Update a branch (only provided fields).

        Raises:
            ForbiddenException: Client admins setting supervisor_id
        """
        branch = get_accessible(self.repo, ResourceKind.BRANCH, branch_id, actor, Operation.UPDATE)
        changes = data.model_dump(exclude_unset=True)
        ensure_fields_writable(actor, ResourceKind.BRANCH, changes)

        if changes.get("name") is None:
            changes.pop("name", None)
        elif self.repo.name_exists(branch.client_id, changes["name"], exclude_id=branch.id):
            raise DuplicateNameException("branch", f"Branch '{changes['name']}' already exists for this client")
        if "supervisor_id" in changes:
            self._check_supervisor(changes["supervisor_id"], branch.tenant_id)

        apply_changes(branch, changes)
        return self.repo.update(branch)

    def delete_branch(self, branch_id: str, actor: SessionUser) -> None:
        branch = get_accessible(self.repo, ResourceKind.BRANCH, branch_id, actor, Operation.DELETE)
        self.repo.delete(branch)
