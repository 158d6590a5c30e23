"""Project-scoped service accounts."""

import uuid
from typing import Any

from hostplane.core.exceptions import (
    AuthorizationError,
    DuplicateError,
    ValidationFailedError,
)
from hostplane.core.models import ServiceAccount, User
from hostplane.interfaces.service_account_store import ServiceAccountStore
from hostplane.utils.logging import get_logger

logger = get_logger(__name__)

ASSIGNABLE_GROUPS = frozenset({"editors", "viewers"})
MEMBER_GROUPS = frozenset({"owners", "editors"})


def group_name(role: str, project_id: str) -> str:
    """Get the project-qualified group of a role, e.g. ``editors-plan9-ID``."""
    return f"{role}-{project_id}"


def service_account_view(account: ServiceAccount) -> dict[str, Any]:
    return {
        "id": account.id,
        "name": account.name,
        "group": account.group,
        "status": account.status.value,
    }


class ServiceAccountService:
    """Service account boundary service.

    Args:
        store: Service account store
    """

    def __init__(self, store: ServiceAccountStore):
        self.store = store

    async def _require_member(self, user: User, project_id: str) -> None:
        group = await self.store.get_member_group(project_id, user.email)
        if group not in MEMBER_GROUPS:
            raise AuthorizationError(
                f'forbidden: "{user.email}" is not allowed to manage service accounts '
                f'of project "{project_id}"'
            )

    async def create_service_account(
        self, user: User, project_id: str, name: str, group: str
    ) -> ServiceAccount:
        """Create a service account in a project.

        Args:
            user: Caller
            project_id: Project identifier
            name: Account name, unique within the project
            group: Role the account gets ("editors" or "viewers")

        Returns:
            The created, inactive service account

        Raises:
            ValidationFailedError: If a field is empty or the group is not assignable
            AuthorizationError: If the caller is not an owner or editor of the project
            DuplicateError: If the name is already used in the project
        """
        if not name or not project_id or not group:
            raise ValidationFailedError("the name, project ID and group cannot be empty")
        if group not in ASSIGNABLE_GROUPS:
            raise ValidationFailedError(f"invalid group name {group}")

        await self._require_member(user, project_id)

        existing = await self.store.list_service_accounts(project_id)
        if any(account.name == name for account in existing):
            raise DuplicateError(f'service account "{name}" already exists')

        account = ServiceAccount(
            id=f"serviceaccount-{uuid.uuid4().hex[:10]}",
            name=name,
            project_id=project_id,
            group=group_name(group, project_id),
        )
        created = await self.store.create_service_account(account)

        logger.info(
            "service_account_created",
            project_id=project_id,
            service_account=created.id,
            group=created.group,
        )
        return created

    async def list_service_accounts(self, user: User, project_id: str) -> list[ServiceAccount]:
        """List the service accounts of a project, sorted by name.

        Raises:
            AuthorizationError: If the caller is not an owner or editor of the project
        """
        await self._require_member(user, project_id)
        accounts = await self.store.list_service_accounts(project_id)
        return sorted(accounts, key=lambda a: a.name)
