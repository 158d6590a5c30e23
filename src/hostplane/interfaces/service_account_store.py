"""Service account store interface."""

from abc import ABC, abstractmethod

from hostplane.core.models import ServiceAccount


class ServiceAccountStore(ABC):
    """Abstract storage of project-scoped service accounts and memberships."""

    @abstractmethod
    async def list_service_accounts(self, project_id: str) -> list[ServiceAccount]:
        """List the service accounts of a project.

        Status is derived from project membership: an account bound to the
        project is Active, otherwise Inactive.

        Args:
            project_id: Project identifier

        Returns:
            Service accounts of the project, in any order

        Raises:
            ServiceAccountStoreError: If listing fails
        """

    @abstractmethod
    async def create_service_account(self, account: ServiceAccount) -> ServiceAccount:
        """Persist a new service account.

        Raises:
            ServiceAccountStoreError: If the account cannot be stored
        """

    @abstractmethod
    async def get_member_group(self, project_id: str, email: str) -> str | None:
        """Get the role group of a user within a project.

        Args:
            project_id: Project identifier
            email: Member email

        Returns:
            Role group (e.g. "owners") or None if not a member

        Raises:
            ServiceAccountStoreError: If the lookup fails
        """
