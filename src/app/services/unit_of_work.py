from abc import ABC, abstractmethod

from src.app.repositories.association_manager_repository import IAssociationManagerRepository
from src.app.repositories.invitation_audit_repository import IInvitationAuditRepository
from src.app.repositories.invitation_repository import IInvitationRepository
from src.app.repositories.member_repository import IMemberRepository
from src.app.repositories.organization_repository import IOrganizationRepository
from src.app.repositories.user_repository import IUserRepository


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Repository properties (initialized in __aenter__)
    users: IUserRepository
    members: IMemberRepository
    association_managers: IAssociationManagerRepository
    organizations: IOrganizationRepository
    invitations: IInvitationRepository
    invitation_audit: IInvitationAuditRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
