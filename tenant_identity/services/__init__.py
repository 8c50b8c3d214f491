"""
Tenant Identity 业务逻辑服务
"""

from .client_service import ClientService
from .organization_service import OrganizationService
from .application_service import ApplicationService
from .user_service import UserService
from .role_service import RoleService
from .credential_service import CredentialService

__all__ = [
    'ClientService',
    'OrganizationService',
    'ApplicationService',
    'UserService',
    'RoleService',
    'CredentialService',
]
