"""
Tenant Identity 数据模型
"""

from .client import Client, Organization
from .application import Application, UserApplication
from .user import User, Role, Credential
from .transfer import ClientCredential, LoginToken, LoginRedirect

__all__ = [
    'Client',
    'Organization',
    'Application',
    'UserApplication',
    'User',
    'Role',
    'Credential',
    'ClientCredential',
    'LoginToken',
    'LoginRedirect',
]
