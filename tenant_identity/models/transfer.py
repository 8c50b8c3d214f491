"""
传输对象 - 不持久化
"""

from dataclasses import dataclass, field

from .client import Client


@dataclass
class ClientCredential:
    """客户登录请求"""
    email: str
    password: str = field(repr=False)


@dataclass
class LoginToken:
    """登录结果：客户与外部签发的令牌"""
    client: Client
    token: str = field(repr=False)


@dataclass
class LoginRedirect:
    """登录后跳转指令"""
    client_uuid: str
    application_uuid: str
    redirect_route: str
