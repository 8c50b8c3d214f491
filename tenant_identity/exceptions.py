"""
Tenant Identity 自定义异常
"""

from typing import Optional

from .constants import ErrorCode


class IdentityError(Exception):
    """Tenant Identity 基础异常"""
    default_code = None

    def __init__(self, message: str, error_code: Optional[str] = None):
        self.message = message
        self.error_code = error_code or self.default_code
        super().__init__(message)


class ValidationError(IdentityError):
    """验证错误: 缺少必填字段或字段格式错误"""
    default_code = ErrorCode.VALIDATION_ERROR


class DuplicateError(IdentityError):
    """唯一约束冲突"""
    default_code = ErrorCode.DUPLICATE


class EmailAlreadyExistsError(DuplicateError):
    """邮箱已存在错误"""
    default_code = ErrorCode.EMAIL_ALREADY_EXISTS


class NotFoundError(IdentityError):
    """UUID 无法解析到未删除的记录"""
    default_code = ErrorCode.NOT_FOUND


class ClientNotFoundError(NotFoundError):
    pass


class OrganizationNotFoundError(NotFoundError):
    pass


class ApplicationNotFoundError(NotFoundError):
    pass


class UserNotFoundError(NotFoundError):
    pass


class RoleNotFoundError(NotFoundError):
    pass


class CredentialNotFoundError(NotFoundError):
    pass


class InvalidCredentialsError(IdentityError):
    """无效凭据错误"""
    default_code = ErrorCode.INVALID_CREDENTIALS


class ConfigurationError(IdentityError):
    """配置错误"""
    default_code = ErrorCode.CONFIGURATION_ERROR
