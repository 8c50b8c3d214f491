"""
服务基类 - 通用的查找、校验与保存逻辑
"""

import logging
from typing import Dict, Iterable, Optional, Type

from django.core.exceptions import ObjectDoesNotExist, ValidationError as DjangoValidationError
from django.core.validators import validate_email
from django.db import IntegrityError, transaction
from psycopg2 import errorcodes

from ..conf import identity_settings
from ..exceptions import DuplicateError, NotFoundError, ValidationError


logger = logging.getLogger(__name__)


def is_unique_violation(error: IntegrityError) -> bool:
    """IntegrityError 是否由唯一约束引起 (而非非空/外键约束)"""
    pgcode = getattr(error.__cause__, 'pgcode', None)
    if pgcode is not None:
        return pgcode == errorcodes.UNIQUE_VIOLATION
    return 'unique' in str(error).lower()


class BaseService:
    """服务基类"""

    def __init__(self):
        self.password_min_length = int(identity_settings.PASSWORD_MIN_LENGTH)
        self.cascade_soft_delete = bool(identity_settings.CASCADE_SOFT_DELETE)

    def _get_by_uuid(self, queryset, uuid_value, label: str, error_class: Type[NotFoundError] = NotFoundError):
        """
        按UUID查找未删除的记录

        Raises:
            NotFoundError: UUID格式错误或记录不存在/已删除
        """
        if not uuid_value:
            raise error_class(f"{label} not found: {uuid_value}")

        try:
            return queryset.get(uuid=uuid_value)
        except (ObjectDoesNotExist, DjangoValidationError, ValueError):
            raise error_class(f"{label} not found: {uuid_value}")

    def _save(self, instance, duplicate_message: str, error_class: Type[DuplicateError] = DuplicateError,
              update_fields: Optional[Iterable[str]] = None):
        """
        在事务中保存，唯一约束冲突转换为 DuplicateError
        """
        try:
            with transaction.atomic():
                instance.save(update_fields=update_fields)
        except IntegrityError as e:
            if not is_unique_violation(e):
                raise
            logger.warning(f"Duplicate rejected: {duplicate_message}")
            raise error_class(duplicate_message)
        return instance

    @staticmethod
    def _require(value, field_name: str) -> str:
        """必填字段校验"""
        if value is None or not str(value).strip():
            raise ValidationError(f"{field_name} is required")
        return str(value).strip()

    def _normalize_email(self, email, field_name: str = 'email') -> str:
        """校验并规范化邮箱"""
        email = self._require(email, field_name).lower()
        try:
            validate_email(email)
        except DjangoValidationError:
            raise ValidationError(f"Invalid {field_name}: {email}")
        return email

    def _validate_password(self, password, field_name: str = 'password') -> str:
        """校验密码长度"""
        if not password:
            raise ValidationError(f"{field_name} is required")
        if len(password) < self.password_min_length:
            raise ValidationError(
                f"{field_name} must be at least {self.password_min_length} characters"
            )
        return password

    @staticmethod
    def _check_fields(fields: Dict, allowed: Iterable[str]) -> Dict:
        """拒绝不可更新的字段"""
        unknown = sorted(set(fields) - set(allowed))
        if unknown:
            raise ValidationError(f"Fields cannot be updated: {', '.join(unknown)}")
        return fields

    @staticmethod
    def _apply_fields(instance, fields: Dict):
        """将字段写入实例，字符串去除首尾空白"""
        for name, value in fields.items():
            if value is None and not instance._meta.get_field(name).null:
                raise ValidationError(f"{name} cannot be null")
            if isinstance(value, str):
                value = value.strip()
            setattr(instance, name, value)
        return instance
