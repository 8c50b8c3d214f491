"""
角色服务 - 角色限定在 (用户, 应用) 范围内
"""

import logging
from typing import Optional

from django.db import transaction

from .base import BaseService
from .application_service import ApplicationService
from ..exceptions import DuplicateError, RoleNotFoundError, ValidationError
from ..models import Application, Role, User


logger = logging.getLogger(__name__)


class RoleService(BaseService):
    """角色服务"""

    def assign_role(self, user: User, application: Application, name: str) -> Role:
        """
        授予用户在应用下的角色，用户未加入应用时自动加入

        Args:
            user: 用户
            application: 应用
            name: 角色名称

        Returns:
            Role: 创建的角色

        Raises:
            ValidationError: 名称为空
            DuplicateError: 该用户在该应用下已拥有同名角色
        """
        name = self._require(name, 'name')
        self._check_targets(user, application)

        with transaction.atomic():
            self._check_name_available(user, application, name)
            ApplicationService().add_user(application, user)

            role = Role(user=user, application=application, name=name)
            self._save(role, self._duplicate_message(name))

        logger.info(f"Role assigned: {name} to user {user.uuid} in application {application.uuid}")
        return role

    def get_role(self, role_uuid) -> Role:
        """按UUID获取角色"""
        return self._get_by_uuid(
            Role.objects.select_related('user', 'application'),
            role_uuid,
            'Role',
            RoleNotFoundError
        )

    def list_roles(self, user: User, application: Optional[Application] = None):
        """用户的角色，可按应用过滤"""
        queryset = Role.objects.filter(user=user).select_related('application')
        if application is not None:
            queryset = queryset.filter(application=application)
        return queryset

    def has_role(self, user: User, application: Application, name: str) -> bool:
        """用户在应用下是否拥有指定角色"""
        return Role.objects.filter(user=user, application=application, name=name).exists()

    def rename_role(self, role_uuid, name: str) -> Role:
        """重命名角色"""
        name = self._require(name, 'name')

        with transaction.atomic():
            role = self.get_role(role_uuid)
            self._check_name_available(role.user, role.application, name, exclude=role)
            role.name = name
            self._save(role, self._duplicate_message(name))

        logger.info(f"Role renamed: {role.uuid} -> {name}")
        return role

    def revoke_role(self, user: User, application: Application, name: str) -> bool:
        """
        撤销角色

        Returns:
            bool: 角色之前是否存在
        """
        revoked = Role.objects.filter(user=user, application=application, name=name).soft_delete()
        if revoked:
            logger.info(f"Role revoked: {name} from user {user.uuid} in application {application.uuid}")
        return bool(revoked)

    def delete_role(self, role_uuid) -> Role:
        """按UUID软删除角色"""
        with transaction.atomic():
            role = self.get_role(role_uuid)
            role.soft_delete()

        logger.info(f"Role deleted: {role.uuid}")
        return role

    @staticmethod
    def _check_targets(user: User, application: Application):
        if user.is_deleted or application.is_deleted:
            raise ValidationError("Cannot assign roles for deleted user or application")

    def _check_name_available(self, user: User, application: Application, name: str, exclude: Optional[Role] = None):
        """检查 (用户, 应用) 下角色名称是否可用"""
        queryset = Role.objects.filter(user=user, application=application, name=name)
        if exclude is not None:
            queryset = queryset.exclude(pk=exclude.pk)
        if queryset.exists():
            logger.warning(f"Duplicate role rejected: {name}")
            raise DuplicateError(self._duplicate_message(name))

    @staticmethod
    def _duplicate_message(name: str) -> str:
        return f"Role already exists for this user and application: {name}"
