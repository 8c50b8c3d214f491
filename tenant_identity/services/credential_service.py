"""
凭据服务 - 用户在每个应用下可以有独立的登录身份
"""

import logging
from typing import Optional

from django.db import transaction

from .base import BaseService
from .application_service import ApplicationService
from ..exceptions import (
    CredentialNotFoundError,
    DuplicateError,
    InvalidCredentialsError,
    ValidationError,
)
from ..models import Application, Credential, User


logger = logging.getLogger(__name__)


class CredentialService(BaseService):
    """凭据服务"""

    def create_credential(self, user: User, application: Application, username: str, password: str) -> Credential:
        """
        创建凭据，用户未加入应用时自动加入

        Args:
            user: 用户
            application: 应用
            username: 登录名 (同一用户同一应用下唯一)
            password: 明文密码，只保存哈希

        Returns:
            Credential: 创建的凭据

        Raises:
            ValidationError: 登录名为空或密码过短
            DuplicateError: 登录名已存在
        """
        username = self._require(username, 'username')
        self._validate_password(password)
        if user.is_deleted or application.is_deleted:
            raise ValidationError("Cannot create credentials for deleted user or application")

        with transaction.atomic():
            self._check_username_available(user, application, username)
            ApplicationService().add_user(application, user)

            credential = Credential(user=user, application=application, username=username)
            credential.set_password(password)
            self._save(credential, self._duplicate_message(username))

        logger.info(f"Credential created: {credential.uuid} for user {user.uuid} in application {application.uuid}")
        return credential

    def get_credential(self, credential_uuid) -> Credential:
        """按UUID获取凭据"""
        return self._get_by_uuid(
            Credential.objects.select_related('user', 'application'),
            credential_uuid,
            'Credential',
            CredentialNotFoundError
        )

    def list_credentials(self, user: User, application: Optional[Application] = None):
        """用户的凭据，可按应用过滤"""
        queryset = Credential.objects.filter(user=user).select_related('application')
        if application is not None:
            queryset = queryset.filter(application=application)
        return queryset

    def change_password(self, credential_uuid, password: str, new_pwd: str) -> Credential:
        """
        修改凭据密码

        Args:
            credential_uuid: 凭据UUID
            password: 当前密码
            new_pwd: 新密码

        Raises:
            InvalidCredentialsError: 当前密码错误
        """
        self._validate_password(new_pwd, 'new_pwd')

        with transaction.atomic():
            credential = self.get_credential(credential_uuid)
            if not credential.check_password(password):
                logger.warning(f"Password change rejected for credential {credential.uuid}")
                raise InvalidCredentialsError("Invalid credentials")

            credential.set_password(new_pwd)
            credential.save(update_fields=['password_hash', 'updated_at'])

        logger.info(f"Credential password changed: {credential.uuid}")
        return credential

    def verify_password(self, credential_uuid, password: str) -> bool:
        """验证凭据密码"""
        credential = self.get_credential(credential_uuid)
        return credential.check_password(password)

    def delete_credential(self, credential_uuid) -> Credential:
        """软删除凭据"""
        with transaction.atomic():
            credential = self.get_credential(credential_uuid)
            credential.soft_delete()

        logger.info(f"Credential deleted: {credential.uuid}")
        return credential

    def _check_username_available(self, user: User, application: Application, username: str):
        queryset = Credential.objects.filter(user=user, application=application, username=username)
        if queryset.exists():
            logger.warning(f"Duplicate credential rejected: {username}")
            raise DuplicateError(self._duplicate_message(username))

    @staticmethod
    def _duplicate_message(username: str) -> str:
        return f"Username already exists for this user and application: {username}"
