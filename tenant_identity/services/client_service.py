"""
客户(租户)服务
"""

import logging
from typing import Optional

from django.db import transaction

from .base import BaseService
from .application_service import ApplicationService
from ..conf import identity_settings
from ..constants import CLIENT_UPDATABLE_FIELDS
from ..exceptions import (
    ClientNotFoundError,
    EmailAlreadyExistsError,
    InvalidCredentialsError,
)
from ..models import Client, ClientCredential, LoginRedirect, LoginToken


logger = logging.getLogger(__name__)


class ClientService(BaseService):
    """客户服务"""

    def create_client(self, email: str, password: str, **profile) -> Client:
        """
        创建客户

        Args:
            email: 邮箱 (未删除客户中唯一)
            password: 明文密码，只保存哈希
            **profile: name, address_line1..3, phone

        Returns:
            Client: 创建的客户

        Raises:
            ValidationError: 邮箱/密码不合法或包含未知字段
            EmailAlreadyExistsError: 邮箱已存在
        """
        email = self._normalize_email(email)
        self._validate_password(password)
        self._check_fields(profile, CLIENT_UPDATABLE_FIELDS)
        profile.pop('email', None)

        with transaction.atomic():
            self._check_email_available(email)

            client = Client(email=email)
            self._apply_fields(client, profile)
            client.set_password(password)
            self._save(client, f"Email already exists: {email}", EmailAlreadyExistsError)

        logger.info(f"Client created: {client.uuid}")
        return client

    def get_client(self, client_uuid) -> Client:
        """按UUID获取客户"""
        return self._get_by_uuid(Client.objects.all(), client_uuid, 'Client', ClientNotFoundError)

    def get_client_by_email(self, email: str) -> Client:
        """按邮箱获取客户"""
        client = Client.objects.filter(email=(email or '').strip().lower()).first()
        if client is None:
            raise ClientNotFoundError(f"Client not found: {email}")
        return client

    def list_clients(self):
        """所有未删除的客户"""
        return Client.objects.all()

    def update_client(self, client_uuid, **fields) -> Client:
        """
        更新客户资料

        Args:
            client_uuid: 客户UUID
            **fields: name, address_line1..3, phone, email

        Returns:
            Client: 更新后的客户
        """
        self._check_fields(fields, CLIENT_UPDATABLE_FIELDS)

        with transaction.atomic():
            client = self.get_client(client_uuid)

            if 'email' in fields:
                fields['email'] = self._normalize_email(fields['email'])
                self._check_email_available(fields['email'], exclude=client)

            self._apply_fields(client, fields)
            self._save(client, f"Email already exists: {client.email}", EmailAlreadyExistsError)

        logger.info(f"Client updated: {client.uuid} fields={sorted(fields)}")
        return client

    def change_password(self, client_uuid, password: str, new_pwd: str) -> Client:
        """
        修改客户密码

        Args:
            client_uuid: 客户UUID
            password: 当前密码
            new_pwd: 新密码

        Raises:
            InvalidCredentialsError: 当前密码错误
        """
        self._validate_password(new_pwd, 'new_pwd')

        with transaction.atomic():
            client = self.get_client(client_uuid)
            if not client.check_password(password):
                logger.warning(f"Password change rejected for client {client.uuid}")
                raise InvalidCredentialsError("Invalid credentials")

            client.set_password(new_pwd)
            client.save(update_fields=['password_hash', 'updated_at'])

        logger.info(f"Client password changed: {client.uuid}")
        return client

    def delete_client(self, client_uuid) -> Client:
        """软删除客户，并级联软删除其组织和应用"""
        application_service = ApplicationService()

        with transaction.atomic():
            client = self.get_client(client_uuid)

            if self.cascade_soft_delete:
                client.organizations.all().soft_delete()
                for application in client.applications.all():
                    application_service.cascade_delete(application)

            client.soft_delete()

        logger.info(f"Client deleted: {client.uuid}")
        return client

    def check_credentials(self, credential: ClientCredential) -> Client:
        """
        校验客户登录请求

        Args:
            credential: 邮箱 + 明文密码

        Returns:
            Client: 校验通过的客户

        Raises:
            InvalidCredentialsError: 邮箱不存在或密码错误
        """
        try:
            client = self.get_client_by_email(credential.email)
        except ClientNotFoundError:
            logger.warning("Client login rejected: unknown email")
            raise InvalidCredentialsError("Invalid credentials")

        if not client.check_password(credential.password):
            logger.warning(f"Client login rejected: {client.uuid}")
            raise InvalidCredentialsError("Invalid credentials")

        return client

    @staticmethod
    def build_login_token(client: Client, token: str) -> LoginToken:
        """组装登录结果，token 由外部签发"""
        return LoginToken(client=client, token=token)

    def build_login_redirect(self, client: Client, application_uuid) -> LoginRedirect:
        """
        生成登录后跳转指令

        Args:
            client: 已认证的客户
            application_uuid: 目标应用UUID

        Returns:
            LoginRedirect: 应用未配置路由时使用 DEFAULT_REDIRECT_ROUTE
        """
        application = ApplicationService().get_application(client, application_uuid)

        return LoginRedirect(
            client_uuid=str(client.uuid),
            application_uuid=str(application.uuid),
            redirect_route=application.redirect_route or identity_settings.DEFAULT_REDIRECT_ROUTE
        )

    def _check_email_available(self, email: str, exclude: Optional[Client] = None):
        """检查邮箱是否可用"""
        queryset = Client.objects.filter(email=email)
        if exclude is not None:
            queryset = queryset.exclude(pk=exclude.pk)
        if queryset.exists():
            logger.warning("Duplicate client email rejected")
            raise EmailAlreadyExistsError(f"Email already exists: {email}")
