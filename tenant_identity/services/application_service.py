"""
应用管理服务
"""

import logging
from typing import Optional

from django.db import transaction
from django.db.models import Prefetch

from .base import BaseService
from ..constants import APPLICATION_UPDATABLE_FIELDS
from ..exceptions import ApplicationNotFoundError, DuplicateError, ValidationError
from ..models import Application, Client, Role, User, UserApplication


logger = logging.getLogger(__name__)


class ApplicationService(BaseService):
    """应用管理服务"""

    def create_application(
        self,
        client: Client,
        name: str,
        category: str = '',
        redirect_route: str = '',
        description: str = ''
    ) -> Application:
        """
        创建应用

        Args:
            client: 所属客户
            name: 应用名称 (同一客户下唯一)
            category: 分类
            redirect_route: 登录后跳转路由
            description: 描述

        Returns:
            Application: 创建的应用，API Key 自动生成

        Raises:
            ValidationError: 名称为空
            DuplicateError: 同一客户下名称已存在
        """
        name = self._require(name, 'name')

        with transaction.atomic():
            self._check_name_available(client, name)

            application = Application(
                client=client,
                name=name,
                category=(category or '').strip(),
                redirect_route=(redirect_route or '').strip(),
                description=description or ''
            )
            self._save(application, self._duplicate_message(name))

        logger.info(f"Application created: {application.uuid} for client {client.uuid}")
        return application

    def get_application(self, client: Client, application_uuid, preload: bool = False) -> Application:
        """
        获取客户下的应用

        Args:
            client: 所属客户
            application_uuid: 应用UUID
            preload: 是否预加载角色和成员关系
        """
        queryset = Application.objects.filter(client=client)
        if preload:
            queryset = queryset.prefetch_related(
                Prefetch('roles', queryset=Role.objects.select_related('user', 'application')),
                Prefetch('user_links', queryset=UserApplication.objects.select_related('user')),
            )
        return self._get_by_uuid(queryset, application_uuid, 'Application', ApplicationNotFoundError)

    def get_by_api_key(self, api_key: str) -> Application:
        """按 API Key 获取应用"""
        if not api_key:
            raise ApplicationNotFoundError("Application not found for api key")

        application = Application.objects.select_related('client').filter(
            api_key=api_key,
            client__deleted_at__isnull=True
        ).first()
        if application is None:
            raise ApplicationNotFoundError("Application not found for api key")
        return application

    def list_applications(self, client: Client):
        """客户下的所有应用"""
        return Application.objects.filter(client=client)

    def update_application(self, client: Client, application_uuid, **fields) -> Application:
        """
        更新应用

        Args:
            client: 所属客户
            application_uuid: 应用UUID
            **fields: name, category, redirect_route, description

        Returns:
            Application: 更新后的应用
        """
        self._check_fields(fields, APPLICATION_UPDATABLE_FIELDS)

        with transaction.atomic():
            application = self.get_application(client, application_uuid)

            if 'name' in fields:
                fields['name'] = self._require(fields['name'], 'name')
                self._check_name_available(client, fields['name'], exclude=application)

            self._apply_fields(application, fields)
            self._save(application, self._duplicate_message(application.name))

        logger.info(f"Application updated: {application.uuid} fields={sorted(fields)}")
        return application

    def regenerate_api_key(self, client: Client, application_uuid) -> Application:
        """重新生成 API Key"""
        with transaction.atomic():
            application = self.get_application(client, application_uuid)
            application.regenerate_api_key()
            application.save(update_fields=['api_key', 'updated_at'])

        logger.info(f"Application api key regenerated: {application.uuid}")
        return application

    def delete_application(self, client: Client, application_uuid) -> Application:
        """软删除应用，并级联软删除角色、凭据和成员关系"""
        with transaction.atomic():
            application = self.get_application(client, application_uuid)
            self.cascade_delete(application)

        logger.info(f"Application deleted: {application.uuid}")
        return application

    def cascade_delete(self, application: Application):
        """软删除应用及其子记录 (调用方负责事务)"""
        if self.cascade_soft_delete:
            application.roles.all().soft_delete()
            application.credentials.all().soft_delete()
            application.user_links.all().soft_delete()
        application.soft_delete()

    def add_user(self, application: Application, user: User) -> UserApplication:
        """
        将用户加入应用 (已加入时直接返回已有关联)

        Args:
            application: 应用
            user: 用户

        Returns:
            UserApplication: 关联记录
        """
        if application.is_deleted or user.is_deleted:
            raise ValidationError("Cannot link deleted user or application")

        with transaction.atomic():
            link = UserApplication.objects.filter(user=user, application=application).first()
            if link is not None:
                return link

            link = UserApplication(user=user, application=application)
            self._save(link, f"User {user.email} already belongs to {application.name}")

        logger.info(f"User {user.uuid} added to application {application.uuid}")
        return link

    def remove_user(self, application: Application, user: User) -> bool:
        """
        将用户移出应用，同时软删除该用户在应用下的角色和凭据

        Returns:
            bool: 用户之前是否属于该应用
        """
        with transaction.atomic():
            removed = UserApplication.objects.filter(user=user, application=application).soft_delete()
            application.roles.filter(user=user).soft_delete()
            application.credentials.filter(user=user).soft_delete()

        if removed:
            logger.info(f"User {user.uuid} removed from application {application.uuid}")
        return bool(removed)

    def list_users(self, application: Application):
        """应用的有效用户"""
        return application.live_users()

    def _check_name_available(self, client: Client, name: str, exclude: Optional[Application] = None):
        """检查同一客户下名称是否可用"""
        queryset = Application.objects.filter(client=client, name=name)
        if exclude is not None:
            queryset = queryset.exclude(pk=exclude.pk)
        if queryset.exists():
            logger.warning(f"Duplicate application name rejected: {name}")
            raise DuplicateError(self._duplicate_message(name))

    @staticmethod
    def _duplicate_message(name: str) -> str:
        return f"Application name already exists for this client: {name}"
