"""
组织管理服务
"""

import logging
from typing import Optional

from django.db import transaction

from .base import BaseService
from ..constants import ORGANIZATION_UPDATABLE_FIELDS
from ..exceptions import DuplicateError, OrganizationNotFoundError
from ..models import Client, Organization


logger = logging.getLogger(__name__)


class OrganizationService(BaseService):
    """组织管理服务"""

    def create_organization(self, client: Client, name: str, category: str = '', comments: str = '') -> Organization:
        """
        创建组织

        Args:
            client: 所属客户
            name: 组织名称 (同一客户下唯一)
            category: 分类
            comments: 备注

        Returns:
            Organization: 创建的组织，签名密钥自动生成

        Raises:
            ValidationError: 名称为空
            DuplicateError: 同一客户下名称已存在
        """
        name = self._require(name, 'name')

        with transaction.atomic():
            self._check_name_available(client, name)

            organization = Organization(
                client=client,
                name=name,
                category=(category or '').strip(),
                comments=comments or ''
            )
            self._save(organization, self._duplicate_message(name))

        logger.info(f"Organization created: {organization.uuid} for client {client.uuid}")
        return organization

    def get_organization(self, client: Client, organization_uuid) -> Organization:
        """获取客户下的组织"""
        return self._get_by_uuid(
            Organization.objects.filter(client=client),
            organization_uuid,
            'Organization',
            OrganizationNotFoundError
        )

    def list_organizations(self, client: Client):
        """客户下的所有组织"""
        return Organization.objects.filter(client=client)

    def update_organization(self, client: Client, organization_uuid, **fields) -> Organization:
        """
        更新组织

        Args:
            client: 所属客户
            organization_uuid: 组织UUID
            **fields: name, category, comments
        """
        self._check_fields(fields, ORGANIZATION_UPDATABLE_FIELDS)

        with transaction.atomic():
            organization = self.get_organization(client, organization_uuid)

            if 'name' in fields:
                fields['name'] = self._require(fields['name'], 'name')
                self._check_name_available(client, fields['name'], exclude=organization)

            self._apply_fields(organization, fields)
            self._save(organization, self._duplicate_message(organization.name))

        logger.info(f"Organization updated: {organization.uuid} fields={sorted(fields)}")
        return organization

    def rotate_signing_secret(self, client: Client, organization_uuid) -> Organization:
        """更换组织签名密钥"""
        with transaction.atomic():
            organization = self.get_organization(client, organization_uuid)
            organization.rotate_signing_secret()
            organization.save(update_fields=['signing_secret', 'updated_at'])

        logger.info(f"Organization signing secret rotated: {organization.uuid}")
        return organization

    def delete_organization(self, client: Client, organization_uuid) -> Organization:
        """软删除组织"""
        with transaction.atomic():
            organization = self.get_organization(client, organization_uuid)
            organization.soft_delete()

        logger.info(f"Organization deleted: {organization.uuid}")
        return organization

    def _check_name_available(self, client: Client, name: str, exclude: Optional[Organization] = None):
        """检查同一客户下名称是否可用"""
        queryset = Organization.objects.filter(client=client, name=name)
        if exclude is not None:
            queryset = queryset.exclude(pk=exclude.pk)
        if queryset.exists():
            logger.warning(f"Duplicate organization name rejected: {name}")
            raise DuplicateError(self._duplicate_message(name))

    @staticmethod
    def _duplicate_message(name: str) -> str:
        return f"Organization name already exists for this client: {name}"
