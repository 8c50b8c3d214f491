"""
测试组织服务
"""

import uuid
from unittest.mock import patch

from django.test import TestCase

from ..exceptions import DuplicateError, OrganizationNotFoundError, ValidationError
from ..models import Client, Organization
from ..services import OrganizationService


class OrganizationServiceTest(TestCase):
    """测试组织服务"""

    def setUp(self):
        self.service = OrganizationService()
        self.client_obj = Client.objects.create(email="tenant@example.com")
        self.other_client = Client.objects.create(email="other@example.com")

    def test_create_organization(self):
        """测试创建组织"""
        organization = self.service.create_organization(
            self.client_obj,
            name=" Engineering ",
            category="internal",
            comments="Core team"
        )

        self.assertEqual(organization.name, "Engineering")
        self.assertEqual(organization.category, "internal")
        self.assertEqual(organization.client, self.client_obj)
        self.assertTrue(organization.signing_secret)

    def test_create_organization_requires_name(self):
        """测试名称必填"""
        with self.assertRaises(ValidationError):
            self.service.create_organization(self.client_obj, name="  ")

    def test_create_organization_duplicate_name(self):
        """测试同一客户下重复名称"""
        self.service.create_organization(self.client_obj, name="Engineering")

        with self.assertRaises(DuplicateError) as ctx:
            self.service.create_organization(self.client_obj, name="Engineering")

        self.assertEqual(ctx.exception.error_code, 'duplicate')
        self.assertEqual(Organization.objects.filter(client=self.client_obj).count(), 1)

    def test_names_distinct_per_client(self):
        """测试同一客户下组织名称两两不同"""
        for name in ["Engineering", "Sales", "Support"]:
            self.service.create_organization(self.client_obj, name=name)
        self.service.create_organization(self.other_client, name="Engineering")

        for name in ["Sales", "Support"]:
            with self.assertRaises(DuplicateError):
                self.service.create_organization(self.client_obj, name=name)

        names = list(self.service.list_organizations(self.client_obj).values_list('name', flat=True))
        self.assertEqual(len(names), len(set(names)))
        self.assertEqual(len(names), 3)

    def test_get_organization_scoped_to_client(self):
        """测试只能获取本客户的组织"""
        organization = self.service.create_organization(self.client_obj, name="Engineering")

        self.assertEqual(self.service.get_organization(self.client_obj, organization.uuid), organization)

        with self.assertRaises(OrganizationNotFoundError):
            self.service.get_organization(self.other_client, organization.uuid)

        with self.assertRaises(OrganizationNotFoundError):
            self.service.get_organization(self.client_obj, uuid.uuid4())

    def test_update_organization(self):
        """测试更新组织"""
        organization = self.service.create_organization(self.client_obj, name="Engineering")

        updated = self.service.update_organization(
            self.client_obj,
            organization.uuid,
            name="Platform",
            comments="Renamed"
        )

        self.assertEqual(updated.name, "Platform")
        self.assertEqual(updated.comments, "Renamed")

        # 保持原名称不算冲突
        self.service.update_organization(self.client_obj, organization.uuid, name="Platform")

    def test_update_organization_duplicate_name(self):
        """测试更新为已存在的名称"""
        self.service.create_organization(self.client_obj, name="Engineering")
        sales = self.service.create_organization(self.client_obj, name="Sales")

        with self.assertRaises(DuplicateError):
            self.service.update_organization(self.client_obj, sales.uuid, name="Engineering")

    def test_update_organization_rejects_secret(self):
        """测试不能直接更新签名密钥"""
        organization = self.service.create_organization(self.client_obj, name="Engineering")

        with self.assertRaises(ValidationError):
            self.service.update_organization(self.client_obj, organization.uuid, signing_secret="x")

    def test_rotate_signing_secret(self):
        """测试更换签名密钥"""
        organization = self.service.create_organization(self.client_obj, name="Engineering")
        old_secret = organization.signing_secret

        rotated = self.service.rotate_signing_secret(self.client_obj, organization.uuid)

        rotated.refresh_from_db()
        self.assertNotEqual(rotated.signing_secret, old_secret)

    def test_delete_organization(self):
        """测试软删除组织"""
        organization = self.service.create_organization(self.client_obj, name="Engineering")

        self.service.delete_organization(self.client_obj, organization.uuid)

        with self.assertRaises(OrganizationNotFoundError):
            self.service.get_organization(self.client_obj, organization.uuid)
        self.assertEqual(self.service.list_organizations(self.client_obj).count(), 0)
        self.assertTrue(Organization.all_objects.filter(pk=organization.pk).exists())

        # 删除后名称可重用
        self.service.create_organization(self.client_obj, name="Engineering")

    def test_update_organization_null_field(self):
        """测试非空字段传入 None 返回验证错误"""
        organization = self.service.create_organization(self.client_obj, name="Engineering", category="internal")

        with self.assertRaises(ValidationError):
            self.service.update_organization(self.client_obj, organization.uuid, category=None)

        organization.refresh_from_db()
        self.assertEqual(organization.category, "internal")

    def test_duplicate_name_rejected_by_constraint(self):
        """测试跳过预检查时由数据库约束拒绝重复名称"""
        self.service.create_organization(self.client_obj, name="Engineering")

        with patch.object(OrganizationService, '_check_name_available'):
            with self.assertRaises(DuplicateError) as ctx:
                self.service.create_organization(self.client_obj, name="Engineering")

        self.assertIn("Engineering", ctx.exception.message)
        self.assertEqual(Organization.all_objects.filter(client=self.client_obj).count(), 1)
