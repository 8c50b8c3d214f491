"""
测试序列化器输出的 JSON 字段
"""

from django.test import TestCase

from ..exceptions import EmailAlreadyExistsError, ValidationError
from ..models import ClientCredential, LoginRedirect, LoginToken
from ..serializers import (
    ApplicationSerializer,
    ClientCredentialSerializer,
    ClientSerializer,
    CredentialSerializer,
    LoginRedirectSerializer,
    LoginTokenSerializer,
    OrganizationSerializer,
    RoleSerializer,
    UserSerializer,
)
from ..services import (
    ApplicationService,
    ClientService,
    CredentialService,
    OrganizationService,
    RoleService,
    UserService,
)

HIDDEN_KEYS = {'id', 'password', 'password_hash', 'new_pwd', 'signing_secret', 'deleted_at'}


def collect_keys(data):
    """递归收集输出中的所有键"""
    keys = set()
    if isinstance(data, dict):
        for key, value in data.items():
            keys.add(key)
            keys |= collect_keys(value)
    elif isinstance(data, list):
        for item in data:
            keys |= collect_keys(item)
    return keys


class SerializerTest(TestCase):
    """测试对外字段契约"""

    def setUp(self):
        self.client_obj = ClientService().create_client(
            email="tenant@example.com",
            password="SecurePassword123!",
            name="Acme",
            address_line1="1 Main St"
        )
        self.organization = OrganizationService().create_organization(
            self.client_obj, "Engineering", category="internal"
        )
        self.application = ApplicationService().create_application(
            self.client_obj, "Portal", redirect_route="/portal"
        )
        self.user = UserService().create_user(
            "user@example.com",
            application=self.application,
            username="jdoe",
            password="UserPassword123!",
            first_name="Jane",
            last_name="Doe"
        )
        RoleService().assign_role(self.user, self.application, "admin")

    def test_client_serializer(self):
        """测试客户输出"""
        data = ClientSerializer(self.client_obj).data

        self.assertEqual(data['uuid'], str(self.client_obj.uuid))
        self.assertEqual(data['addressline1'], "1 Main St")
        self.assertEqual(data['email'], "tenant@example.com")
        self.assertEqual(len(data['organizations']), 1)
        self.assertEqual(data['organizations'][0]['client_uuid'], str(self.client_obj.uuid))
        self.assertEqual(data['applications'][0]['redirect'], "/portal")
        self.assertFalse(collect_keys(data) & HIDDEN_KEYS)

    def test_client_serializer_hides_deleted_children(self):
        """测试不输出已删除的子记录"""
        OrganizationService().delete_organization(self.client_obj, self.organization.uuid)

        data = ClientSerializer(self.client_obj).data

        self.assertEqual(data['organizations'], [])

    def test_organization_serializer(self):
        """测试组织输出不包含签名密钥"""
        data = OrganizationSerializer(self.organization).data

        self.assertEqual(
            set(data),
            {'uuid', 'client_uuid', 'name', 'category', 'comments'}
        )

    def test_application_serializer(self):
        """测试应用输出"""
        data = ApplicationSerializer(self.application).data

        self.assertEqual(data['apikey'], self.application.api_key)
        self.assertEqual(data['redirect'], "/portal")
        self.assertEqual(data['client_uuid'], str(self.client_obj.uuid))
        self.assertEqual([role['name'] for role in data['roles']], ["admin"])
        self.assertEqual(data['roles'][0]['user_uuid'], str(self.user.uuid))
        self.assertEqual(data['users'][0]['first'], "Jane")
        self.assertNotIn('preload', data)
        self.assertFalse(collect_keys(data) & HIDDEN_KEYS)

    def test_application_serializer_input(self):
        """测试应用输入字段映射"""
        serializer = ApplicationSerializer(data={
            'name': "Admin",
            'redirect': "/admin",
            'preload': True
        })

        self.assertTrue(serializer.is_valid(), serializer.errors)
        self.assertEqual(serializer.validated_data['redirect_route'], "/admin")
        self.assertTrue(serializer.validated_data['preload'])

    def test_user_serializer(self):
        """测试用户输出"""
        data = UserSerializer(self.user).data

        self.assertEqual(data['first'], "Jane")
        self.assertEqual(data['last'], "Doe")
        self.assertEqual(data['applications'][0]['uuid'], str(self.application.uuid))
        self.assertEqual(data['credentials'][0]['username'], "jdoe")
        self.assertEqual(data['credentials'][0]['application_uuid'], str(self.application.uuid))
        self.assertNotIn('username', data)
        self.assertFalse(collect_keys(data) & HIDDEN_KEYS)

    def test_user_serializer_input(self):
        """测试用户输入接受密码但不回显"""
        serializer = UserSerializer(data={
            'email': "new@example.com",
            'first': "John",
            'username': "john",
            'password': "UserPassword123!"
        })

        self.assertTrue(serializer.is_valid(), serializer.errors)
        self.assertEqual(serializer.validated_data['first_name'], "John")
        self.assertEqual(serializer.validated_data['password'], "UserPassword123!")

    def test_credential_serializer(self):
        """测试凭据输出不包含密码"""
        credential = CredentialService().list_credentials(self.user).get()

        data = CredentialSerializer(credential).data

        self.assertEqual(set(data), {'uuid', 'username', 'user_uuid', 'application_uuid'})

    def test_client_credential_serializer(self):
        """测试登录请求"""
        serializer = ClientCredentialSerializer(data={
            'email': "Tenant@Example.com",
            'password': "SecurePassword123!"
        })

        self.assertTrue(serializer.is_valid(), serializer.errors)
        credential = serializer.save()

        self.assertIsInstance(credential, ClientCredential)
        self.assertEqual(credential.email, "tenant@example.com")
        self.assertEqual(ClientService().check_credentials(credential), self.client_obj)

    def test_client_credential_serializer_requires_password(self):
        """测试登录请求缺少密码"""
        serializer = ClientCredentialSerializer(data={'email': "tenant@example.com"})

        self.assertFalse(serializer.is_valid())
        self.assertIn('password', serializer.errors)

    def test_login_token_serializer(self):
        """测试登录结果输出"""
        data = LoginTokenSerializer(LoginToken(client=self.client_obj, token="issued-token")).data

        self.assertEqual(data['token'], "issued-token")
        self.assertEqual(data['client']['uuid'], str(self.client_obj.uuid))
        self.assertFalse(collect_keys(data) & HIDDEN_KEYS)

    def test_login_redirect_serializer(self):
        """测试跳转指令输出"""
        redirect = LoginRedirect(
            client_uuid=str(self.client_obj.uuid),
            application_uuid=str(self.application.uuid),
            redirect_route="/portal"
        )

        data = LoginRedirectSerializer(redirect).data

        self.assertEqual(
            dict(data),
            {
                'client_uuid': str(self.client_obj.uuid),
                'application_uuid': str(self.application.uuid),
                'redirect': "/portal",
            }
        )


class SerializerSaveTest(TestCase):
    """测试序列化器写入经由服务层"""

    def setUp(self):
        self.client_obj = ClientService().create_client(
            email="tenant@example.com",
            password="SecurePassword123!"
        )
        self.application = ApplicationService().create_application(self.client_obj, "Portal")
        self.user = UserService().create_user("user@example.com")

    def test_client_create_and_change_password(self):
        """测试创建客户并修改密码"""
        serializer = ClientSerializer(data={
            'email': "Acme@Example.com",
            'password': "SecurePassword123!",
            'addressline1': "1 Main St"
        })
        self.assertTrue(serializer.is_valid(), serializer.errors)
        client = serializer.save()

        self.assertEqual(client.email, "acme@example.com")
        self.assertEqual(client.address_line1, "1 Main St")
        self.assertTrue(client.check_password("SecurePassword123!"))
        self.assertNotIn('password', serializer.data)

        serializer = ClientSerializer(client, data={
            'password': "SecurePassword123!",
            'new_pwd': "AnotherPassword456!",
            'phone': "+1234567890"
        }, partial=True)
        self.assertTrue(serializer.is_valid(), serializer.errors)
        client = serializer.save()

        client.refresh_from_db()
        self.assertTrue(client.check_password("AnotherPassword456!"))
        self.assertEqual(client.phone, "+1234567890")

    def test_client_create_duplicate_email(self):
        """测试创建重复邮箱的客户"""
        serializer = ClientSerializer(data={'email': "tenant@example.com", 'password': "SecurePassword123!"})
        self.assertTrue(serializer.is_valid(), serializer.errors)

        with self.assertRaises(EmailAlreadyExistsError):
            serializer.save()

    def test_organization_create_and_update(self):
        """测试创建和更新组织"""
        serializer = OrganizationSerializer(data={'name': "Engineering", 'category': "internal"})
        self.assertTrue(serializer.is_valid(), serializer.errors)
        organization = serializer.save(client=self.client_obj)

        self.assertEqual(organization.client, self.client_obj)
        self.assertTrue(organization.signing_secret)

        serializer = OrganizationSerializer(organization, data={'comments': "Core team"}, partial=True)
        self.assertTrue(serializer.is_valid(), serializer.errors)
        self.assertEqual(serializer.save().comments, "Core team")

    def test_organization_create_requires_client(self):
        """测试创建组织必须指定客户"""
        serializer = OrganizationSerializer(data={'name': "Engineering"})
        self.assertTrue(serializer.is_valid(), serializer.errors)

        with self.assertRaises(ValidationError):
            serializer.save()

    def test_application_create_with_preload(self):
        """测试创建应用并预加载"""
        serializer = ApplicationSerializer(data={'name': "Admin", 'redirect': "/admin", 'preload': True})
        self.assertTrue(serializer.is_valid(), serializer.errors)
        application = serializer.save(client=self.client_obj)

        self.assertEqual(application.redirect_route, "/admin")
        self.assertEqual(len(application.api_key), 40)
        with self.assertNumQueries(0):
            list(application.roles.all())
        self.assertEqual(serializer.data['apikey'], application.api_key)

    def test_application_update(self):
        """测试更新应用"""
        serializer = ApplicationSerializer(self.application, data={'description': "Portal app"}, partial=True)
        self.assertTrue(serializer.is_valid(), serializer.errors)

        self.assertEqual(serializer.save().description, "Portal app")

    def test_user_create_with_credential(self):
        """测试创建用户并创建凭据"""
        serializer = UserSerializer(data={
            'email': "jane@example.com",
            'first': "Jane",
            'username': "jane",
            'password': "UserPassword123!"
        })
        self.assertTrue(serializer.is_valid(), serializer.errors)
        user = serializer.save(application=self.application)

        self.assertEqual(user.first_name, "Jane")
        credential = CredentialService().list_credentials(user, self.application).get()
        self.assertTrue(credential.check_password("UserPassword123!"))
        self.assertEqual(serializer.data['applications'][0]['uuid'], str(self.application.uuid))

    def test_user_update(self):
        """测试更新用户资料"""
        serializer = UserSerializer(self.user, data={'location': "Berlin"}, partial=True)
        self.assertTrue(serializer.is_valid(), serializer.errors)

        self.assertEqual(serializer.save().location, "Berlin")

    def test_user_update_rejects_password(self):
        """测试更新用户不能修改密码"""
        serializer = UserSerializer(self.user, data={'password': "UserPassword123!"}, partial=True)
        self.assertTrue(serializer.is_valid(), serializer.errors)

        with self.assertRaises(ValidationError):
            serializer.save()

    def test_role_create_and_rename(self):
        """测试授予和重命名角色"""
        serializer = RoleSerializer(data={'name': "admin"})
        self.assertTrue(serializer.is_valid(), serializer.errors)
        role = serializer.save(user=self.user, application=self.application)

        self.assertTrue(self.application.has_user(self.user))

        serializer = RoleSerializer(role, data={'name': "owner"})
        self.assertTrue(serializer.is_valid(), serializer.errors)
        self.assertEqual(serializer.save().name, "owner")

    def test_credential_create_and_change_password(self):
        """测试创建凭据并修改密码"""
        serializer = CredentialSerializer(data={'username': "jdoe", 'password': "UserPassword123!"})
        self.assertTrue(serializer.is_valid(), serializer.errors)
        credential = serializer.save(user=self.user, application=self.application)

        self.assertTrue(credential.check_password("UserPassword123!"))
        self.assertEqual(set(serializer.data), {'uuid', 'username', 'user_uuid', 'application_uuid'})

        serializer = CredentialSerializer(credential, data={
            'password': "UserPassword123!",
            'new_pwd': "NewPassword456!"
        }, partial=True)
        self.assertTrue(serializer.is_valid(), serializer.errors)
        serializer.save()

        self.assertTrue(CredentialService().verify_password(credential.uuid, "NewPassword456!"))

    def test_credential_username_cannot_change(self):
        """测试不能修改凭据登录名"""
        credential = CredentialService().create_credential(
            self.user, self.application, "jdoe", "UserPassword123!"
        )
        serializer = CredentialSerializer(credential, data={'username': "other"}, partial=True)
        self.assertTrue(serializer.is_valid(), serializer.errors)

        with self.assertRaises(ValidationError):
            serializer.save()
