"""
Tenant Identity 序列化器 - 对外 JSON 字段契约

内部自增ID、外键ID、密码哈希和签名密钥从不输出，对外只暴露UUID。
明文密码字段只写不读。写入时经由服务层创建和更新，所属对象通过 save() 的关键字参数传入，
例如 ApplicationSerializer(data=...).save(client=client)。
"""

from rest_framework import serializers

from .exceptions import ValidationError
from .models import (
    Application,
    Client,
    ClientCredential,
    Credential,
    Organization,
    Role,
    User,
)
from .services import (
    ApplicationService,
    ClientService,
    CredentialService,
    OrganizationService,
    RoleService,
    UserService,
)


def pop_owner(validated_data, name):
    """取出 save() 传入的所属对象"""
    owner = validated_data.pop(name, None)
    if owner is None:
        raise ValidationError(f"{name} is required, pass it to save()")
    return owner


class RoleSerializer(serializers.ModelSerializer):
    """角色"""

    user_uuid = serializers.UUIDField(source='user.uuid', read_only=True)
    application_uuid = serializers.UUIDField(source='application.uuid', read_only=True)

    class Meta:
        model = Role
        fields = ['uuid', 'name', 'user_uuid', 'application_uuid']
        read_only_fields = ['uuid']
        validators = []

    def create(self, validated_data):
        user = pop_owner(validated_data, 'user')
        application = pop_owner(validated_data, 'application')
        return RoleService().assign_role(user, application, validated_data['name'])

    def update(self, instance, validated_data):
        if 'name' not in validated_data:
            return instance
        return RoleService().rename_role(instance.uuid, validated_data['name'])


class CredentialSerializer(serializers.ModelSerializer):
    """凭据"""

    password = serializers.CharField(write_only=True, required=False, style={'input_type': 'password'})
    new_pwd = serializers.CharField(write_only=True, required=False, style={'input_type': 'password'})
    user_uuid = serializers.UUIDField(source='user.uuid', read_only=True)
    application_uuid = serializers.UUIDField(source='application.uuid', read_only=True)

    class Meta:
        model = Credential
        fields = ['uuid', 'username', 'password', 'new_pwd', 'user_uuid', 'application_uuid']
        read_only_fields = ['uuid']
        validators = []

    def create(self, validated_data):
        user = pop_owner(validated_data, 'user')
        application = pop_owner(validated_data, 'application')
        return CredentialService().create_credential(
            user,
            application,
            validated_data.get('username'),
            validated_data.get('password')
        )

    def update(self, instance, validated_data):
        username = validated_data.get('username', instance.username)
        if username != instance.username:
            raise ValidationError("username cannot be changed")

        if validated_data.get('new_pwd'):
            return CredentialService().change_password(
                instance.uuid,
                validated_data.get('password'),
                validated_data['new_pwd']
            )
        return instance


class OrganizationSerializer(serializers.ModelSerializer):
    """组织"""

    client_uuid = serializers.UUIDField(source='client.uuid', read_only=True)

    class Meta:
        model = Organization
        fields = ['uuid', 'client_uuid', 'name', 'category', 'comments']
        read_only_fields = ['uuid']
        validators = []

    def create(self, validated_data):
        client = pop_owner(validated_data, 'client')
        return OrganizationService().create_organization(client, **validated_data)

    def update(self, instance, validated_data):
        return OrganizationService().update_organization(instance.client, instance.uuid, **validated_data)


class ApplicationSummarySerializer(serializers.ModelSerializer):
    """应用摘要 - 嵌套在客户和用户中"""

    redirect = serializers.CharField(source='redirect_route', read_only=True)

    class Meta:
        model = Application
        fields = ['uuid', 'name', 'category', 'redirect']
        read_only_fields = fields


class UserSummarySerializer(serializers.ModelSerializer):
    """用户摘要 - 嵌套在应用中"""

    first = serializers.CharField(source='first_name', read_only=True)
    middle = serializers.CharField(source='middle_name', read_only=True)
    last = serializers.CharField(source='last_name', read_only=True)
    preferred = serializers.CharField(source='preferred_name', read_only=True)

    class Meta:
        model = User
        fields = ['uuid', 'first', 'middle', 'last', 'preferred', 'email']
        read_only_fields = fields


class ApplicationSerializer(serializers.ModelSerializer):
    """应用"""

    client_uuid = serializers.UUIDField(source='client.uuid', read_only=True)
    apikey = serializers.CharField(source='api_key', read_only=True)
    redirect = serializers.CharField(source='redirect_route', required=False, allow_blank=True, max_length=2048)
    roles = RoleSerializer(many=True, read_only=True)
    users = serializers.SerializerMethodField()
    preload = serializers.BooleanField(write_only=True, required=False, default=False)

    class Meta:
        model = Application
        fields = [
            'uuid', 'client_uuid', 'name', 'category', 'apikey', 'redirect',
            'description', 'roles', 'users', 'preload'
        ]
        read_only_fields = ['uuid']
        validators = []

    def get_users(self, obj):
        return UserSummarySerializer(obj.live_users(), many=True).data

    def create(self, validated_data):
        client = pop_owner(validated_data, 'client')
        preload = validated_data.pop('preload', False)
        service = ApplicationService()

        application = service.create_application(client, **validated_data)
        if preload:
            application = service.get_application(client, application.uuid, preload=True)
        return application

    def update(self, instance, validated_data):
        preload = validated_data.pop('preload', False)
        service = ApplicationService()

        application = service.update_application(instance.client, instance.uuid, **validated_data)
        if preload:
            application = service.get_application(instance.client, application.uuid, preload=True)
        return application


class UserSerializer(serializers.ModelSerializer):
    """用户"""

    first = serializers.CharField(source='first_name', required=False, allow_blank=True, max_length=255)
    middle = serializers.CharField(source='middle_name', required=False, allow_blank=True, max_length=255)
    last = serializers.CharField(source='last_name', required=False, allow_blank=True, max_length=255)
    preferred = serializers.CharField(source='preferred_name', required=False, allow_blank=True, max_length=255)
    email = serializers.EmailField(max_length=255)
    addressline1 = serializers.CharField(source='address_line1', required=False, allow_blank=True, max_length=255)
    addressline2 = serializers.CharField(source='address_line2', required=False, allow_blank=True, max_length=255)
    addressline3 = serializers.CharField(source='address_line3', required=False, allow_blank=True, max_length=255)
    username = serializers.CharField(write_only=True, required=False)
    password = serializers.CharField(write_only=True, required=False, style={'input_type': 'password'})
    roles = RoleSerializer(many=True, read_only=True)
    credentials = CredentialSerializer(many=True, read_only=True)
    applications = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            'uuid', 'first', 'middle', 'last', 'preferred', 'email', 'email2',
            'phone1', 'phone2', 'addressline1', 'addressline2', 'addressline3',
            'location', 'username', 'password', 'roles', 'credentials', 'applications'
        ]
        read_only_fields = ['uuid']
        validators = []

    def get_applications(self, obj):
        return ApplicationSummarySerializer(obj.live_applications(), many=True).data

    def create(self, validated_data):
        application = validated_data.pop('application', None)
        username = validated_data.pop('username', None)
        password = validated_data.pop('password', None)
        email = validated_data.pop('email')

        return UserService().create_user(
            email,
            application=application,
            username=username,
            password=password,
            **validated_data
        )

    def update(self, instance, validated_data):
        if 'username' in validated_data or 'password' in validated_data:
            raise ValidationError("username and password are managed through credentials")
        return UserService().update_user(instance.uuid, **validated_data)


class ClientSerializer(serializers.ModelSerializer):
    """客户"""

    addressline1 = serializers.CharField(source='address_line1', required=False, allow_blank=True, max_length=255)
    addressline2 = serializers.CharField(source='address_line2', required=False, allow_blank=True, max_length=255)
    addressline3 = serializers.CharField(source='address_line3', required=False, allow_blank=True, max_length=255)
    email = serializers.EmailField(max_length=255)
    password = serializers.CharField(write_only=True, required=False, style={'input_type': 'password'})
    new_pwd = serializers.CharField(write_only=True, required=False, style={'input_type': 'password'})
    organizations = OrganizationSerializer(many=True, read_only=True)
    applications = ApplicationSummarySerializer(many=True, read_only=True)

    class Meta:
        model = Client
        fields = [
            'uuid', 'name', 'addressline1', 'addressline2', 'addressline3',
            'phone', 'email', 'password', 'new_pwd', 'organizations', 'applications'
        ]
        read_only_fields = ['uuid']
        validators = []

    def create(self, validated_data):
        validated_data.pop('new_pwd', None)
        password = validated_data.pop('password', None)
        email = validated_data.pop('email')
        return ClientService().create_client(email, password, **validated_data)

    def update(self, instance, validated_data):
        password = validated_data.pop('password', None)
        new_pwd = validated_data.pop('new_pwd', None)
        service = ClientService()

        if new_pwd:
            instance = service.change_password(instance.uuid, password, new_pwd)
        if validated_data:
            instance = service.update_client(instance.uuid, **validated_data)
        return instance


class ClientCredentialSerializer(serializers.Serializer):
    """客户登录请求"""

    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, style={'input_type': 'password'})

    def create(self, validated_data):
        return ClientCredential(
            email=validated_data['email'].strip().lower(),
            password=validated_data['password']
        )


class LoginTokenSerializer(serializers.Serializer):
    """登录结果"""

    client = ClientSerializer(read_only=True)
    token = serializers.CharField(read_only=True)


class LoginRedirectSerializer(serializers.Serializer):
    """登录后跳转指令"""

    client_uuid = serializers.CharField(read_only=True)
    application_uuid = serializers.CharField(read_only=True)
    redirect = serializers.CharField(source='redirect_route', read_only=True)
