"""
Tenant Identity - 极简配置
所有配置都有默认值，可通过 Django settings 或环境变量覆盖
"""

from decouple import config, UndefinedValueError
from django.conf import settings

from .exceptions import ConfigurationError


class TenantIdentitySettings:
    """
    配置类 - 读取顺序: settings.TENANT_IDENTITY > 环境变量 TENANT_IDENTITY_<NAME> > 默认值
    """

    ENV_PREFIX = 'TENANT_IDENTITY_'

    DEFAULTS = {
        # 密码配置
        'PASSWORD_MIN_LENGTH': 8,

        # 随机密钥长度
        'API_KEY_LENGTH': 40,
        'SIGNING_SECRET_LENGTH': 64,

        # 登录后默认跳转
        'DEFAULT_REDIRECT_ROUTE': '/',

        # 删除客户/应用/用户时级联软删除子记录
        'CASCADE_SOFT_DELETE': True,

        # 生产数据库 (PostgreSQL)
        'DB_NAME': '',
        'DB_USER': '',
        'DB_PASSWORD': '',
        'DB_HOST': 'localhost',
        'DB_PORT': '5432',
    }

    @property
    def user_settings(self):
        return getattr(settings, 'TENANT_IDENTITY', {})

    def __getattr__(self, name):
        """智能配置获取"""
        if name not in self.DEFAULTS:
            raise AttributeError(f"'{self.__class__.__name__}' object has no attribute '{name}'")

        # 1. 用户显式配置
        if name in self.user_settings:
            return self.user_settings[name]

        # 2. 环境变量，按默认值类型转换
        default_value = self.DEFAULTS[name]
        try:
            return config(f'{self.ENV_PREFIX}{name}', cast=type(default_value))
        except UndefinedValueError:
            pass

        # 3. 默认值
        return default_value

    def validate(self):
        """校验配置"""
        if int(self.PASSWORD_MIN_LENGTH) < 1:
            raise ConfigurationError("PASSWORD_MIN_LENGTH must be a positive integer")

        if int(self.API_KEY_LENGTH) < 16:
            raise ConfigurationError("API_KEY_LENGTH must be at least 16 characters")

        if int(self.SIGNING_SECRET_LENGTH) < 32:
            raise ConfigurationError("SIGNING_SECRET_LENGTH must be at least 32 characters")

    def get_database_config(self):
        """生成 Django DATABASES['default'] 配置 (PostgreSQL)"""
        if not self.DB_NAME:
            raise ConfigurationError(
                "DB_NAME is required. Configure TENANT_IDENTITY['DB_NAME'] "
                "or set TENANT_IDENTITY_DB_NAME"
            )

        return {
            'ENGINE': 'django.db.backends.postgresql',
            'NAME': self.DB_NAME,
            'USER': self.DB_USER,
            'PASSWORD': self.DB_PASSWORD,
            'HOST': self.DB_HOST,
            'PORT': self.DB_PORT,
        }

    def as_dict(self):
        """当前生效配置 (密码脱敏)"""
        values = {name: getattr(self, name) for name in self.DEFAULTS}
        if values.get('DB_PASSWORD'):
            values['DB_PASSWORD'] = '********'
        return values


# 全局配置实例
identity_settings = TenantIdentitySettings()


def get_identity_setting(name, default=None):
    """便捷函数：获取配置项"""
    try:
        return getattr(identity_settings, name)
    except AttributeError:
        return default
