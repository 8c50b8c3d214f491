"""
Django测试配置 - 用于 Tenant Identity 测试
"""

import os

# 基础配置
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DEBUG = False
SECRET_KEY = 'test-secret-key-for-testing-only-please-change-in-production'
ALLOWED_HOSTS = ['localhost', '127.0.0.1', 'testserver']

# 应用配置
INSTALLED_APPS = [
    'django.contrib.contenttypes',
    'django.contrib.auth',
    'rest_framework',
    'tenant_identity',
]

MIDDLEWARE = []

# 数据库配置 - 使用内存数据库
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# 国际化
LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

# 测试时使用快速哈希
PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',
]

# Tenant Identity配置
TENANT_IDENTITY = {
    'PASSWORD_MIN_LENGTH': 8,
    'API_KEY_LENGTH': 40,
    'SIGNING_SECRET_LENGTH': 64,
    'DEFAULT_REDIRECT_ROUTE': '/dashboard',
}

# 日志配置
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
        },
    },
    'loggers': {
        'tenant_identity': {
            'handlers': ['console'],
            'level': 'WARNING',
        },
    },
}
