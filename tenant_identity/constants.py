"""
Tenant Identity 常量定义
"""

from typing import List

# 表名
TABLE_CLIENTS = 'clients'
TABLE_ORGANIZATIONS = 'organizations'
TABLE_APPLICATIONS = 'applications'
TABLE_USER_APPLICATION = 'user_application'
TABLE_USERS = 'users'
TABLE_ROLES = 'roles'
TABLE_CREDENTIALS = 'credentials'

EXPECTED_TABLES: List[str] = [
    TABLE_CLIENTS,
    TABLE_ORGANIZATIONS,
    TABLE_APPLICATIONS,
    TABLE_USER_APPLICATION,
    TABLE_USERS,
    TABLE_ROLES,
    TABLE_CREDENTIALS,
]

# 唯一索引名称 (仅约束未删除的记录)
IDX_CLIENT_EMAIL = 'idx_client_email'
IDX_ORGANIZATIONS_NAME = 'idx_organizations_name'
IDX_APPLICATIONS_NAME = 'idx_applications_name'
IDX_USER_APPLICATION = 'idx_user_application'
IDX_USERS_EMAIL = 'idx_users_unique'
IDX_ROLES_USER_APPLICATION_NAME = 'idx_roles_userid_applicationid'
IDX_CREDS_USER_APPLICATION_NAME = 'idx_creds_app_id_user_id_name'

# 字段长度
NAME_MAX_LENGTH = 255
ROLE_NAME_MAX_LENGTH = 100
HASH_MAX_LENGTH = 255
SECRET_MAX_LENGTH = 128
ROUTE_MAX_LENGTH = 2048

# 随机密钥字符集 (不含易混淆字符)
SECRET_ALLOWED_CHARS = 'abcdefghjkmnpqrstuvwxyzABCDEFGHJKLMNPQRSTUVWXYZ23456789'

# 可更新字段
CLIENT_UPDATABLE_FIELDS = [
    'name', 'address_line1', 'address_line2', 'address_line3', 'phone', 'email'
]
ORGANIZATION_UPDATABLE_FIELDS = ['name', 'category', 'comments']
APPLICATION_UPDATABLE_FIELDS = ['name', 'category', 'redirect_route', 'description']
USER_UPDATABLE_FIELDS = [
    'first_name', 'middle_name', 'last_name', 'preferred_name',
    'email', 'email2', 'phone1', 'phone2',
    'address_line1', 'address_line2', 'address_line3', 'location'
]


# 错误代码
class ErrorCode:
    VALIDATION_ERROR = 'validation_error'
    DUPLICATE = 'duplicate'
    EMAIL_ALREADY_EXISTS = 'email_already_exists'
    NOT_FOUND = 'not_found'
    INVALID_CREDENTIALS = 'invalid_credentials'
    CONFIGURATION_ERROR = 'configuration_error'
