"""
客户(租户)与组织模型
"""

from django.contrib.auth.hashers import make_password, check_password
from django.db import models

from .base import BaseModel, ALIVE, generate_secret
from ..conf import identity_settings
from ..constants import (
    TABLE_CLIENTS,
    TABLE_ORGANIZATIONS,
    IDX_CLIENT_EMAIL,
    IDX_ORGANIZATIONS_NAME,
    NAME_MAX_LENGTH,
    HASH_MAX_LENGTH,
    SECRET_MAX_LENGTH,
)


def generate_signing_secret():
    """生成组织签名密钥"""
    return generate_secret(int(identity_settings.SIGNING_SECRET_LENGTH))


class Client(BaseModel):
    """客户模型 - 租户根节点"""

    name = models.CharField(
        max_length=NAME_MAX_LENGTH,
        blank=True,
        default=''
    )
    address_line1 = models.CharField(
        max_length=NAME_MAX_LENGTH,
        blank=True,
        default=''
    )
    address_line2 = models.CharField(
        max_length=NAME_MAX_LENGTH,
        blank=True,
        default=''
    )
    address_line3 = models.CharField(
        max_length=NAME_MAX_LENGTH,
        blank=True,
        default=''
    )
    phone = models.CharField(
        max_length=50,
        blank=True,
        default=''
    )
    email = models.EmailField(
        max_length=NAME_MAX_LENGTH,
        db_index=True
    )
    password_hash = models.CharField(
        max_length=HASH_MAX_LENGTH,
        blank=True,
        default='',
        help_text="加盐哈希，明文密码从不保存"
    )

    class Meta(BaseModel.Meta):
        db_table = TABLE_CLIENTS
        constraints = [
            models.UniqueConstraint(
                fields=['email'],
                condition=ALIVE,
                name=IDX_CLIENT_EMAIL
            ),
        ]

    def __str__(self):
        return self.email

    def set_password(self, password):
        """设置密码 (不保存)"""
        self.password_hash = make_password(password)

    def check_password(self, password):
        """验证密码"""
        if not self.password_hash:
            return False
        return check_password(password, self.password_hash)


class Organization(BaseModel):
    """组织模型"""

    client = models.ForeignKey(
        Client,
        on_delete=models.CASCADE,
        related_name='organizations',
        help_text="所属客户"
    )
    name = models.CharField(
        max_length=NAME_MAX_LENGTH,
        help_text="组织名称，同一客户下唯一"
    )
    category = models.CharField(
        max_length=NAME_MAX_LENGTH,
        blank=True,
        default=''
    )
    comments = models.TextField(
        blank=True,
        default=''
    )
    signing_secret = models.CharField(
        max_length=SECRET_MAX_LENGTH,
        default=generate_signing_secret,
        help_text="组织签名密钥"
    )

    class Meta(BaseModel.Meta):
        db_table = TABLE_ORGANIZATIONS
        constraints = [
            models.UniqueConstraint(
                fields=['client', 'name'],
                condition=ALIVE,
                name=IDX_ORGANIZATIONS_NAME
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.client.email})"

    def rotate_signing_secret(self):
        """更换签名密钥 (不保存)"""
        self.signing_secret = generate_signing_secret()
        return self.signing_secret
