"""
用户、角色与凭据模型
"""

from django.contrib.auth.hashers import make_password, check_password
from django.db import models

from .base import BaseModel, ALIVE
from .application import Application
from ..constants import (
    TABLE_USERS,
    TABLE_ROLES,
    TABLE_CREDENTIALS,
    IDX_USERS_EMAIL,
    IDX_ROLES_USER_APPLICATION_NAME,
    IDX_CREDS_USER_APPLICATION_NAME,
    NAME_MAX_LENGTH,
    ROLE_NAME_MAX_LENGTH,
    HASH_MAX_LENGTH,
)


class User(BaseModel):
    """用户模型"""

    first_name = models.CharField(max_length=NAME_MAX_LENGTH, blank=True, default='')
    middle_name = models.CharField(max_length=NAME_MAX_LENGTH, blank=True, default='')
    last_name = models.CharField(max_length=NAME_MAX_LENGTH, blank=True, default='')
    preferred_name = models.CharField(max_length=NAME_MAX_LENGTH, blank=True, default='')
    email = models.EmailField(
        max_length=NAME_MAX_LENGTH,
        db_index=True
    )
    email2 = models.EmailField(max_length=NAME_MAX_LENGTH, blank=True, default='')
    phone1 = models.CharField(max_length=50, blank=True, default='')
    phone2 = models.CharField(max_length=50, blank=True, default='')
    address_line1 = models.CharField(max_length=NAME_MAX_LENGTH, blank=True, default='')
    address_line2 = models.CharField(max_length=NAME_MAX_LENGTH, blank=True, default='')
    address_line3 = models.CharField(max_length=NAME_MAX_LENGTH, blank=True, default='')
    location = models.CharField(max_length=NAME_MAX_LENGTH, blank=True, default='')
    logged_in = models.BooleanField(
        default=False
    )

    class Meta(BaseModel.Meta):
        db_table = TABLE_USERS
        constraints = [
            models.UniqueConstraint(
                fields=['email'],
                condition=ALIVE,
                name=IDX_USERS_EMAIL
            ),
        ]

    def __str__(self):
        return self.email

    @property
    def display_name(self):
        """显示名称"""
        if self.preferred_name:
            return self.preferred_name
        full_name = ' '.join(
            part for part in (self.first_name, self.middle_name, self.last_name) if part
        )
        return full_name or self.email

    def live_applications(self):
        """用户加入的有效应用"""
        return Application.objects.filter(
            user_links__user=self,
            user_links__deleted_at__isnull=True
        )


class Role(BaseModel):
    """角色模型 - 限定在 (用户, 应用) 范围内"""

    user = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='roles'
    )
    application = models.ForeignKey(
        Application,
        on_delete=models.CASCADE,
        related_name='roles'
    )
    name = models.CharField(
        max_length=ROLE_NAME_MAX_LENGTH
    )

    class Meta(BaseModel.Meta):
        db_table = TABLE_ROLES
        constraints = [
            models.UniqueConstraint(
                fields=['user', 'application', 'name'],
                condition=ALIVE,
                name=IDX_ROLES_USER_APPLICATION_NAME
            ),
        ]

    def __str__(self):
        return f"{self.user.email} - {self.application.name} ({self.name})"


class Credential(BaseModel):
    """凭据模型 - 用户在某个应用下的登录身份"""

    user = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='credentials'
    )
    application = models.ForeignKey(
        Application,
        on_delete=models.CASCADE,
        related_name='credentials'
    )
    username = models.CharField(
        max_length=NAME_MAX_LENGTH
    )
    password_hash = models.CharField(
        max_length=HASH_MAX_LENGTH,
        blank=True,
        default=''
    )

    class Meta(BaseModel.Meta):
        db_table = TABLE_CREDENTIALS
        constraints = [
            models.UniqueConstraint(
                fields=['user', 'application', 'username'],
                condition=ALIVE,
                name=IDX_CREDS_USER_APPLICATION_NAME
            ),
        ]

    def __str__(self):
        return f"{self.username} @ {self.application.name}"

    def set_password(self, password):
        """设置密码 (不保存)"""
        self.password_hash = make_password(password)

    def check_password(self, password):
        """验证密码"""
        if not self.password_hash:
            return False
        return check_password(password, self.password_hash)
