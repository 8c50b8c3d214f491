"""
应用相关模型
"""

from django.db import models

from .base import BaseModel, ALIVE, generate_secret
from .client import Client
from ..conf import identity_settings
from ..constants import (
    TABLE_APPLICATIONS,
    TABLE_USER_APPLICATION,
    IDX_APPLICATIONS_NAME,
    IDX_USER_APPLICATION,
    NAME_MAX_LENGTH,
    SECRET_MAX_LENGTH,
    ROUTE_MAX_LENGTH,
)


def generate_api_key():
    """生成应用API Key"""
    return generate_secret(int(identity_settings.API_KEY_LENGTH))


class Application(BaseModel):
    """应用模型"""

    client = models.ForeignKey(
        Client,
        on_delete=models.CASCADE,
        related_name='applications',
        help_text="所属客户"
    )
    name = models.CharField(
        max_length=NAME_MAX_LENGTH,
        help_text="应用名称，同一客户下唯一"
    )
    category = models.CharField(
        max_length=NAME_MAX_LENGTH,
        blank=True,
        default=''
    )
    api_key = models.CharField(
        max_length=SECRET_MAX_LENGTH,
        default=generate_api_key,
        db_index=True
    )
    redirect_route = models.CharField(
        max_length=ROUTE_MAX_LENGTH,
        blank=True,
        default='',
        help_text="登录后跳转路由"
    )
    description = models.TextField(
        blank=True,
        default=''
    )

    class Meta(BaseModel.Meta):
        db_table = TABLE_APPLICATIONS
        constraints = [
            models.UniqueConstraint(
                fields=['client', 'name'],
                condition=ALIVE,
                name=IDX_APPLICATIONS_NAME
            ),
        ]

    def __str__(self):
        return self.name

    def live_users(self):
        """应用的有效用户"""
        from .user import User
        return User.objects.filter(
            application_links__application=self,
            application_links__deleted_at__isnull=True
        )

    def has_user(self, user):
        """用户是否属于该应用"""
        return self.user_links.filter(user=user).exists()

    def regenerate_api_key(self):
        """重新生成API Key (不保存)"""
        self.api_key = generate_api_key()
        return self.api_key


class UserApplication(BaseModel):
    """用户-应用关联表"""

    user = models.ForeignKey(
        'User',
        on_delete=models.CASCADE,
        related_name='application_links',
        help_text="用户"
    )
    application = models.ForeignKey(
        Application,
        on_delete=models.CASCADE,
        related_name='user_links',
        help_text="应用"
    )

    class Meta(BaseModel.Meta):
        db_table = TABLE_USER_APPLICATION
        constraints = [
            models.UniqueConstraint(
                fields=['user', 'application'],
                condition=ALIVE,
                name=IDX_USER_APPLICATION
            ),
        ]

    def __str__(self):
        return f"{self.user.email} - {self.application.name}"
