"""
用户服务
"""

import logging
from typing import Optional

from django.db import transaction

from .base import BaseService
from .application_service import ApplicationService
from ..constants import USER_UPDATABLE_FIELDS
from ..exceptions import EmailAlreadyExistsError, UserNotFoundError, ValidationError
from ..models import Application, User


logger = logging.getLogger(__name__)


class UserService(BaseService):
    """用户服务"""

    def create_user(
        self,
        email: str,
        application: Optional[Application] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        **profile
    ) -> User:
        """
        创建用户

        Args:
            email: 邮箱 (未删除用户中唯一)
            application: 加入的应用 (可选)
            username: 应用下的登录名 (可选，需同时提供 application 和 password)
            password: 应用下的登录密码
            **profile: first_name, last_name 等资料字段

        Returns:
            User: 创建的用户

        Raises:
            ValidationError: 字段不合法
            EmailAlreadyExistsError: 邮箱已存在
        """
        email = self._normalize_email(email)
        self._check_fields(profile, USER_UPDATABLE_FIELDS)
        profile.pop('email', None)
        if profile.get('email2'):
            profile['email2'] = self._normalize_email(profile['email2'], 'email2')

        if (username or password) and application is None:
            raise ValidationError("application is required to create a credential")

        with transaction.atomic():
            self._check_email_available(email)

            user = User(email=email)
            self._apply_fields(user, profile)
            self._save(user, f"Email already exists: {email}", EmailAlreadyExistsError)

            if application is not None:
                ApplicationService().add_user(application, user)

                if username or password:
                    from .credential_service import CredentialService
                    CredentialService().create_credential(user, application, username, password)

        logger.info(f"User created: {user.uuid}")
        return user

    def get_user(self, user_uuid) -> User:
        """按UUID获取用户"""
        return self._get_by_uuid(User.objects.all(), user_uuid, 'User', UserNotFoundError)

    def get_user_by_email(self, email: str) -> User:
        """按邮箱获取用户"""
        user = User.objects.filter(email=(email or '').strip().lower()).first()
        if user is None:
            raise UserNotFoundError(f"User not found: {email}")
        return user

    def list_users(self):
        """所有未删除的用户"""
        return User.objects.all()

    def list_applications(self, user: User):
        """用户加入的应用"""
        return user.live_applications()

    def update_user(self, user_uuid, **fields) -> User:
        """
        更新用户资料

        Args:
            user_uuid: 用户UUID
            **fields: 资料字段，见 USER_UPDATABLE_FIELDS
        """
        self._check_fields(fields, USER_UPDATABLE_FIELDS)

        with transaction.atomic():
            user = self.get_user(user_uuid)

            if 'email' in fields:
                fields['email'] = self._normalize_email(fields['email'])
                self._check_email_available(fields['email'], exclude=user)
            if fields.get('email2'):
                fields['email2'] = self._normalize_email(fields['email2'], 'email2')

            self._apply_fields(user, fields)
            self._save(user, f"Email already exists: {user.email}", EmailAlreadyExistsError)

        logger.info(f"User updated: {user.uuid} fields={sorted(fields)}")
        return user

    def delete_user(self, user_uuid) -> User:
        """软删除用户，并级联软删除其角色、凭据和应用关联"""
        with transaction.atomic():
            user = self.get_user(user_uuid)

            if self.cascade_soft_delete:
                user.roles.all().soft_delete()
                user.credentials.all().soft_delete()
                user.application_links.all().soft_delete()

            user.soft_delete()

        logger.info(f"User deleted: {user.uuid}")
        return user

    def _check_email_available(self, email: str, exclude: Optional[User] = None):
        """检查邮箱是否可用"""
        queryset = User.objects.filter(email=email)
        if exclude is not None:
            queryset = queryset.exclude(pk=exclude.pk)
        if queryset.exists():
            logger.warning("Duplicate user email rejected")
            raise EmailAlreadyExistsError(f"Email already exists: {email}")
