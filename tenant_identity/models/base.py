"""
基础模型类
"""

from uuid import uuid4

from django.db import IntegrityError, models, transaction
from django.db.models import Q
from django.utils import timezone
from django.utils.crypto import get_random_string

from ..constants import SECRET_ALLOWED_CHARS
from ..exceptions import DuplicateError


class SoftDeleteQuerySet(models.QuerySet):
    """支持软删除的查询集"""

    def alive(self):
        return self.filter(deleted_at__isnull=True)

    def dead(self):
        return self.filter(deleted_at__isnull=False)

    def soft_delete(self):
        """批量软删除，返回受影响行数"""
        now = timezone.now()
        return self.filter(deleted_at__isnull=True).update(deleted_at=now, updated_at=now)


class SoftDeleteManager(models.Manager.from_queryset(SoftDeleteQuerySet)):
    """默认管理器：只返回未删除的记录"""

    def get_queryset(self):
        return super().get_queryset().alive()


class AllObjectsManager(models.Manager.from_queryset(SoftDeleteQuerySet)):
    """包含已删除记录的管理器"""
    pass


class BaseModel(models.Model):
    """基础模型类"""

    id = models.BigAutoField(
        primary_key=True
    )
    uuid = models.UUIDField(
        default=uuid4,
        unique=True,
        editable=False,
        help_text="对外标识，不暴露内部ID"
    )
    created_at = models.DateTimeField(
        auto_now_add=True
    )
    updated_at = models.DateTimeField(
        auto_now=True
    )
    deleted_at = models.DateTimeField(
        null=True,
        blank=True,
        db_index=True,
        help_text="软删除时间"
    )

    objects = SoftDeleteManager()
    all_objects = AllObjectsManager()

    class Meta:
        abstract = True
        ordering = ['id']

    @property
    def is_deleted(self):
        """是否已软删除"""
        return self.deleted_at is not None

    def soft_delete(self):
        """软删除"""
        if self.deleted_at is None:
            self.deleted_at = timezone.now()
            self.save(update_fields=['deleted_at', 'updated_at'])

    def restore(self):
        """
        恢复软删除的记录

        Raises:
            DuplicateError: 名称/邮箱已被未删除的记录占用，记录保持删除状态
        """
        if self.deleted_at is None:
            return

        deleted_at, self.deleted_at = self.deleted_at, None
        try:
            with transaction.atomic():
                self.save(update_fields=['deleted_at', 'updated_at'])
        except IntegrityError:
            self.deleted_at = deleted_at
            raise DuplicateError(
                f"Cannot restore {self.__class__.__name__} {self.uuid}: a live record already uses its unique values"
            )


# 唯一约束只作用于未删除的记录
ALIVE = Q(deleted_at__isnull=True)


def generate_secret(length: int) -> str:
    """生成随机密钥"""
    return get_random_string(length, allowed_chars=SECRET_ALLOWED_CHARS)
