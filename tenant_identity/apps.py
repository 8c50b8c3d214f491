import logging

from django.apps import AppConfig


logger = logging.getLogger(__name__)


class TenantIdentityConfig(AppConfig):
    """Tenant Identity 应用配置"""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'tenant_identity'
    verbose_name = 'Tenant Identity'

    def ready(self):
        """应用初始化时校验配置"""
        from django.conf import settings

        if getattr(settings, 'DEBUG', False):
            from .conf import identity_settings
            from .exceptions import ConfigurationError

            try:
                identity_settings.validate()
                logger.info("Tenant Identity configuration validated")
            except ConfigurationError as e:
                logger.warning(f"Tenant Identity configuration issue: {e.message}")
