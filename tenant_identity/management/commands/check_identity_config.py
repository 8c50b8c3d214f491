"""
检查 Tenant Identity 配置
"""

from django.core.management.base import BaseCommand, CommandError
from django.db import connection
from django.db.utils import OperationalError

from ...conf import identity_settings
from ...constants import EXPECTED_TABLES
from ...exceptions import ConfigurationError


class Command(BaseCommand):
    help = 'Check Tenant Identity configuration'

    def handle(self, *args, **options):
        """执行配置检查"""
        self.stdout.write("🔍 Checking Tenant Identity configuration...")
        self.stdout.write("=" * 60)

        # 检查配置项
        self.stdout.write("\n📋 Configuration Variables:")
        for name, value in identity_settings.as_dict().items():
            self.stdout.write(f"  {name}: {value}")

        try:
            identity_settings.validate()
        except ConfigurationError as e:
            raise CommandError(f"Configuration check failed: {e.message}")

        # 检查数据库连接
        self.stdout.write("\n🔗 Database Connection:")
        try:
            connection.ensure_connection()
        except OperationalError as e:
            self.stdout.write("  ❌ Connection failed")
            raise CommandError(f"Database connection failed: {e}")
        self.stdout.write(f"  ✅ Connection successful ({connection.vendor})")

        # 检查表是否存在
        tables = set(connection.introspection.table_names())
        found = [table for table in EXPECTED_TABLES if table in tables]

        self.stdout.write(f"\n🗂️  Tables Found: {len(found)}/{len(EXPECTED_TABLES)}")
        for table in EXPECTED_TABLES:
            status = "✅" if table in tables else "❌"
            self.stdout.write(f"    {status} {table}")

        if len(found) != len(EXPECTED_TABLES):
            self.stdout.write("  💡 Run 'python manage.py migrate tenant_identity' to create the tables")
            raise CommandError("Missing Tenant Identity tables")

        self.stdout.write(f"\n{'=' * 60}")
        self.stdout.write(self.style.SUCCESS('✅ Configuration check completed!'))
