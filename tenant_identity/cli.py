"""
Tenant Identity CLI 工具
提供命令行接口用于检查配置和快速创建客户、组织、应用
"""

import os
import sys
import argparse


def main(argv=None):
    """CLI 主入口"""
    parser = argparse.ArgumentParser(
        description='Tenant Identity 管理工具',
        prog='tenant-identity'
    )
    parser.add_argument('--settings', help='Django settings 模块 (默认读取 DJANGO_SETTINGS_MODULE)')
    subparsers = parser.add_subparsers(dest='command', help='可用命令')

    # 检查配置命令
    subparsers.add_parser('check', help='检查配置和数据表')

    # 创建客户命令
    create_client_parser = subparsers.add_parser('create-client', help='创建客户(租户)')
    create_client_parser.add_argument('--email', required=True, help='邮箱')
    create_client_parser.add_argument('--password', required=True, help='密码')
    create_client_parser.add_argument('--name', default='', help='名称')

    # 创建组织命令
    create_organization_parser = subparsers.add_parser('create-organization', help='创建组织')
    create_organization_parser.add_argument('--client-uuid', required=True, help='客户UUID')
    create_organization_parser.add_argument('--name', required=True, help='组织名称')
    create_organization_parser.add_argument('--category', default='', help='分类')

    # 创建应用命令
    create_application_parser = subparsers.add_parser('create-application', help='创建应用')
    create_application_parser.add_argument('--client-uuid', required=True, help='客户UUID')
    create_application_parser.add_argument('--name', required=True, help='应用名称')
    create_application_parser.add_argument('--redirect', default='', help='登录后跳转路由')
    create_application_parser.add_argument('--description', default='', help='应用描述')

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    if not (args.settings or os.environ.get('DJANGO_SETTINGS_MODULE')):
        print("❌ 错误: 请通过 --settings 或 DJANGO_SETTINGS_MODULE 指定 Django settings 模块")
        return 1

    setup_django(args.settings)

    from .exceptions import IdentityError

    # 执行对应命令
    try:
        if args.command == 'check':
            check_config(args)
        elif args.command == 'create-client':
            create_client(args)
        elif args.command == 'create-organization':
            create_organization(args)
        elif args.command == 'create-application':
            create_application(args)
    except IdentityError as e:
        print(f"❌ 错误: {e.message}")
        return 1

    return 0


def setup_django(settings_module=None):
    """初始化 Django"""
    import django

    if settings_module:
        os.environ['DJANGO_SETTINGS_MODULE'] = settings_module
    django.setup()


def check_config(args):
    """检查配置"""
    from django.core.management import call_command
    call_command('check_identity_config')


def create_client(args):
    """创建客户"""
    from .services import ClientService

    client = ClientService().create_client(
        email=args.email,
        password=args.password,
        name=args.name
    )

    print(f"✅ 客户 '{client.email}' 创建成功")
    print(f"📋 客户UUID: {client.uuid}")


def create_organization(args):
    """创建组织"""
    from .services import ClientService, OrganizationService

    client = ClientService().get_client(args.client_uuid)
    organization = OrganizationService().create_organization(
        client,
        name=args.name,
        category=args.category
    )

    print(f"✅ 组织 '{organization.name}' 创建成功")
    print(f"📋 组织UUID: {organization.uuid}")


def create_application(args):
    """创建应用"""
    from .services import ApplicationService, ClientService

    client = ClientService().get_client(args.client_uuid)
    application = ApplicationService().create_application(
        client,
        name=args.name,
        redirect_route=args.redirect,
        description=args.description
    )

    print(f"✅ 应用 '{application.name}' 创建成功")
    print(f"📋 应用UUID: {application.uuid}")
    print(f"🔑 API Key: {application.api_key}")


if __name__ == '__main__':
    sys.exit(main())
