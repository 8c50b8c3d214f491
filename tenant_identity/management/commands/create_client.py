"""
创建 Tenant Identity 客户(租户)
"""

from getpass import getpass

from django.core.management.base import BaseCommand, CommandError

from ...exceptions import EmailAlreadyExistsError, ValidationError
from ...services import ClientService


class Command(BaseCommand):
    help = 'Create a Tenant Identity client (tenant)'

    def add_arguments(self, parser):
        parser.add_argument(
            '--email',
            type=str,
            help='Email address for the client'
        )
        parser.add_argument(
            '--password',
            type=str,
            help='Password for the client'
        )
        parser.add_argument(
            '--name',
            type=str,
            help='Display name for the client'
        )
        parser.add_argument(
            '--noinput',
            action='store_true',
            help='Do not prompt for missing values'
        )

    def handle(self, *args, **options):
        """执行创建"""
        email = options.get('email')
        password = options.get('password')
        name = options.get('name')
        interactive = not options.get('noinput')

        # 交互式输入
        if not email and interactive:
            email = input('Email: ').strip()

        if not password and interactive:
            password = getpass('Password: ')
            confirm_password = getpass('Confirm password: ')
            if password != confirm_password:
                raise CommandError("Passwords do not match")

        if name is None and interactive:
            name = input('Name (optional): ').strip()

        if not email:
            raise CommandError("Email is required")

        if not password:
            raise CommandError("Password is required")

        self.stdout.write(f"🚀 Creating client: {email}")

        try:
            client = ClientService().create_client(
                email=email,
                password=password,
                name=name or ''
            )
        except EmailAlreadyExistsError:
            raise CommandError(f'Client with email "{email}" already exists')
        except ValidationError as e:
            raise CommandError(f"Validation error: {e.message}")

        self.stdout.write(self.style.SUCCESS('✅ Client created successfully!'))
        self.stdout.write(f"   UUID: {client.uuid}")
        self.stdout.write(f"   Email: {client.email}")
        if client.name:
            self.stdout.write(f"   Name: {client.name}")
