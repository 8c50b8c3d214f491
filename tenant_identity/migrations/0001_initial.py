import uuid

import django.db.models.deletion
from django.db import migrations, models

import tenant_identity.models.application
import tenant_identity.models.client


def base_fields():
    return [
        ('id', models.BigAutoField(primary_key=True, serialize=False)),
        ('uuid', models.UUIDField(default=uuid.uuid4, editable=False, help_text='对外标识，不暴露内部ID', unique=True)),
        ('created_at', models.DateTimeField(auto_now_add=True)),
        ('updated_at', models.DateTimeField(auto_now=True)),
        ('deleted_at', models.DateTimeField(blank=True, db_index=True, help_text='软删除时间', null=True)),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Client',
            fields=base_fields() + [
                ('name', models.CharField(blank=True, default='', max_length=255)),
                ('address_line1', models.CharField(blank=True, default='', max_length=255)),
                ('address_line2', models.CharField(blank=True, default='', max_length=255)),
                ('address_line3', models.CharField(blank=True, default='', max_length=255)),
                ('phone', models.CharField(blank=True, default='', max_length=50)),
                ('email', models.EmailField(db_index=True, max_length=255)),
                ('password_hash', models.CharField(blank=True, default='', help_text='加盐哈希，明文密码从不保存', max_length=255)),
            ],
            options={
                'db_table': 'clients',
                'ordering': ['id'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='Application',
            fields=base_fields() + [
                ('name', models.CharField(help_text='应用名称，同一客户下唯一', max_length=255)),
                ('category', models.CharField(blank=True, default='', max_length=255)),
                ('api_key', models.CharField(db_index=True, default=tenant_identity.models.application.generate_api_key, max_length=128)),
                ('redirect_route', models.CharField(blank=True, default='', help_text='登录后跳转路由', max_length=2048)),
                ('description', models.TextField(blank=True, default='')),
                ('client', models.ForeignKey(help_text='所属客户', on_delete=django.db.models.deletion.CASCADE, related_name='applications', to='tenant_identity.client')),
            ],
            options={
                'db_table': 'applications',
                'ordering': ['id'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='Organization',
            fields=base_fields() + [
                ('name', models.CharField(help_text='组织名称，同一客户下唯一', max_length=255)),
                ('category', models.CharField(blank=True, default='', max_length=255)),
                ('comments', models.TextField(blank=True, default='')),
                ('signing_secret', models.CharField(default=tenant_identity.models.client.generate_signing_secret, help_text='组织签名密钥', max_length=128)),
                ('client', models.ForeignKey(help_text='所属客户', on_delete=django.db.models.deletion.CASCADE, related_name='organizations', to='tenant_identity.client')),
            ],
            options={
                'db_table': 'organizations',
                'ordering': ['id'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='User',
            fields=base_fields() + [
                ('first_name', models.CharField(blank=True, default='', max_length=255)),
                ('middle_name', models.CharField(blank=True, default='', max_length=255)),
                ('last_name', models.CharField(blank=True, default='', max_length=255)),
                ('preferred_name', models.CharField(blank=True, default='', max_length=255)),
                ('email', models.EmailField(db_index=True, max_length=255)),
                ('email2', models.EmailField(blank=True, default='', max_length=255)),
                ('phone1', models.CharField(blank=True, default='', max_length=50)),
                ('phone2', models.CharField(blank=True, default='', max_length=50)),
                ('address_line1', models.CharField(blank=True, default='', max_length=255)),
                ('address_line2', models.CharField(blank=True, default='', max_length=255)),
                ('address_line3', models.CharField(blank=True, default='', max_length=255)),
                ('location', models.CharField(blank=True, default='', max_length=255)),
                ('logged_in', models.BooleanField(default=False)),
            ],
            options={
                'db_table': 'users',
                'ordering': ['id'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='UserApplication',
            fields=base_fields() + [
                ('application', models.ForeignKey(help_text='应用', on_delete=django.db.models.deletion.CASCADE, related_name='user_links', to='tenant_identity.application')),
                ('user', models.ForeignKey(help_text='用户', on_delete=django.db.models.deletion.CASCADE, related_name='application_links', to='tenant_identity.user')),
            ],
            options={
                'db_table': 'user_application',
                'ordering': ['id'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='Role',
            fields=base_fields() + [
                ('name', models.CharField(max_length=100)),
                ('application', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='roles', to='tenant_identity.application')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='roles', to='tenant_identity.user')),
            ],
            options={
                'db_table': 'roles',
                'ordering': ['id'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='Credential',
            fields=base_fields() + [
                ('username', models.CharField(max_length=255)),
                ('password_hash', models.CharField(blank=True, default='', max_length=255)),
                ('application', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='credentials', to='tenant_identity.application')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='credentials', to='tenant_identity.user')),
            ],
            options={
                'db_table': 'credentials',
                'ordering': ['id'],
                'abstract': False,
            },
        ),
        migrations.AddConstraint(
            model_name='client',
            constraint=models.UniqueConstraint(condition=models.Q(('deleted_at__isnull', True)), fields=('email',), name='idx_client_email'),
        ),
        migrations.AddConstraint(
            model_name='organization',
            constraint=models.UniqueConstraint(condition=models.Q(('deleted_at__isnull', True)), fields=('client', 'name'), name='idx_organizations_name'),
        ),
        migrations.AddConstraint(
            model_name='application',
            constraint=models.UniqueConstraint(condition=models.Q(('deleted_at__isnull', True)), fields=('client', 'name'), name='idx_applications_name'),
        ),
        migrations.AddConstraint(
            model_name='userapplication',
            constraint=models.UniqueConstraint(condition=models.Q(('deleted_at__isnull', True)), fields=('user', 'application'), name='idx_user_application'),
        ),
        migrations.AddConstraint(
            model_name='user',
            constraint=models.UniqueConstraint(condition=models.Q(('deleted_at__isnull', True)), fields=('email',), name='idx_users_unique'),
        ),
        migrations.AddConstraint(
            model_name='role',
            constraint=models.UniqueConstraint(condition=models.Q(('deleted_at__isnull', True)), fields=('user', 'application', 'name'), name='idx_roles_userid_applicationid'),
        ),
        migrations.AddConstraint(
            model_name='credential',
            constraint=models.UniqueConstraint(condition=models.Q(('deleted_at__isnull', True)), fields=('user', 'application', 'username'), name='idx_creds_app_id_user_id_name'),
        ),
    ]
