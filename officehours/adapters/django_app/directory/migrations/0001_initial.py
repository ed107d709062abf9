"""
Migration inicial do diretório de usuários.

Cria as tabelas:
- directory_users
- directory_secondary_emails
- directory_role_assignments
"""

from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='UserModel',
            fields=[
                ('id', models.CharField(editable=False, max_length=36, primary_key=True, serialize=False)),
                ('email', models.EmailField(max_length=254, unique=True)),
                ('username', models.CharField(db_index=True, max_length=150)),
                ('first_name', models.CharField(blank=True, default='', max_length=150)),
                ('last_name', models.CharField(blank=True, default='', max_length=150)),
                ('is_online', models.BooleanField(db_index=True, default=False)),
                ('is_idle', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
            ],
            options={
                'verbose_name': 'Usuário',
                'verbose_name_plural': 'Usuários',
                'db_table': 'directory_users',
                'ordering': ['created_at'],
            },
        ),
        migrations.CreateModel(
            name='SecondaryEmailModel',
            fields=[
                ('id', models.BigAutoField(primary_key=True, serialize=False)),
                ('email', models.EmailField(max_length=254, unique=True)),
                ('user', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='secondary_emails',
                    to='directory.usermodel',
                )),
            ],
            options={
                'db_table': 'directory_secondary_emails',
                'ordering': ['id'],
            },
        ),
        migrations.CreateModel(
            name='RoleAssignmentModel',
            fields=[
                ('id', models.BigAutoField(primary_key=True, serialize=False)),
                ('role', models.CharField(
                    choices=[('admin', 'Admin'), ('mta', 'Meta TA'), ('hta', 'Head TA'), ('ta', 'TA')],
                    max_length=10,
                )),
                ('scope', models.CharField(db_index=True, max_length=100)),
                ('user', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='role_assignments',
                    to='directory.usermodel',
                )),
            ],
            options={
                'db_table': 'directory_role_assignments',
                'indexes': [
                    models.Index(fields=['scope', 'role'], name='roles_scope_role_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('user', 'role', 'scope'), name='unique_role_assignment'),
                ],
            },
        ),
    ]
