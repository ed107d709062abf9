"""
Django Models do diretório de usuários.

Persistência dos colaboradores externos do ciclo de vida dos tickets:
- UserModel: usuário (email principal único)
- SecondaryEmailModel: emails adicionais (também únicos)
- RoleAssignmentModel: papel de equipe por escopo (curso ou global)

Models NÃO contêm lógica de negócio; conversão via Mappers.
"""

from django.db import models
from django.utils import timezone


class RoleChoices(models.TextChoices):
    """Choices para papéis (espelha Role do Core)."""
    ADMIN = 'admin', 'Admin'
    MTA = 'mta', 'Meta TA'
    HTA = 'hta', 'Head TA'
    TA = 'ta', 'TA'


class UserModel(models.Model):
    """
    Usuário do diretório.

    Fields:
        id: UUID gerado pela Entity
        email: Email principal, normalizado (único)
        username: Derivado da parte local do email no provisionamento
        is_online / is_idle: Presença
    """

    id = models.CharField(max_length=36, primary_key=True, editable=False)

    email = models.EmailField(max_length=254, unique=True)

    username = models.CharField(max_length=150, db_index=True)

    first_name = models.CharField(max_length=150, blank=True, default='')
    last_name = models.CharField(max_length=150, blank=True, default='')

    is_online = models.BooleanField(default=False, db_index=True)
    is_idle = models.BooleanField(default=False)

    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'directory_users'
        verbose_name = 'Usuário'
        verbose_name_plural = 'Usuários'
        ordering = ['created_at']

    def __str__(self):
        return self.email


class SecondaryEmailModel(models.Model):
    """Email adicional de um usuário."""

    id = models.BigAutoField(primary_key=True)

    user = models.ForeignKey(
        UserModel,
        on_delete=models.CASCADE,
        related_name='secondary_emails',
    )

    email = models.EmailField(max_length=254, unique=True)

    class Meta:
        db_table = 'directory_secondary_emails'
        ordering = ['id']

    def __str__(self):
        return f"{self.email} -> {self.user_id[:8]}"


class RoleAssignmentModel(models.Model):
    """
    Papel de um usuário em um escopo.

    scope é o course_id ou "__global_roles__" (vale para todos os cursos).
    """

    id = models.BigAutoField(primary_key=True)

    user = models.ForeignKey(
        UserModel,
        on_delete=models.CASCADE,
        related_name='role_assignments',
    )

    role = models.CharField(max_length=10, choices=RoleChoices.choices)

    scope = models.CharField(max_length=100, db_index=True)

    class Meta:
        db_table = 'directory_role_assignments'
        constraints = [
            models.UniqueConstraint(fields=['user', 'role', 'scope'], name='unique_role_assignment'),
        ]
        indexes = [
            models.Index(fields=['scope', 'role'], name='roles_scope_role_idx'),
        ]

    def __str__(self):
        return f"{self.user_id[:8]}:{self.role}@{self.scope}"
