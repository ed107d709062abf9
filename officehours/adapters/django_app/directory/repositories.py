"""
Repositórios Django do diretório de usuários.

Implementam os Ports de officehours.core.users:
- DjangoIdentityResolver: email → user_id, com provisionamento
- DjangoAuthorizationOracle: papéis por escopo
- DjangoUserDirectory: consultas somente-leitura
"""

from typing import Iterable, List, Optional
import logging

from django.db.models import Q

from officehours.core.users.entities import (
    GLOBAL_SCOPE,
    Role,
    UserEntity,
    normalize_email,
    validate_email,
)

from .mappers import UserMapper
from .models import RoleAssignmentModel, SecondaryEmailModel, UserModel

logger = logging.getLogger(__name__)


def _users():
    return UserModel.objects.prefetch_related('secondary_emails', 'role_assignments')


class DjangoIdentityResolver:
    """
    Resolve emails em ids, provisionando contas mínimas.

    A unicidade de UserModel.email garante um único usuário por
    email mesmo com criações concorrentes: get_or_create relê a
    linha vencedora quando o INSERT colide.

    Example:
        resolver = DjangoIdentityResolver()
        user_id = resolver.resolve("ana@brown.edu")
    """

    def resolve(self, email: str) -> str:
        normalized = validate_email(email)

        secondary = SecondaryEmailModel.objects.filter(email=normalized).first()
        if secondary is not None:
            return secondary.user_id

        entity = UserEntity.provision(normalized)
        model, created = UserModel.objects.get_or_create(
            email=normalized,
            defaults={
                'id': entity.id,
                'username': entity.username,
                'created_at': entity.created_at,
            },
        )

        if created:
            logger.info(f"User provisioned: {model.id}")
        return model.id


class DjangoAuthorizationOracle:
    """Consulta RoleAssignmentModel; escopo global vale para qualquer curso."""

    def has_role(self, user_id: Optional[str], roles: Iterable[Role], scope: str) -> bool:
        if not user_id:
            return False
        return RoleAssignmentModel.objects.filter(
            user_id=user_id,
            role__in=[role.value for role in roles],
            scope__in=[scope, GLOBAL_SCOPE],
        ).exists()

    def users_in_role(self, roles: Iterable[Role], scope: str) -> List[str]:
        user_ids = RoleAssignmentModel.objects.filter(
            role__in=[role.value for role in roles],
            scope__in=[scope, GLOBAL_SCOPE],
        ).values_list('user_id', flat=True)
        return sorted(set(user_ids))

    def grant(self, user_id: str, role: Role, scope: str = GLOBAL_SCOPE) -> None:
        """Atribui papel (idempotente)."""
        RoleAssignmentModel.objects.get_or_create(user_id=user_id, role=role.value, scope=scope)

    def revoke(self, user_id: str, role: Role, scope: str = GLOBAL_SCOPE) -> None:
        RoleAssignmentModel.objects.filter(user_id=user_id, role=role.value, scope=scope).delete()


class DjangoUserDirectory:
    """Consultas somente-leitura; ordem segue os ids pedidos."""

    def __init__(self):
        self._mapper = UserMapper()

    def get_by_id(self, user_id: str) -> Optional[UserEntity]:
        model = _users().filter(id=user_id).first()
        return self._mapper.to_entity(model) if model else None

    def list_by_ids(self, user_ids: Iterable[str]) -> List[UserEntity]:
        user_ids = list(dict.fromkeys(user_ids))
        by_id = {model.id: model for model in _users().filter(id__in=user_ids)}
        return [self._mapper.to_entity(by_id[uid]) for uid in user_ids if uid in by_id]

    def list_by_emails(self, emails: Iterable[str]) -> List[UserEntity]:
        wanted = [normalize_email(e) for e in emails]
        models = _users().filter(
            Q(email__in=wanted) | Q(secondary_emails__email__in=wanted)
        ).distinct()
        return [self._mapper.to_entity(model) for model in models]

    def add(self, user: UserEntity) -> UserEntity:
        """Cria usuário com emails secundários (setup e testes)."""
        model = UserMapper.to_model(user)
        model.save(force_insert=True)
        for email in user.secondary_emails:
            SecondaryEmailModel.objects.create(user=model, email=normalize_email(email))
        return user
