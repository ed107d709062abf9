"""
Mappers entre UserEntity (Core) e os models do diretório.
"""

from typing import Dict, List

from officehours.core.users.entities import UserEntity

from .models import UserModel


class UserMapper:
    """
    Converte UserModel → UserEntity.

    Espera `secondary_emails` e `role_assignments` pré-carregados
    (prefetch_related) para evitar N+1.
    """

    @staticmethod
    def to_entity(model: UserModel) -> UserEntity:
        roles: Dict[str, List[str]] = {}
        for assignment in model.role_assignments.all():
            roles.setdefault(assignment.scope, []).append(assignment.role)

        return UserEntity(
            id=model.id,
            email=model.email,
            secondary_emails=[s.email for s in model.secondary_emails.all()],
            username=model.username,
            first_name=model.first_name,
            last_name=model.last_name,
            is_online=model.is_online,
            is_idle=model.is_idle,
            roles={scope: sorted(values) for scope, values in roles.items()},
            created_at=model.created_at,
        )

    @staticmethod
    def to_model(entity: UserEntity) -> UserModel:
        return UserModel(
            id=entity.id,
            email=entity.email,
            username=entity.username,
            first_name=entity.first_name,
            last_name=entity.last_name,
            is_online=entity.is_online,
            is_idle=entity.is_idle,
            created_at=entity.created_at,
        )
