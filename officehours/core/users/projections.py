"""
Projeções de Visibilidade de Usuários.

Cada leitura do diretório devolve apenas os campos permitidos pelo
nível de visibilidade do chamador. A ordem de abrangência é garantida
por construção:

    PRIVATE ⊇ PROTECTED ⊇ PUBLIC

Campos aninhados usam notação com ponto ("status.online").
"""

from enum import Enum
from typing import Any, Dict, Iterable, Tuple

from .entities import UserEntity


PUBLIC_FIELDS: Tuple[str, ...] = ("id", "username", "first_name", "last_name")

PROTECTED_FIELDS: Tuple[str, ...] = PUBLIC_FIELDS + ("email", "secondary_emails")

PRIVATE_FIELDS: Tuple[str, ...] = PROTECTED_FIELDS + ("roles", "status", "created_at")

PRESENCE_FIELDS: Tuple[str, ...] = ("status.online", "status.idle")


class Visibility(Enum):
    """Níveis de divulgação de campos de usuário."""

    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"

    @property
    def fields(self) -> Tuple[str, ...]:
        return {
            Visibility.PUBLIC: PUBLIC_FIELDS,
            Visibility.PROTECTED: PROTECTED_FIELDS,
            Visibility.PRIVATE: PRIVATE_FIELDS,
        }[self]


def _full_view(user: UserEntity) -> Dict[str, Any]:
    return {
        "id": user.id,
        "username": user.username,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "email": user.email,
        "secondary_emails": list(user.secondary_emails),
        "roles": {scope: list(roles) for scope, roles in user.roles.items()},
        "status": {"online": user.is_online, "idle": user.is_idle},
        "created_at": user.created_at.isoformat() if user.created_at else None,
    }


def project(user: UserEntity, fields: Iterable[str]) -> Dict[str, Any]:
    """
    Projeta usuário no conjunto de campos informado.

    Args:
        user: Usuário do diretório
        fields: Campos permitidos (suporta "status.online")

    Returns:
        Dicionário contendo somente os campos permitidos
    """
    source = _full_view(user)
    result: Dict[str, Any] = {}

    for name in fields:
        head, _, tail = name.partition(".")
        if head not in source:
            continue
        if tail:
            result.setdefault(head, {})[tail] = source[head][tail]
        else:
            result[head] = source[head]

    return result
