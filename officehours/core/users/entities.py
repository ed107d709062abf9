"""
Entidades do Domínio de Usuários.

O diretório de usuários é externo ao ciclo de vida dos tickets:
o core apenas consulta usuários por email, provisiona contas mínimas
e verifica papéis por curso.

Entidades:
- UserEntity: usuário do diretório
- Role: papéis de equipe, sempre com escopo de curso
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional
import re

from officehours.core.shared.events import utc_now
from officehours.core.shared.exceptions import ValidationError
from officehours.core.shared.identifiers import new_id


class Role(Enum):
    """
    Papéis de equipe de um curso.

    Hierarquia informal: ADMIN > MTA > HTA > TA > (estudante implícito).
    Estudantes não têm papel atribuído.
    """

    ADMIN = "admin"
    MTA = "mta"
    HTA = "hta"
    TA = "ta"

    @classmethod
    def from_string(cls, value: str) -> "Role":
        """
        Converte string (nome ou valor) para enum.

        Raises:
            ValueError: Se papel inválido
        """
        for role in cls:
            if value.lower() in (role.value, role.name.lower()):
                return role
        raise ValueError(f"Papel inválido: {value}")


# Papéis "TA ou acima": podem operar qualquer ticket do curso
STAFF_ROLES = frozenset({Role.ADMIN, Role.MTA, Role.HTA, Role.TA})

# Papéis listados como equipe de atendimento do curso
COURSE_STAFF_ROLES = frozenset({Role.HTA, Role.TA})

# Escopo cujas atribuições valem para todos os cursos
GLOBAL_SCOPE = "__global_roles__"


def normalize_email(email: str) -> str:
    """Normaliza email para comparação (trim + minúsculas)."""
    return (email or "").strip().lower()


EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def validate_email(email: str, field_name: str = "email") -> str:
    """
    Valida e normaliza um email.

    Raises:
        ValidationError: Se o email não é sintaticamente válido
    """
    normalized = normalize_email(email)
    if not EMAIL_RE.match(normalized):
        raise ValidationError(f"Email inválido: {email}", field=field_name)
    return normalized


@dataclass
class UserEntity:
    """
    Entidade de Domínio: Usuário do diretório.

    Attributes:
        id: Identificador único
        email: Email principal (único no diretório)
        secondary_emails: Emails adicionais (também únicos)
        username: Nome de usuário
        first_name / last_name: Nome exibido
        is_online / is_idle: Presença
        roles: Papéis por escopo ({course_id: ["ta", ...]})
        created_at: Data/hora de criação
    """

    id: str = field(default_factory=new_id)
    email: str = ""
    secondary_emails: List[str] = field(default_factory=list)
    username: str = ""
    first_name: str = ""
    last_name: str = ""
    is_online: bool = False
    is_idle: bool = False
    roles: Dict[str, List[str]] = field(default_factory=dict)
    created_at: datetime = field(default_factory=utc_now)

    @classmethod
    def provision(cls, email: str, user_id: Optional[str] = None) -> "UserEntity":
        """
        Cria conta mínima a partir de um email.

        Usado quando um estudante entra na fila antes de ter conta.
        O username é derivado da parte local do email.
        """
        normalized = validate_email(email)
        return cls(
            id=user_id or new_id(),
            email=normalized,
            username=normalized.split("@", 1)[0],
        )

    def has_email(self, email: str) -> bool:
        """Verifica email principal ou secundário."""
        normalized = normalize_email(email)
        return normalized == self.email or normalized in self.secondary_emails

    @property
    def all_emails(self) -> List[str]:
        return [self.email] + [e for e in self.secondary_emails if e != self.email]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UserEntity):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
