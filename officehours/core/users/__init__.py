"""
Domínio de Usuários - Diretório, Papéis e Visibilidade.

Colaboradores externos do ciclo de vida dos tickets:
- IdentityResolver: email → user_id, com provisionamento
- AuthorizationOracle: papéis (admin, mta, hta, ta) por curso
- UserVisibilityService: projeções com redação de campos
"""

from .entities import (
    UserEntity,
    Role,
    STAFF_ROLES,
    COURSE_STAFF_ROLES,
    GLOBAL_SCOPE,
)
from .ports import (
    IdentityResolver,
    AuthorizationOracle,
    UserDirectory,
    InMemoryUserDirectory,
    InMemoryAuthorizationOracle,
)
from .projections import Visibility, project
from .use_cases import UserVisibilityService

__all__ = [
    "UserEntity",
    "Role",
    "STAFF_ROLES",
    "COURSE_STAFF_ROLES",
    "GLOBAL_SCOPE",
    "IdentityResolver",
    "AuthorizationOracle",
    "UserDirectory",
    "InMemoryUserDirectory",
    "InMemoryAuthorizationOracle",
    "Visibility",
    "project",
    "UserVisibilityService",
]
