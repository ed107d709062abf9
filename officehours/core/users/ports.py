"""
Ports (Interfaces) do Domínio de Usuários.

Contratos dos colaboradores externos consumidos pelo core:
- IdentityResolver: email → user_id (provisiona se necessário)
- AuthorizationOracle: verificação de papéis com escopo de curso
- UserDirectory: consultas somente-leitura ao diretório

Implementações em memória são fornecidas para testes unitários.
"""

from typing import Dict, Iterable, List, Optional, Protocol, Set, Tuple, runtime_checkable
import threading

from .entities import (
    GLOBAL_SCOPE,
    Role,
    UserEntity,
    normalize_email,
)


@runtime_checkable
class IdentityResolver(Protocol):
    """
    Resolve emails de estudantes em ids de usuário.

    Deve ser idempotente sob chamadas concorrentes para o mesmo
    email: nunca criar dois usuários com o mesmo email.
    """

    def resolve(self, email: str) -> str:
        """
        Busca usuário por email principal ou secundário.

        Args:
            email: Email do estudante

        Returns:
            ID do usuário existente ou recém-provisionado
        """
        ...


@runtime_checkable
class AuthorizationOracle(Protocol):
    """Consulta pura ao diretório de papéis, sem efeitos colaterais."""

    def has_role(self, user_id: Optional[str], roles: Iterable[Role], scope: str) -> bool:
        """
        Verifica se o usuário possui algum dos papéis no escopo.

        Atribuições no escopo global valem para qualquer curso.
        Usuário None (anônimo) nunca possui papel.
        """
        ...

    def users_in_role(self, roles: Iterable[Role], scope: str) -> List[str]:
        """IDs dos usuários com algum dos papéis no escopo."""
        ...


@runtime_checkable
class UserDirectory(Protocol):
    """Consultas somente-leitura ao diretório de usuários."""

    def get_by_id(self, user_id: str) -> Optional[UserEntity]:
        ...

    def list_by_ids(self, user_ids: Iterable[str]) -> List[UserEntity]:
        ...

    def list_by_emails(self, emails: Iterable[str]) -> List[UserEntity]:
        ...


class InMemoryUserDirectory:
    """
    Diretório de usuários em memória.

    Implementa UserDirectory e IdentityResolver. O lock torna
    `resolve` atômico, reproduzindo a restrição de unicidade de
    email do banco.

    Example:
        directory = InMemoryUserDirectory()
        directory.add(UserEntity(email="ana@brown.edu"))
        user_id = directory.resolve("ana@brown.edu")
    """

    def __init__(self):
        self._users: Dict[str, UserEntity] = {}
        self._lock = threading.Lock()
        self.provisioned: List[str] = []

    def add(self, user: UserEntity) -> UserEntity:
        """Adiciona usuário (útil para fixtures)."""
        self._users[user.id] = user
        return user

    def resolve(self, email: str) -> str:
        with self._lock:
            existing = self._find_by_email(email)
            if existing:
                return existing.id

            user = UserEntity.provision(email)
            self._users[user.id] = user
            self.provisioned.append(user.id)
            return user.id

    def _find_by_email(self, email: str) -> Optional[UserEntity]:
        for user in self._users.values():
            if user.has_email(email):
                return user
        return None

    def get_by_id(self, user_id: str) -> Optional[UserEntity]:
        return self._users.get(user_id)

    def list_by_ids(self, user_ids: Iterable[str]) -> List[UserEntity]:
        wanted = set(user_ids)
        return [u for u in self._users.values() if u.id in wanted]

    def list_by_emails(self, emails: Iterable[str]) -> List[UserEntity]:
        wanted = {normalize_email(e) for e in emails}
        return [
            u for u in self._users.values()
            if wanted.intersection(u.all_emails)
        ]

    def count(self) -> int:
        return len(self._users)


class InMemoryAuthorizationOracle:
    """
    Oráculo de papéis em memória.

    Example:
        oracle = InMemoryAuthorizationOracle()
        oracle.grant("user-1", Role.TA, "course-1")
        oracle.has_role("user-1", STAFF_ROLES, "course-1")  # True
    """

    def __init__(self):
        self._assignments: Set[Tuple[str, Role, str]] = set()

    def grant(self, user_id: str, role: Role, scope: str = GLOBAL_SCOPE) -> None:
        self._assignments.add((user_id, role, scope))

    def revoke(self, user_id: str, role: Role, scope: str = GLOBAL_SCOPE) -> None:
        self._assignments.discard((user_id, role, scope))

    def has_role(self, user_id: Optional[str], roles: Iterable[Role], scope: str) -> bool:
        if not user_id:
            return False
        scopes = {scope, GLOBAL_SCOPE}
        return any(
            (user_id, role, s) in self._assignments
            for role in roles
            for s in scopes
        )

    def users_in_role(self, roles: Iterable[Role], scope: str) -> List[str]:
        roles = set(roles)
        scopes = {scope, GLOBAL_SCOPE}
        return sorted({
            user_id
            for user_id, role, s in self._assignments
            if role in roles and s in scopes
        })

