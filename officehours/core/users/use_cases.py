"""
Use Cases de leitura do Domínio de Usuários.

Projeções somente-leitura sobre o diretório, com redação de campos
sensível ao papel do chamador:

- self_profile: campos privados do próprio chamador
- by_ids: protegidos se o chamador é TA ou acima no curso, senão públicos
- by_emails: apenas públicos, sem verificação de papel
- staff_by_course: protegidos, membros com papel hta/ta
- online_staff_by_course: protegidos + presença, apenas equipe online
"""

from typing import Any, Dict, Iterable, List, Optional
import logging

from .entities import COURSE_STAFF_ROLES, STAFF_ROLES, normalize_email
from .ports import AuthorizationOracle, UserDirectory
from .projections import PRESENCE_FIELDS, Visibility, project

logger = logging.getLogger(__name__)


class UserVisibilityService:
    """
    Use Case: Consultas de usuários com visibilidade por papel.

    Attributes:
        user_directory: Diretório de usuários (somente leitura)
        authorization: Oráculo de papéis

    Example:
        service = UserVisibilityService(directory, oracle)
        users = service.by_ids(caller_id, ["u1", "u2"], course_id="c1")
    """

    def __init__(self, user_directory: UserDirectory, authorization: AuthorizationOracle):
        self.user_directory = user_directory
        self.authorization = authorization

    def self_profile(self, caller_id: Optional[str]) -> List[Dict[str, Any]]:
        """Perfil privado do chamador (lista vazia se anônimo)."""
        if not caller_id:
            return []

        user = self.user_directory.get_by_id(caller_id)
        if user is None:
            return []

        return [project(user, Visibility.PRIVATE.fields)]

    def by_ids(
        self,
        caller_id: Optional[str],
        user_ids: Iterable[str],
        course_id: str,
    ) -> List[Dict[str, Any]]:
        """
        Usuários por id.

        O nível de visibilidade depende do papel do chamador
        no curso informado.
        """
        is_staff = self.authorization.has_role(caller_id, STAFF_ROLES, course_id)
        visibility = Visibility.PROTECTED if is_staff else Visibility.PUBLIC

        logger.debug(
            f"users.byIds caller={caller_id} course={course_id} visibility={visibility.value}"
        )

        users = self.user_directory.list_by_ids(list(user_ids))
        return [project(user, visibility.fields) for user in users]

    def by_emails(self, emails: Iterable[str]) -> List[Dict[str, Any]]:
        """Usuários por email (principal ou secundário), campos públicos."""
        normalized = [normalize_email(e) for e in emails if e]
        users = self.user_directory.list_by_emails(normalized)
        return [project(user, Visibility.PUBLIC.fields) for user in users]

    def staff_by_course(self, course_id: str) -> List[Dict[str, Any]]:
        """Equipe (hta/ta) do curso, campos protegidos."""
        staff_ids = self.authorization.users_in_role(COURSE_STAFF_ROLES, course_id)
        users = self.user_directory.list_by_ids(staff_ids)
        return [project(user, Visibility.PROTECTED.fields) for user in users]

    def online_staff_by_course(self, course_id: str) -> List[Dict[str, Any]]:
        """Equipe (hta/ta) online do curso, campos protegidos + presença."""
        staff_ids = self.authorization.users_in_role(COURSE_STAFF_ROLES, course_id)
        users = self.user_directory.list_by_ids(staff_ids)
        fields = Visibility.PROTECTED.fields + PRESENCE_FIELDS
        return [project(user, fields) for user in users if user.is_online]
