"""
Testes para projeções de visibilidade de usuários.
"""

import pytest

from officehours.core.users.entities import UserEntity
from officehours.core.users.projections import (
    PRESENCE_FIELDS,
    Visibility,
    project,
)


@pytest.fixture
def user():
    return UserEntity(
        email="ana@brown.edu",
        secondary_emails=["ana.silva@gmail.com"],
        username="ana",
        first_name="Ana",
        last_name="Silva",
        is_online=True,
        roles={"course-1": ["ta"]},
    )


class TestVisibility:

    def test_niveis_aninhados(self):
        """PRIVATE ⊇ PROTECTED ⊇ PUBLIC."""
        public = set(Visibility.PUBLIC.fields)
        protected = set(Visibility.PROTECTED.fields)
        private = set(Visibility.PRIVATE.fields)

        assert public <= protected <= private

    def test_publico_nao_vaza_email(self, user):
        result = project(user, Visibility.PUBLIC.fields)

        assert set(result) == {"id", "username", "first_name", "last_name"}
        assert "email" not in result
        assert "roles" not in result

    def test_protegido_inclui_emails(self, user):
        result = project(user, Visibility.PROTECTED.fields)

        assert result["email"] == "ana@brown.edu"
        assert result["secondary_emails"] == ["ana.silva@gmail.com"]
        assert "status" not in result
        assert "roles" not in result

    def test_privado_completo(self, user):
        result = project(user, Visibility.PRIVATE.fields)

        assert result["roles"] == {"course-1": ["ta"]}
        assert result["status"] == {"online": True, "idle": False}
        assert result["created_at"] is not None


class TestProject:

    def test_campos_aninhados(self, user):
        """Campos com ponto projetam só a chave pedida."""
        result = project(user, ("id",) + PRESENCE_FIELDS)

        assert result == {"id": user.id, "status": {"online": True, "idle": False}}

    def test_campo_parcial(self, user):
        result = project(user, ("status.online",))

        assert result == {"status": {"online": True}}

    def test_campo_desconhecido_ignorado(self, user):
        result = project(user, ("id", "password"))

        assert result == {"id": user.id}
