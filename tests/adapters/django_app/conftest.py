"""
Configuração pytest para testes com Django.

Settings vêm de DJANGO_SETTINGS_MODULE (pyproject.toml) via pytest-django.

Este arquivo fornece:
- Fixtures de repositórios Django
- Factories de filas, sessões e usuários
- Ator (TA) com papel no curso
"""

import pytest

from officehours.core.shared.identifiers import new_id
from officehours.core.tickets.entities import QueueEntity, SessionEntity
from officehours.core.users.entities import Role, UserEntity


@pytest.fixture
def course_id():
    return new_id()


@pytest.fixture
def ticket_repo():
    from officehours.adapters.django_app.tickets.repositories import DjangoTicketRepository
    return DjangoTicketRepository()


@pytest.fixture
def queue_repo():
    from officehours.adapters.django_app.tickets.repositories import DjangoQueueRepository
    return DjangoQueueRepository()


@pytest.fixture
def session_repo():
    from officehours.adapters.django_app.tickets.repositories import DjangoSessionRepository
    return DjangoSessionRepository()


@pytest.fixture
def event_store():
    from officehours.adapters.django_app.tickets.repositories import DjangoEventStore
    return DjangoEventStore()


@pytest.fixture
def identity_resolver():
    from officehours.adapters.django_app.directory.repositories import DjangoIdentityResolver
    return DjangoIdentityResolver()


@pytest.fixture
def oracle():
    from officehours.adapters.django_app.directory.repositories import DjangoAuthorizationOracle
    return DjangoAuthorizationOracle()


@pytest.fixture
def user_directory():
    from officehours.adapters.django_app.directory.repositories import DjangoUserDirectory
    return DjangoUserDirectory()


@pytest.fixture
def session_factory(db, session_repo, course_id):
    """Factory para criar sessões."""

    def create_session(**kwargs):
        defaults = {'course_id': course_id, 'secret': new_id()}
        defaults.update(kwargs)
        return session_repo.add(SessionEntity(**defaults))

    return create_session


@pytest.fixture
def queue_factory(db, queue_repo, course_id):
    """Factory para criar filas (restritas se receberem sessões)."""

    def create_queue(**kwargs):
        defaults = {'course_id': course_id, 'name': 'Hours'}
        defaults.update(kwargs)
        return queue_repo.add(QueueEntity(**defaults))

    return create_queue


@pytest.fixture
def user_factory(db, user_directory, oracle):
    """Factory para criar usuários, opcionalmente com papéis."""

    def create_user(email, roles=(), **kwargs):
        user = user_directory.add(UserEntity(email=email, username=email.split('@')[0], **kwargs))
        for role, scope in roles:
            oracle.grant(user.id, role, scope)
        return user

    return create_user


@pytest.fixture
def queue(queue_factory):
    return queue_factory()


@pytest.fixture
def ta(user_factory, course_id):
    return user_factory('ta@brown.edu', roles=[(Role.TA, course_id)], is_online=True)
