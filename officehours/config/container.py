"""
Dependency Injection Container.

Configura e gerencia todas as dependências da aplicação.
Usa dependency-injector para lazy-loading e injeção automática.

Padrões:
- Singleton: Uma instância para toda app (repositories, publisher)
- Factory: Nova instância por chamada (services, UoW)
- Selector: Implementação escolhida pela configuração
"""

from importlib import import_module
from typing import Optional

from dependency_injector import containers, providers


def _lazy(path: str):
    """
    Construtor com import tardio ("pacote.modulo.Classe").

    Evita importar models Django antes de apps.populate().
    """
    module_name, _, attr = path.rpartition('.')

    def build(*args, **kwargs):
        return getattr(import_module(module_name), attr)(*args, **kwargs)

    build.__name__ = attr
    return build


def _redelete_policy(value: str):
    from officehours.core.tickets.use_cases import RedeletePolicy
    return RedeletePolicy.from_string(value)


TICKETS = 'officehours.adapters.django_app.tickets.repositories'
DIRECTORY = 'officehours.adapters.django_app.directory.repositories'
PUBLISHERS = 'officehours.adapters.django_app.events.publishers'
UOW = 'officehours.adapters.django_app.shared.unit_of_work'
TICKET_USE_CASES = 'officehours.core.tickets.use_cases'
USER_USE_CASES = 'officehours.core.users.use_cases'

DEFAULT_CONFIG = {
    'event_publisher_mode': 'sync',
    'tickets_redelete_policy': 'ignore',
}


class Container(containers.DeclarativeContainer):
    """
    Container principal de Dependency Injection.

    Organização:
    - Configuration: valores vindos do settings do Django
    - Infrastructure: publisher e event store
    - Repositories: persistência de tickets, filas, sessões e diretório
    - Unit of Work: transações
    - Services: Use Cases

    Example:
        container = get_container()
        service = container.claim_ticket_service()
        output = service.execute(TicketActionInputDTO(ticket_id, actor_id))
    """

    # =========================================================================
    # Configuration
    # =========================================================================

    config = providers.Configuration(default=DEFAULT_CONFIG)

    # =========================================================================
    # Infrastructure
    # =========================================================================

    event_publisher = providers.Selector(
        config.event_publisher_mode,
        sync=providers.Singleton(_lazy(f'{PUBLISHERS}.LoggingEventPublisher')),
        celery=providers.Singleton(_lazy(f'{PUBLISHERS}.CeleryEventPublisher')),
    )

    event_store = providers.Singleton(_lazy(f'{TICKETS}.DjangoEventStore'))

    # =========================================================================
    # Repositories (Singleton - uma instância por app)
    # =========================================================================

    ticket_repository = providers.Singleton(_lazy(f'{TICKETS}.DjangoTicketRepository'))
    queue_repository = providers.Singleton(_lazy(f'{TICKETS}.DjangoQueueRepository'))
    session_repository = providers.Singleton(_lazy(f'{TICKETS}.DjangoSessionRepository'))

    identity_resolver = providers.Singleton(_lazy(f'{DIRECTORY}.DjangoIdentityResolver'))
    authorization = providers.Singleton(_lazy(f'{DIRECTORY}.DjangoAuthorizationOracle'))
    user_directory = providers.Singleton(_lazy(f'{DIRECTORY}.DjangoUserDirectory'))

    # =========================================================================
    # Unit of Work (Factory - nova instância por operação)
    # =========================================================================

    unit_of_work = providers.Factory(
        _lazy(f'{UOW}.DjangoUnitOfWork'),
        event_publisher=event_publisher,
        event_store=event_store,
    )

    # =========================================================================
    # Services / Use Cases (Factory - nova instância por chamada)
    # =========================================================================

    create_ticket_service = providers.Factory(
        _lazy(f'{TICKET_USE_CASES}.CreateTicketService'),
        ticket_repo=ticket_repository,
        queue_repo=queue_repository,
        session_repo=session_repository,
        identity_resolver=identity_resolver,
        uow=unit_of_work,
    )

    claim_ticket_service = providers.Factory(
        _lazy(f'{TICKET_USE_CASES}.ClaimTicketService'),
        ticket_repo=ticket_repository,
        authorization=authorization,
        uow=unit_of_work,
    )

    release_ticket_service = providers.Factory(
        _lazy(f'{TICKET_USE_CASES}.ReleaseTicketService'),
        ticket_repo=ticket_repository,
        authorization=authorization,
        uow=unit_of_work,
    )

    mark_ticket_as_missing_service = providers.Factory(
        _lazy(f'{TICKET_USE_CASES}.MarkTicketAsMissingService'),
        ticket_repo=ticket_repository,
        authorization=authorization,
        uow=unit_of_work,
    )

    mark_ticket_as_done_service = providers.Factory(
        _lazy(f'{TICKET_USE_CASES}.MarkTicketAsDoneService'),
        ticket_repo=ticket_repository,
        authorization=authorization,
        uow=unit_of_work,
    )

    delete_ticket_service = providers.Factory(
        _lazy(f'{TICKET_USE_CASES}.DeleteTicketService'),
        ticket_repo=ticket_repository,
        authorization=authorization,
        uow=unit_of_work,
        redelete_policy=providers.Callable(_redelete_policy, config.tickets_redelete_policy),
    )

    # Leitura (sem UoW)
    user_visibility_service = providers.Factory(
        _lazy(f'{USER_USE_CASES}.UserVisibilityService'),
        user_directory=user_directory,
        authorization=authorization,
    )


# =============================================================================
# Container Global (Singleton)
# =============================================================================

_container: Optional[Container] = None


def get_container() -> Container:
    """
    Retorna instância global do container.

    Cria se não existir, carregando a configuração do settings do Django.
    """
    global _container

    if _container is None:
        from django.conf import settings

        _container = Container()
        _container.config.from_dict({
            'event_publisher_mode': getattr(settings, 'EVENT_PUBLISHER_MODE', 'sync'),
            'tickets_redelete_policy': getattr(settings, 'TICKETS_REDELETE_POLICY', 'ignore'),
        })

    return _container


def reset_container() -> None:
    """Reset do container (para testes)."""
    global _container
    _container = None


# =============================================================================
# Testing Container
# =============================================================================

class TestingContainer(containers.DeclarativeContainer):
    """
    Container para testes sem banco.

    Usa implementações InMemory; o mesmo InMemoryUserDirectory
    atende IdentityResolver e UserDirectory.

    Example:
        container = TestingContainer()
        container.authorization().grant(ta_id, Role.TA, course_id)
        output = container.claim_ticket_service().execute(dto)
    """

    __test__ = False

    config = providers.Configuration(default=DEFAULT_CONFIG)

    event_publisher = providers.Singleton(_lazy(f'{PUBLISHERS}.InMemoryEventPublisher'))

    ticket_repository = providers.Singleton(
        _lazy('officehours.core.tickets.ports.InMemoryTicketRepository')
    )
    queue_repository = providers.Singleton(
        _lazy('officehours.core.tickets.ports.InMemoryQueueRepository')
    )
    session_repository = providers.Singleton(
        _lazy('officehours.core.tickets.ports.InMemorySessionRepository')
    )

    user_directory = providers.Singleton(
        _lazy('officehours.core.users.ports.InMemoryUserDirectory')
    )
    authorization = providers.Singleton(
        _lazy('officehours.core.users.ports.InMemoryAuthorizationOracle')
    )

    unit_of_work = providers.Factory(
        _lazy(f'{UOW}.InMemoryUnitOfWork'),
        event_publisher=event_publisher,
    )

    create_ticket_service = providers.Factory(
        _lazy(f'{TICKET_USE_CASES}.CreateTicketService'),
        ticket_repo=ticket_repository,
        queue_repo=queue_repository,
        session_repo=session_repository,
        identity_resolver=user_directory,
        uow=unit_of_work,
    )

    claim_ticket_service = providers.Factory(
        _lazy(f'{TICKET_USE_CASES}.ClaimTicketService'),
        ticket_repo=ticket_repository,
        authorization=authorization,
        uow=unit_of_work,
    )

    release_ticket_service = providers.Factory(
        _lazy(f'{TICKET_USE_CASES}.ReleaseTicketService'),
        ticket_repo=ticket_repository,
        authorization=authorization,
        uow=unit_of_work,
    )

    mark_ticket_as_missing_service = providers.Factory(
        _lazy(f'{TICKET_USE_CASES}.MarkTicketAsMissingService'),
        ticket_repo=ticket_repository,
        authorization=authorization,
        uow=unit_of_work,
    )

    mark_ticket_as_done_service = providers.Factory(
        _lazy(f'{TICKET_USE_CASES}.MarkTicketAsDoneService'),
        ticket_repo=ticket_repository,
        authorization=authorization,
        uow=unit_of_work,
    )

    delete_ticket_service = providers.Factory(
        _lazy(f'{TICKET_USE_CASES}.DeleteTicketService'),
        ticket_repo=ticket_repository,
        authorization=authorization,
        uow=unit_of_work,
        redelete_policy=providers.Callable(_redelete_policy, config.tickets_redelete_policy),
    )

    user_visibility_service = providers.Factory(
        _lazy(f'{USER_USE_CASES}.UserVisibilityService'),
        user_directory=user_directory,
        authorization=authorization,
    )
