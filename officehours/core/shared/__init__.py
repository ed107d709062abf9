"""
Shared Domain Components.

Contém componentes compartilhados entre todos os domínios:
- Exceções de domínio
- Interfaces (Ports) transversais
- Base classes para Domain Events
- Identificadores
"""

from .exceptions import (
    DomainException,
    ValidationError,
    EntityNotFoundError,
    UnauthorizedError,
    InvalidSessionError,
    InvalidSecretError,
    BusinessRuleViolationError,
)
from .events import DomainEvent, utc_now
from .identifiers import new_id, is_valid_id
from .interfaces import UnitOfWork, EventPublisher, EventStore

__all__ = [
    "DomainException",
    "ValidationError",
    "EntityNotFoundError",
    "UnauthorizedError",
    "InvalidSessionError",
    "InvalidSecretError",
    "BusinessRuleViolationError",
    "DomainEvent",
    "utc_now",
    "new_id",
    "is_valid_id",
    "UnitOfWork",
    "EventPublisher",
    "EventStore",
]
