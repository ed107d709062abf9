"""Identificadores opacos usados por tickets, filas, sessões e usuários."""

import re
import uuid

ID_PATTERN = r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$"

_ID_RE = re.compile(ID_PATTERN)


def new_id() -> str:
    """Gera novo identificador (UUID4 em texto)."""
    return str(uuid.uuid4())


def is_valid_id(value) -> bool:
    return isinstance(value, str) and bool(_ID_RE.match(value))
