"""Office Hours - ciclo de vida de tickets de uma fila de atendimento."""

__version__ = "0.1.0"
