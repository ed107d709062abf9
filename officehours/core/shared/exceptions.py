"""
Exceções de Domínio do Office Hours.

Este módulo define exceções específicas do domínio que permitem
comunicar erros de forma clara e tipada entre as camadas.

Cada exceção carrega:
- kind: categoria estável do erro (NotFound, Unauthorized, ...)
- code: código estável e específico da operação (ex: tickets.doesNotExist)
- message: mensagem legível para o usuário

Hierarquia:
    DomainException (base)
    ├── ValidationError (payload inválido, antes de qualquer efeito)
    ├── EntityNotFoundError (fila, sessão ou ticket inexistente)
    ├── UnauthorizedError (papel ou posse insuficiente)
    ├── InvalidSessionError (sessão fora das sessões restritas da fila)
    ├── InvalidSecretError (segredo ausente ou divergente)
    └── BusinessRuleViolationError (regra de negócio violada)
"""


class DomainException(Exception):
    """
    Exceção base para todos os erros de domínio.

    Todas as exceções específicas do domínio devem herdar desta classe.
    Isso permite capturar qualquer erro de domínio de forma genérica.

    Example:
        try:
            service.execute(input_dto)
        except DomainException as e:
            logger.error(f"Erro de domínio: {e}")
    """

    kind = "DomainError"

    def __init__(self, message: str, code: str = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict:
        """Serializa exceção para dicionário (útil para APIs)."""
        return {
            "error": self.code,
            "kind": self.kind,
            "message": self.message,
        }


class ValidationError(DomainException):
    """
    Erro de validação de dados de entrada.

    Lançada quando o payload não atende ao formato esperado
    (ids, emails, notificações). Sempre antes de consultar
    qualquer colaborador.

    Example:
        if not student_emails:
            raise ValidationError("Informe ao menos um email", field="student_emails")
    """

    kind = "ValidationError"

    def __init__(self, message: str, field: str = None):
        self.field = field
        code = f"VALIDATION_ERROR_{field.upper()}" if field else "VALIDATION_ERROR"
        super().__init__(message, code)

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        return result


class EntityNotFoundError(DomainException):
    """
    Entidade não encontrada no repositório.

    Também usada para tickets já removidos nas operações de
    claim/release/mark, que tratam "deleted" como inexistente.

    Example:
        ticket = repo.get_by_id(ticket_id)
        if not ticket:
            raise EntityNotFoundError(
                f"No ticket exists with id {ticket_id}",
                entity_type="Ticket",
                entity_id=ticket_id,
                code="tickets.doesNotExist",
            )
    """

    kind = "NotFound"

    def __init__(
        self,
        message: str,
        entity_type: str = None,
        entity_id: str = None,
        code: str = "ENTITY_NOT_FOUND",
    ):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(message, code)

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.entity_type:
            result["entity_type"] = self.entity_type
        if self.entity_id:
            result["entity_id"] = self.entity_id
        return result


class UnauthorizedError(DomainException):
    """
    Usuário sem papel (ou posse) necessário para a operação.

    Example:
        if not oracle.has_role(actor_id, STAFF_ROLES, ticket.course_id):
            raise UnauthorizedError(
                "Only TAs and above can claim tickets.",
                code="tickets.claimTicket.unauthorized",
            )
    """

    kind = "Unauthorized"

    def __init__(self, message: str, code: str = "UNAUTHORIZED"):
        super().__init__(message, code)


class InvalidSessionError(DomainException):
    """Sessão informada não pertence às sessões restritas da fila."""

    kind = "InvalidSession"

    def __init__(self, message: str, session_id: str = None):
        self.session_id = session_id
        super().__init__(message, "tickets.createTicket.invalidSession")


class InvalidSecretError(DomainException):
    """Segredo ausente ou diferente do segredo da sessão."""

    kind = "InvalidSecret"

    def __init__(self, message: str):
        super().__init__(message, "tickets.createTicket.invalidSecret")


class BusinessRuleViolationError(DomainException):
    """
    Violação de regra de negócio.

    Lançada quando uma operação viola uma regra de negócio
    estabelecida no domínio.

    Example:
        if policy is RedeletePolicy.REJECT and ticket.is_deleted:
            raise BusinessRuleViolationError(
                "Ticket já foi removido",
                rule="tickets.deleteTicket.alreadyDeleted",
            )
    """

    kind = "BusinessRuleViolation"

    def __init__(self, message: str, rule: str = None):
        self.rule = rule
        super().__init__(message, rule or "BUSINESS_RULE_VIOLATION")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.rule:
            result["rule"] = self.rule
        return result
