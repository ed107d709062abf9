"""
API Views JSON para o domínio de Tickets.

Endpoints:
- POST /tickets/api/ - Criar ticket
- POST /tickets/api/<id>/claim/ - Reivindicar ticket
- POST /tickets/api/<id>/release/ - Devolver ticket à fila
- POST /tickets/api/<id>/mark-as-missing/ - Estudante ausente
- POST /tickets/api/<id>/mark-as-done/ - Atendimento concluído
- POST /tickets/api/<id>/delete/ - Remover ticket
- DELETE /tickets/api/<id>/ - Remover ticket

Formato:
- Entrada: JSON
- Saída: JSON com estrutura {success, data/error, meta}

Autenticação:
- Identidade do ator no header OFFICEHOURS_ACTOR_HEADER (gateway)
- Sem header = autoatendimento
"""

import json
import logging
from typing import Any, Dict, Optional

from django.conf import settings
from django.http import HttpRequest, JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from officehours.config.container import get_container
from officehours.core.shared.exceptions import (
    BusinessRuleViolationError,
    DomainException,
    EntityNotFoundError,
    InvalidSecretError,
    InvalidSessionError,
    UnauthorizedError,
    ValidationError,
)
from officehours.core.shared.identifiers import is_valid_id

from .forms import TicketActionForm, TicketCreateForm, first_form_error

logger = logging.getLogger(__name__)


# =============================================================================
# Decorators e Helpers
# =============================================================================

def json_response(success: bool, data: Any = None, error: str = None,
                  status: int = 200, meta: Dict = None) -> JsonResponse:
    """
    Cria resposta JSON padronizada.

    Args:
        success: Se operação foi bem sucedida
        data: Dados da resposta
        error: Mensagem de erro (se aplicável)
        status: HTTP status code
        meta: Metadados adicionais

    Returns:
        JsonResponse formatada
    """
    response = {'success': success}

    if data is not None:
        response['data'] = data

    if error is not None:
        response['error'] = error

    if meta is not None:
        response['meta'] = meta

    return JsonResponse(response, status=status, safe=False)


def parse_json_body(request: HttpRequest) -> Dict:
    """
    Parseia body JSON do request.

    Raises:
        ValidationError: Se JSON inválido ou não for um objeto
    """
    if not request.body:
        return {}

    try:
        data = json.loads(request.body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ValidationError(f"JSON inválido: {e}")

    if not isinstance(data, dict):
        raise ValidationError("Corpo da requisição deve ser um objeto JSON")
    return data


def get_actor_id(request: HttpRequest) -> Optional[str]:
    """
    Extrai o ator do header configurado pelo gateway.

    Returns:
        ID do usuário ou None (autoatendimento)

    Raises:
        ValidationError: Header presente com identificador inválido
    """
    header = getattr(settings, 'OFFICEHOURS_ACTOR_HEADER', 'X-User-Id')
    actor_id = request.headers.get(header, '').strip()

    if not actor_id:
        return None
    if not is_valid_id(actor_id):
        raise ValidationError("Identificador do ator inválido", field="actor_id")
    return actor_id


# Ordem importa: subclasses antes de DomainException
ERROR_STATUS = (
    (ValidationError, 400),
    (EntityNotFoundError, 404),
    (UnauthorizedError, 403),
    (InvalidSessionError, 403),
    (InvalidSecretError, 403),
    (BusinessRuleViolationError, 409),
    (DomainException, 400),
)


# =============================================================================
# Base API View
# =============================================================================

@method_decorator(csrf_exempt, name='dispatch')
class BaseAPIView(View):
    """
    View base para APIs JSON.

    Fornece:
    - Parsing de JSON
    - Acesso ao container DI
    - Tratamento de erros padronizado
    """

    def get_container(self):
        return get_container()

    def get_service(self, service_name: str):
        """Obtém service do container."""
        return getattr(self.get_container(), service_name)()

    def parse_body(self, request: HttpRequest) -> Dict:
        return parse_json_body(request)

    def handle_exception(self, e: Exception) -> JsonResponse:
        """
        Trata exceções e retorna resposta apropriada.

        Erros de domínio viram {error, meta: {code, kind, ...}};
        qualquer outra exceção vira 500 sem detalhes internos.
        """
        for exc_class, status in ERROR_STATUS:
            if isinstance(e, exc_class):
                meta = {'code': e.code, 'kind': e.kind}
                if isinstance(e, ValidationError) and e.field:
                    meta['field'] = e.field
                return json_response(
                    success=False,
                    error=e.message,
                    status=status,
                    meta=meta,
                )

        logger.exception(f"Erro inesperado na API: {e}")
        return json_response(
            success=False,
            error="Erro interno do servidor",
            status=500,
        )


# =============================================================================
# Ticket API Views
# =============================================================================

class TicketAPICreateView(BaseAPIView):
    """
    API para criar tickets.

    POST /tickets/api/
    """

    def post(self, request: HttpRequest) -> JsonResponse:
        """
        Cria novo ticket.

        Body JSON:
        {
            "queue_id": "uuid (obrigatório)",
            "student_emails": ["email"] (obrigatório, ao menos um, sem repetidos),
            "question": "string (opcional)",
            "notifications": {"email": bool, "web": bool, "phone": "...", "carrier": "..."} (obrigatório),
            "session_id": "uuid (filas restritas)",
            "secret": "uuid (filas restritas)"
        }
        """
        try:
            actor_id = get_actor_id(request)
            form = TicketCreateForm(data=self.parse_body(request))
            if not form.is_valid():
                raise first_form_error(form)

            service = self.get_service('create_ticket_service')
            output = service.execute(form.to_dto(actor_id=actor_id))

            logger.info(f"API: Ticket criado: {output.id}")

            return json_response(
                success=True,
                data=output.to_dict(),
                status=201,
            )

        except Exception as e:
            return self.handle_exception(e)


class TicketAPIActionView(BaseAPIView):
    """
    Base das ações sobre um ticket existente.

    Subclasses definem `service_name`.
    """

    service_name: str = ''

    def post(self, request: HttpRequest, pk: str) -> JsonResponse:
        try:
            actor_id = get_actor_id(request)
            form = TicketActionForm(data={'ticket_id': pk})
            if not form.is_valid():
                raise first_form_error(form)

            service = self.get_service(self.service_name)
            output = service.execute(form.to_dto(actor_id=actor_id))

            logger.info(f"API: {self.service_name} em {pk} por {actor_id}")

            return json_response(success=True, data=output.to_dict())

        except Exception as e:
            return self.handle_exception(e)


class TicketAPIClaimView(TicketAPIActionView):
    """POST /tickets/api/<id>/claim/"""
    service_name = 'claim_ticket_service'


class TicketAPIReleaseView(TicketAPIActionView):
    """POST /tickets/api/<id>/release/"""
    service_name = 'release_ticket_service'


class TicketAPIMarkAsMissingView(TicketAPIActionView):
    """POST /tickets/api/<id>/mark-as-missing/"""
    service_name = 'mark_ticket_as_missing_service'


class TicketAPIMarkAsDoneView(TicketAPIActionView):
    """POST /tickets/api/<id>/mark-as-done/"""
    service_name = 'mark_ticket_as_done_service'


class TicketAPIDeleteView(TicketAPIActionView):
    """
    API para remover ticket.

    POST /tickets/api/<id>/delete/
    DELETE /tickets/api/<id>/
    """

    service_name = 'delete_ticket_service'

    def delete(self, request: HttpRequest, pk: str) -> JsonResponse:
        return self.post(request, pk)


class TicketAPIDetailView(TicketAPIDeleteView):
    """DELETE /tickets/api/<id>/"""
    http_method_names = ['delete']
