"""
Django Forms para validação de entrada.

Forms são DRIVING ADAPTERS que validam dados antes de
passar para os Use Cases.

Responsabilidades:
- Validação estrutural (campos obrigatórios, formato de ids e emails)
- Sanitização de entrada
- Conversão para Input DTOs

Princípios:
- Forms NÃO contêm lógica de negócio
- Nenhum repositório é consultado antes da validação terminar
"""

from django import forms
from django.core.exceptions import ValidationError as DjangoValidationError

from officehours.core.shared.exceptions import ValidationError
from officehours.core.shared.identifiers import ID_PATTERN
from officehours.core.tickets.dtos import CreateTicketInputDTO, TicketActionInputDTO
from officehours.core.tickets.entities import Notifications
from officehours.core.users.entities import normalize_email, validate_email


def id_field(required: bool = True, **kwargs) -> forms.RegexField:
    return forms.RegexField(
        regex=ID_PATTERN,
        required=required,
        error_messages={
            'required': 'Campo obrigatório',
            'invalid': 'Identificador inválido',
        },
        **kwargs,
    )


class EmailListField(forms.Field):
    """
    Lista de emails (array JSON ou string separada por vírgulas).

    Normaliza para minúsculas e preserva a ordem. Emails repetidos
    são rejeitados: cada estudante aparece uma única vez no ticket.
    """

    default_error_messages = {
        'required': 'Informe ao menos um email',
        'invalid_list': 'Informe uma lista de emails',
        'duplicate': 'Email repetido: %(email)s',
    }

    def to_python(self, value):
        if value in self.empty_values:
            return []
        if isinstance(value, str):
            value = value.split(',')
        if not isinstance(value, (list, tuple)):
            raise DjangoValidationError(self.error_messages['invalid_list'], code='invalid_list')

        emails = []
        for item in value:
            if not isinstance(item, str):
                raise DjangoValidationError(self.error_messages['invalid_list'], code='invalid_list')
            email = normalize_email(item)
            if email:
                emails.append(email)
        return emails

    def validate(self, value):
        super().validate(value)
        seen = set()
        for email in value:
            # Mesmo validador usado no provisionamento de usuários
            try:
                validate_email(email)
            except ValidationError as e:
                raise DjangoValidationError(e.message, code='invalid_email')
            if email in seen:
                raise DjangoValidationError(
                    self.error_messages['duplicate'],
                    code='duplicate',
                    params={'email': email},
                )
            seen.add(email)


class NotificationsField(forms.Field):
    """
    Objeto JSON de preferências, validado por Notifications.from_dict.

    Obrigatório; um objeto vazio assume os valores padrão.
    """

    default_error_messages = {
        'required': 'Informe as preferências de notificação',
    }

    def to_python(self, value):
        if value is None:
            return None
        try:
            return Notifications.from_dict(value)
        except ValidationError as e:
            raise DjangoValidationError(e.message, code='invalid')


class TicketCreateForm(forms.Form):
    """
    Form para criação de ticket.

    Valida o payload antes de passar para CreateTicketService.
    Recebe o corpo JSON já decodificado como `data`.
    """

    queue_id = id_field()

    student_emails = EmailListField()

    question = forms.CharField(
        required=False,
        max_length=5000,
        error_messages={
            'max_length': 'Pergunta deve ter no máximo 5000 caracteres',
        },
    )

    notifications = NotificationsField()

    session_id = id_field(required=False)

    secret = id_field(required=False)

    def clean_question(self):
        question = self.cleaned_data.get('question', '')
        return question.strip() or None

    def clean(self):
        cleaned_data = super().clean()
        if cleaned_data.get('secret') and not cleaned_data.get('session_id'):
            self.add_error('session_id', 'Segredo informado sem sessão')
        return cleaned_data

    def to_dto(self, actor_id=None) -> CreateTicketInputDTO:
        data = self.cleaned_data
        return CreateTicketInputDTO(
            queue_id=data['queue_id'],
            student_emails=tuple(data['student_emails']),
            notifications=data['notifications'],
            question=data.get('question'),
            session_id=data.get('session_id') or None,
            secret=data.get('secret') or None,
            actor_id=actor_id,
        )


class TicketActionForm(forms.Form):
    """
    Form para claim/release/mark/delete.

    O ticket_id vem da URL; a identidade do ator vem do gateway.
    """

    ticket_id = id_field()

    def to_dto(self, actor_id=None) -> TicketActionInputDTO:
        return TicketActionInputDTO(
            ticket_id=self.cleaned_data['ticket_id'],
            actor_id=actor_id,
        )


def first_form_error(form: forms.Form) -> ValidationError:
    """Converte o primeiro erro do form em ValidationError de domínio."""
    for field_name, errors in form.errors.items():
        field = None if field_name == '__all__' else field_name
        return ValidationError(errors[0], field=field)
    return ValidationError('Dados inválidos')
