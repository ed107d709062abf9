"""
Forms de leitura do diretório (query string).
"""

from django import forms
from django.core.exceptions import ValidationError as DjangoValidationError

from officehours.adapters.django_app.tickets.forms import EmailListField, id_field
from officehours.core.shared.identifiers import is_valid_id


class IdListField(forms.Field):
    """Lista de ids separada por vírgulas."""

    default_error_messages = {
        'required': 'Informe ao menos um id',
    }

    def to_python(self, value):
        if value in self.empty_values:
            return []
        ids = [item.strip() for item in value.split(',') if item.strip()]
        for user_id in ids:
            if not is_valid_id(user_id):
                raise DjangoValidationError(f'Identificador inválido: {user_id}', code='invalid')
        return list(dict.fromkeys(ids))


class UsersByIdsForm(forms.Form):
    user_ids = IdListField()
    course_id = id_field()


class UsersByEmailsForm(forms.Form):
    emails = EmailListField()
