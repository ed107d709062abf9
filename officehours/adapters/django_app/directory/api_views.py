"""
API Views JSON do diretório de usuários (somente leitura).

Endpoints:
- GET /users/api/self/ - Perfil privado do chamador
- GET /users/api/by-ids/?user_ids=a,b&course_id=c - Por ids
- GET /users/api/by-emails/?emails=x,y - Por emails (campos públicos)
- GET /users/api/courses/<course_id>/staff/ - Equipe do curso
- GET /users/api/courses/<course_id>/staff/online/ - Equipe online

Toda resposta é uma lista de usuários projetada no nível de
visibilidade do chamador.
"""

import logging

from django.http import HttpRequest, JsonResponse

from officehours.adapters.django_app.tickets.api_views import (
    BaseAPIView,
    get_actor_id,
    json_response,
)
from officehours.adapters.django_app.tickets.forms import first_form_error
from officehours.core.shared.exceptions import ValidationError
from officehours.core.shared.identifiers import is_valid_id

from .forms import UsersByEmailsForm, UsersByIdsForm

logger = logging.getLogger(__name__)


class UserAPIView(BaseAPIView):
    """Base das consultas; subclasses implementam `query`."""

    http_method_names = ['get']

    def get(self, request: HttpRequest, **kwargs) -> JsonResponse:
        try:
            service = self.get_service('user_visibility_service')
            users = self.query(service, request, **kwargs)
            return json_response(success=True, data=users, meta={'total': len(users)})
        except Exception as e:
            return self.handle_exception(e)

    def query(self, service, request, **kwargs):
        raise NotImplementedError


class SelfUserAPIView(UserAPIView):
    def query(self, service, request):
        return service.self_profile(get_actor_id(request))


class UsersByIdsAPIView(UserAPIView):
    def query(self, service, request):
        form = UsersByIdsForm(data=request.GET)
        if not form.is_valid():
            raise first_form_error(form)
        return service.by_ids(
            get_actor_id(request),
            form.cleaned_data['user_ids'],
            form.cleaned_data['course_id'],
        )


class UsersByEmailsAPIView(UserAPIView):
    def query(self, service, request):
        form = UsersByEmailsForm(data=request.GET)
        if not form.is_valid():
            raise first_form_error(form)
        return service.by_emails(form.cleaned_data['emails'])


def _course_id(course_id: str) -> str:
    if not is_valid_id(course_id):
        raise ValidationError("Identificador inválido", field="course_id")
    return course_id


class CourseStaffAPIView(UserAPIView):
    def query(self, service, request, course_id):
        return service.staff_by_course(_course_id(course_id))


class CourseOnlineStaffAPIView(UserAPIView):
    def query(self, service, request, course_id):
        return service.online_staff_by_course(_course_id(course_id))
