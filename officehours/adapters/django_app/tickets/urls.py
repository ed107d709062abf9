"""
URL patterns para o domínio de Tickets.

Endpoints API JSON:
- POST /tickets/api/ - Criar ticket
- DELETE /tickets/api/<id>/ - Remover ticket
- POST /tickets/api/<id>/claim/ - Reivindicar ticket
- POST /tickets/api/<id>/release/ - Devolver ticket
- POST /tickets/api/<id>/mark-as-missing/ - Marcar como ausente
- POST /tickets/api/<id>/mark-as-done/ - Marcar como concluído
- POST /tickets/api/<id>/delete/ - Remover ticket
"""

from django.urls import path
from . import api_views

app_name = 'tickets'

urlpatterns = [
    path('api/', api_views.TicketAPICreateView.as_view(), name='api_create'),

    path('api/<str:pk>/', api_views.TicketAPIDetailView.as_view(), name='api_detail'),

    path('api/<str:pk>/claim/', api_views.TicketAPIClaimView.as_view(), name='api_claim'),
    path('api/<str:pk>/release/', api_views.TicketAPIReleaseView.as_view(), name='api_release'),
    path(
        'api/<str:pk>/mark-as-missing/',
        api_views.TicketAPIMarkAsMissingView.as_view(),
        name='api_mark_as_missing',
    ),
    path(
        'api/<str:pk>/mark-as-done/',
        api_views.TicketAPIMarkAsDoneView.as_view(),
        name='api_mark_as_done',
    ),
    path('api/<str:pk>/delete/', api_views.TicketAPIDeleteView.as_view(), name='api_delete'),
]
