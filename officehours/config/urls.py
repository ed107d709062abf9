"""
URL Configuration do Office Hours.

Estrutura:
- /tickets/ - API do ciclo de vida dos tickets
- /users/ - API de leitura do diretório
- /health/ - Health check
"""

from django.http import JsonResponse
from django.urls import path, include


def health(request):
    return JsonResponse({'status': 'ok'})


urlpatterns = [
    path('tickets/', include('officehours.adapters.django_app.tickets.urls')),
    path('users/', include('officehours.adapters.django_app.directory.urls')),
    path('health/', health, name='health'),
]
