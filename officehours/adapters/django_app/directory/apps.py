"""
Configuração do Django App do diretório de usuários.
"""

from django.apps import AppConfig


class DirectoryConfig(AppConfig):
    """Configuração do app Directory."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'officehours.adapters.django_app.directory'
    label = 'directory'
    verbose_name = 'Diretório de Usuários'
