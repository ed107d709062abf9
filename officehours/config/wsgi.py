"""
WSGI config do Office Hours.

Expõe o callable WSGI como variável de módulo `application`.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'officehours.config.settings')

application = get_wsgi_application()
