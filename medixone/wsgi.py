"""
WSGI config for the MedixOne project.

It exposes the WSGI callable as a module-level variable named ``application``.
Page routes and the JSON API work under WSGI; the session socket needs the
ASGI entrypoint in ``medixone.asgi``.
"""
import os

from django.core.wsgi import get_wsgi_application  # type: ignore

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'medixone.settings')

application = get_wsgi_application()
