"""Top-level package for Django configuration.

Exposes settings modules for each environment, the URL configuration and
the WSGI/ASGI entry points of the amenity booking service.
"""

# Import the Celery application as soon as Django starts so that shared
# tasks are registered.
from .celery import app as celery_app  # noqa: F401
