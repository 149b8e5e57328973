"""Production settings for the booking service.

Sensitive values must be provided via environment variables. Use
PostgreSQL (DB_ENGINE=django.db.backends.postgresql) so that structure
rows are really locked during ledger transactions.
"""

from .base import *  # noqa: F401,F403

DEBUG = False

ALLOWED_HOSTS = os.environ.get('DJANGO_ALLOWED_HOSTS', '').split(',')

CSRF_COOKIE_SECURE = True
SESSION_COOKIE_SECURE = True
