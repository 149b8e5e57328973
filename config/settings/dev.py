"""Development settings for the booking service.

Enables debug and runs Celery tasks inline so that no broker is needed
on a developer machine. Do not use these settings in production!
"""

from .base import *  # noqa: F401,F403

DEBUG = True

ALLOWED_HOSTS = ['*']

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
