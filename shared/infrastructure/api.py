"""DRF glue for domain errors."""

from __future__ import annotations

import logging

from rest_framework.response import Response  # type: ignore

from shared.domain.exceptions import DomainError

logger = logging.getLogger(__name__)


class DomainErrorMixin:
    """Translate DomainError raised by a view into a JSON error response."""

    def handle_exception(self, exc):  # type: ignore
        if isinstance(exc, DomainError):
            logger.info(
                "%s rejected with %s: %s",
                self.__class__.__name__,
                exc.code,
                exc.message,
            )
            return Response(exc.to_dict(), status=exc.status_code)
        return super().handle_exception(exc)
