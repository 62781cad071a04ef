"""Maps domain errors to HTTP responses.

Installed as REST_FRAMEWORK["EXCEPTION_HANDLER"], so views simply let domain
errors propagate. Anything that is not a DomainError falls through to DRF.
"""

import logging
from typing import Any

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from academy.domain.errors import ConflictError, DomainError, NotFoundError

logger = logging.getLogger(__name__)


def status_for(error: DomainError) -> int:
    if isinstance(error, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(error, ConflictError):
        return status.HTTP_409_CONFLICT
    return status.HTTP_400_BAD_REQUEST


def error_body(error: DomainError) -> dict[str, Any]:
    return {"code": error.code.value, "message": error.message, **error.details}


def domain_exception_handler(exc: Exception, context: dict[str, Any]) -> Response | None:
    if isinstance(exc, DomainError):
        view = context.get("view")
        logger.info(
            "%s rejected with %s: %s",
            type(view).__name__ if view is not None else "request",
            exc.code.value,
            exc.message,
        )
        return Response(error_body(exc), status=status_for(exc))
    return exception_handler(exc, context)
