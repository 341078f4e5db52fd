"""
core.domain.exception_handler — renders domain failures as API errors.

A service that cannot reconcile a prisons feed message raises one of the
``core.domain.exceptions`` classes (usually via ``Failure.unwrap()``).
This handler turns them into ``{"detail": message}`` bodies so views stay
free of try/except blocks.

Registered in ``settings.py`` under ``REST_FRAMEWORK['EXCEPTION_HANDLER']``.
"""

from __future__ import annotations

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_default_handler

from core.domain.exceptions import Conflict, DomainError, NotFound

logger = logging.getLogger(__name__)


def _status_for(exc: DomainError) -> int:
    if isinstance(exc, NotFound):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, Conflict):
        return status.HTTP_409_CONFLICT
    return status.HTTP_400_BAD_REQUEST


def domain_exception_handler(exc: Exception, context: dict) -> Response | None:
    """
    DRF's own handler gets the first go (validation, authentication).
    Anything else that is a ``DomainError`` becomes an error response;
    unrecognised exceptions return ``None`` and surface as 500s.
    """
    response = drf_default_handler(exc, context)
    if response is not None or not isinstance(exc, DomainError):
        return response

    status_code = _status_for(exc)
    view = context.get("view")
    logger.warning(
        "%s rejected by %s (%d): %s",
        type(exc).__name__,
        type(view).__name__ if view is not None else "unknown view",
        status_code,
        exc,
    )
    return Response({"detail": str(exc)}, status=status_code)
