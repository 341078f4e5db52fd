"""
core.domain.exceptions — Domain-specific exception hierarchy.

These exceptions represent business-rule violations surfaced to callers
that want an exception rather than a ``core.domain.results.Failure``
(typically the API layer).  They are deliberately **not** DRF exceptions
so that the domain layer stays framework-agnostic.  The global handler in
``core.domain.exception_handler`` maps them to HTTP responses.

Mapping cheatsheet
------------------
┌─────────────────────┬──────────────────────────────┬──────┐
│ Domain Exception    │ DRF / HTTP equivalent        │ Code │
├─────────────────────┼──────────────────────────────┼──────┤
│ DomainError         │ ValidationError / 400        │ 400  │
│ NotFound            │ NotFound / 404               │ 404  │
│ Conflict            │ APIException / 409           │ 409  │
└─────────────────────┴──────────────────────────────┴──────┘

Recommended usage inside a service::

    from core.domain.exceptions import NotFound

    raise NotFound(f"offender with nomsNumber {noms_number} not found")

Callers holding a ``Failure`` convert it with ``failure.to_exception()``,
which picks the right subclass from the failure's ``Reason``.
"""

from __future__ import annotations


class DomainError(Exception):
    """
    Base class for all domain / business-rule errors.

    Catch this at the view boundary and convert to a 400 Bad Request.
    """

    def __init__(self, message: str = "A business rule was violated.") -> None:
        self.message = message
        super().__init__(self.message)


class NotFound(DomainError):
    """
    The requested offender, conviction, custody record or institution
    does not exist.

    Maps to HTTP 404.
    """

    def __init__(self, message: str = "The requested resource was not found.") -> None:
        super().__init__(message)


class Conflict(DomainError):
    """
    The operation conflicts with the current state of the records.

    Typical usage: duplicate offenders for a NOMS number, several active
    custodial sentences where exactly one was expected.
    Maps to HTTP 409.
    """

    def __init__(self, message: str = "The operation conflicts with the current state.") -> None:
        super().__init__(message)
