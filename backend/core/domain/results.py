"""
core.domain.results — Tagged results for the custody reconciliation engine.

Every fallible service operation returns either a ``Success`` carrying a
value or a ``Failure`` carrying a ``Reason`` and a human readable message.
Expected domain conditions never travel as exceptions, which keeps the
reason taxonomy closed and lets each caller (API view, telemetry-only
pipeline, management command) react to every branch explicitly.

Usage::

    result = (
        OffenderQueryService.get_most_likely_by_noms_number(noms_number)
        .flat_map(ConvictionQueryService.get_active_custodial_events)
        .flat_map(keep_in_custody_or_about_to_enter)
    )
    if result.is_failure:
        logger.info("Ignored: %s", result.message)

    # At the API boundary
    custody = result.unwrap()      # raises NotFound / Conflict / DomainError
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar, Union

from core.domain.exceptions import Conflict, DomainError, NotFound

T = TypeVar("T")
U = TypeVar("U")


class Reason(str, enum.Enum):
    """Closed set of reasons a reconciliation operation can fail."""

    OFFENDER_NOT_FOUND = "OffenderNotFound"
    MULTIPLE_OFFENDERS_FOUND = "MultipleOffendersFound"
    CONVICTION_NOT_FOUND = "ConvictionNotFound"
    MULTIPLE_CUSTODIAL_SENTENCES = "MultipleCustodialSentences"
    CUSTODIAL_SENTENCE_NOT_FOUND_IN_CORRECT_STATE = "CustodialSentenceNotFoundInCorrectState"
    TRANSFER_PRISON_NOT_FOUND = "TransferPrisonNotFound"
    INVALID_TYPE_CODE = "InvalidTypeCode"
    NO_ACTIVE_CUSTODIAL_SENTENCE = "NoActiveCustodialSentence"


class Outcome(str, enum.Enum):
    """Classification of a successful custody update."""

    UPDATED = "Updated"
    NO_UPDATE_REQUIRED = "NoUpdateRequired"


# Reason → exception raised when a caller unwraps a failure.
_EXCEPTION_MAP: dict[Reason, type[DomainError]] = {
    Reason.OFFENDER_NOT_FOUND: NotFound,
    Reason.CONVICTION_NOT_FOUND: NotFound,
    Reason.TRANSFER_PRISON_NOT_FOUND: NotFound,
    Reason.NO_ACTIVE_CUSTODIAL_SENTENCE: NotFound,
    Reason.MULTIPLE_OFFENDERS_FOUND: Conflict,
    Reason.MULTIPLE_CUSTODIAL_SENTENCES: Conflict,
    Reason.CUSTODIAL_SENTENCE_NOT_FOUND_IN_CORRECT_STATE: Conflict,
    Reason.INVALID_TYPE_CODE: DomainError,
}


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T

    is_success = True
    is_failure = False

    def map(self, fn: Callable[[T], U]) -> "Success[U]":
        return Success(fn(self.value))

    def flat_map(self, fn: Callable[[T], "Result[U]"]) -> "Result[U]":
        return fn(self.value)

    def fold(self, on_failure: Callable[["Failure"], Any], on_success: Callable[[T], Any]) -> Any:
        return on_success(self.value)

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Failure:
    reason: Reason
    message: str

    is_success = False
    is_failure = True

    def map(self, fn: Callable[[Any], Any]) -> "Failure":
        return self

    def flat_map(self, fn: Callable[[Any], Any]) -> "Failure":
        return self

    def fold(self, on_failure: Callable[["Failure"], Any], on_success: Callable[[Any], Any]) -> Any:
        return on_failure(self)

    def to_exception(self) -> DomainError:
        """Build the domain exception matching this failure's reason."""
        return _EXCEPTION_MAP[self.reason](self.message)

    def unwrap(self):
        raise self.to_exception()


Result = Union[Success[T], Failure]


@dataclass(frozen=True)
class CustodyUpdate:
    """
    Value carried by a successful prison-location update.

    ``custodies`` holds the updated records for ``Outcome.UPDATED`` and the
    unchanged records for ``Outcome.NO_UPDATE_REQUIRED``.
    """

    outcome: Outcome
    custodies: list

    @classmethod
    def updated(cls, custodies: list) -> "CustodyUpdate":
        return cls(Outcome.UPDATED, custodies)

    @classmethod
    def no_update_required(cls, custodies: list) -> "CustodyUpdate":
        return cls(Outcome.NO_UPDATE_REQUIRED, custodies)
