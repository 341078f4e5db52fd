"""
core.domain.transactions — atomic units of work.

Custody fields, key dates, history rows, cross references, contacts and
manager allocations written by one reconciliation call either all commit
or none do.  Outbox notifications registered with ``on_commit`` inside
the unit are only queued once it commits.

Usage::

    from core.domain.transactions import run_in_atomic

    result = run_in_atomic(cls._update_prison_location, noms_number, code)
"""

from __future__ import annotations

from typing import Any, Callable, TypeVar

from django.db import transaction

T = TypeVar("T")


def run_in_atomic(fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """
    Call ``fn`` inside ``transaction.atomic()`` and return its value.

    Used instead of ``@transaction.atomic`` on entry points that emit
    telemetry after the unit of work, so a rolled back unit never reports
    an outcome.  A ``Failure`` returned by ``fn`` does not roll back; an
    exception does.
    """
    with transaction.atomic():
        return fn(*args, **kwargs)
