"""
core.domain — Shared domain utilities for cross-app service layers.

Modules
-------
exceptions         Domain-specific exceptions that map cleanly to HTTP responses.
exception_handler  DRF handler rendering those exceptions.
results            Tagged ``Success`` / ``Failure`` results and the reason taxonomy.
features           Read-only feature switches.
notifications      After-commit SPG / IAPS outbox notifications.
telemetry          Named, fire-and-forget telemetry events.
transactions       Helpers for ``transaction.atomic`` units of work.

Usage from any app::

    from core.domain.exceptions import DomainError, NotFound
    from core.domain.results import Failure, Reason, Success
    from core.domain.features import FeatureSwitches
    from core.domain.notifications import SpgNotificationService
    from core.domain.telemetry import TelemetryClient
    from core.domain.transactions import run_in_atomic
"""
