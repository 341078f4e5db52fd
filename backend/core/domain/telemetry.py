"""
core.domain.telemetry — Fire-and-forget named telemetry events.

Telemetry is emitted through the dedicated ``telemetry`` logger; the
``LOGGING`` config in ``settings.py`` decides where those records end up
(console in development, a collector-friendly handler in production).
Each record carries the event name and its string properties in
``extra`` so structured handlers can pick them up.

Emission never raises: a broken handler is logged and swallowed so that
an otherwise successful update is never reported as failed.

Usage::

    from core.domain.telemetry import TelemetryClient

    TelemetryClient.track_event(
        "P2PTransferPrisonUpdated",
        {"offenderNo": "G1234AB", "toAgency": "MDI", "updatedCount": "1"},
    )
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

logger = logging.getLogger(__name__)
telemetry_logger = logging.getLogger("telemetry")


class TelemetryClient:
    """Stateless telemetry sink."""

    @classmethod
    def track_event(cls, name: str, properties: Mapping[str, Any] | None = None) -> None:
        props = {key: "" if value is None else str(value) for key, value in (properties or {}).items()}
        try:
            telemetry_logger.info(
                "%s %s",
                name,
                props,
                extra={"telemetry_event": name, "telemetry_properties": props},
            )
        except Exception:  # noqa: BLE001
            logger.exception("Failed to emit telemetry event %s", name)
