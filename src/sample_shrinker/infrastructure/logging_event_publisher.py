"""Simple logging-backed implementation of the event publisher."""

from __future__ import annotations

import logging

from sample_shrinker.domain.events import DomainEvent

LOGGER = logging.getLogger("sample_shrinker.events")


class LoggingEventPublisher:
    """Emit event payload summaries to the debug log."""

    def publish(self, event: DomainEvent) -> None:
        LOGGER.debug(
            "[event] %s %s %s",
            type(event).__name__,
            event.sample_path,
            event.payload_summary,
            extra={
                "event_name": type(event).__name__,
                "sample_path": event.sample_path,
                "payload_summary": event.payload_summary,
                "occurred_at": event.occurred_at.isoformat(),
            },
        )
