"""Per-run context threaded through the application services."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sample_shrinker.application.event_publisher import (
    EventPublisher,
    NullEventPublisher,
)
from sample_shrinker.utils.config import TargetConfig
from sample_shrinker.utils.log import LOGGER_NAME


@dataclass(frozen=True, slots=True)
class RunContext:
    """Configuration, log sink and event publisher for one run."""

    config: TargetConfig
    logger: logging.Logger = field(
        default_factory=lambda: logging.getLogger(LOGGER_NAME)
    )
    event_publisher: EventPublisher = field(default_factory=NullEventPublisher)
