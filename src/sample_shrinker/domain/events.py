"""Domain event contracts for sample processing workflows."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


@dataclass(frozen=True, slots=True)
class DomainEvent:
    """Base domain event emitted by application services."""

    sample_path: str
    payload_summary: dict[str, Any]
    occurred_at: datetime = field(default_factory=lambda: datetime.now(tz=timezone.utc))


@dataclass(frozen=True, slots=True)
class SampleInspected(DomainEvent):
    """Sample properties were read from disk."""


@dataclass(frozen=True, slots=True)
class ConversionPlanned(DomainEvent):
    """A conversion plan was computed for a sample."""


@dataclass(frozen=True, slots=True)
class SampleSkipped(DomainEvent):
    """The sample already meets every target; nothing was changed."""


@dataclass(frozen=True, slots=True)
class SampleConverted(DomainEvent):
    """The sample was converted and its original backed up."""


@dataclass(frozen=True, slots=True)
class SampleFailed(DomainEvent):
    """Processing failed for the sample; see ``payload_summary['stage']``."""
