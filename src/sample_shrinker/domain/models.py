"""Domain models for sample inspection, planning and apply workflows."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sample_shrinker.domain.directives import ConversionDirective


class SampleEncoding(str, Enum):
    """PCM encoding families that matter to conversion decisions."""

    SIGNED_INTEGER = "signed-integer"
    FLOATING_POINT = "floating-point"
    OTHER = "other"


class ChangedProperty(str, Enum):
    """Sample properties the planner may change."""

    BIT_DEPTH = "bit_depth"
    SAMPLE_RATE = "sample_rate"
    CHANNELS = "channels"


class ReasonCode(str, Enum):
    """Why a property change was planned, beyond a plain target request."""

    NONE = "none"
    AUTO_MONO = "auto_mono"
    PRE_NORMALIZE = "pre_normalize"
    MINIMUM_ENFORCED = "minimum_enforced"


class ProcessingOutcome(str, Enum):
    """Terminal per-file states of a run."""

    SKIPPED = "skipped"
    LISTED = "listed"
    DRY_RUN = "dry_run"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    INCONSISTENT = "inconsistent"


@dataclass(frozen=True, slots=True)
class SampleProperties:
    """Snapshot of a sample's audio characteristics, taken once per run."""

    path: Path
    channels: int
    bit_depth: int
    sample_rate: int
    encoding: SampleEncoding
    effective_bit_depth: int
    stereo_peak_diff_db: float | None = None
    encoding_detail: str = ""


@dataclass(frozen=True, slots=True)
class PropertyChange:
    """One planned transition of a single property."""

    property: ChangedProperty
    before: int
    after: int
    reason: ReasonCode = ReasonCode.NONE


@dataclass(frozen=True, slots=True)
class ConversionPlan:
    """Everything needed to convert one sample, plus why."""

    source_path: Path
    destination_path: Path
    changes: tuple[PropertyChange, ...]
    source_directives: tuple["ConversionDirective", ...]
    destination_directives: tuple["ConversionDirective", ...]
    post_directives: tuple["ConversionDirective", ...]
    extension_change_only: bool

    @property
    def requires_conversion(self) -> bool:
        return bool(self.changes) or self.extension_change_only

    @property
    def paths_collide(self) -> bool:
        """Whether source and destination name one file on a case-insensitive disk."""

        return str(self.source_path).upper() == str(self.destination_path).upper()

    def change_for(self, prop: ChangedProperty) -> PropertyChange | None:
        for change in self.changes:
            if change.property is prop:
                return change
        return None


@dataclass(frozen=True, slots=True)
class BackupRecord:
    """Where an original sample was preserved."""

    original_path: Path
    backup_path: Path


@dataclass(frozen=True, slots=True)
class SampleResult:
    """Outcome of processing one sample."""

    path: Path
    outcome: ProcessingOutcome
    summary: str | None = None
    command: tuple[str, ...] | None = None
    backup: BackupRecord | None = None
    error: str | None = None

    @property
    def changed(self) -> bool:
        return self.outcome in (ProcessingOutcome.SUCCEEDED, ProcessingOutcome.DRY_RUN)
