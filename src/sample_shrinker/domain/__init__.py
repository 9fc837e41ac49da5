"""Domain layer."""

from .errors import (
    ConfigError,
    ConversionFailure,
    FilesystemError,
    InspectionError,
    SampleShrinkerError,
    UnsupportedEncodingError,
)
from .events import (
    ConversionPlanned,
    DomainEvent,
    SampleConverted,
    SampleFailed,
    SampleInspected,
    SampleSkipped,
)
from .models import (
    BackupRecord,
    ChangedProperty,
    ConversionPlan,
    ProcessingOutcome,
    PropertyChange,
    ReasonCode,
    SampleEncoding,
    SampleProperties,
    SampleResult,
)
from .policies import stereo_diff_is_mono

__all__ = [
    "DomainEvent",
    "SampleInspected",
    "ConversionPlanned",
    "SampleSkipped",
    "SampleConverted",
    "SampleFailed",
    "SampleShrinkerError",
    "ConfigError",
    "InspectionError",
    "UnsupportedEncodingError",
    "ConversionFailure",
    "FilesystemError",
    "BackupRecord",
    "ChangedProperty",
    "ConversionPlan",
    "ProcessingOutcome",
    "PropertyChange",
    "ReasonCode",
    "SampleEncoding",
    "SampleProperties",
    "SampleResult",
    "stereo_diff_is_mono",
]
