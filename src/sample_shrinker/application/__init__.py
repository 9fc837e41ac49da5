"""Application layer."""

from .context import RunContext
from .conversion_tool import ConversionTool
from .event_publisher import EventPublisher, NullEventPublisher
from .shrink_service import ShrinkSample, backup_location, spectrogram_paths

__all__ = [
    "RunContext",
    "ConversionTool",
    "EventPublisher",
    "NullEventPublisher",
    "ShrinkSample",
    "backup_location",
    "spectrogram_paths",
]
