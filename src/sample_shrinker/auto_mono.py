"""Auto-mono classification of stereo samples."""

from __future__ import annotations

from pathlib import Path

from .domain.models import SampleProperties
from .domain.policies import stereo_diff_is_mono
from .inspection import inspect_sample


def properties_are_effectively_mono(
    props: SampleProperties, threshold_db: float
) -> bool:
    """Apply the auto-mono comparison to already inspected properties."""

    if props.channels < 2:
        return False
    return stereo_diff_is_mono(props.stereo_peak_diff_db, threshold_db)


def is_effectively_mono(path: Path, threshold_db: float) -> bool:
    """Return whether the stereo sample at ``path`` carries effectively mono content.

    Mono samples return ``False``; they already satisfy any channel target.
    """

    return properties_are_effectively_mono(inspect_sample(path), threshold_db)
