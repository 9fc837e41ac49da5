"""Domain policies that do not depend on configuration plumbing."""

from __future__ import annotations

import math


def stereo_diff_is_mono(stereo_peak_diff_db: float | None, threshold_db: float) -> bool:
    """Return whether a measured stereo peak difference counts as effectively mono.

    ``stereo_peak_diff_db`` is the peak level of channel 1 summed with the
    phase-inverted channel 2. ``-inf`` means the channels cancel perfectly. Any
    other value qualifies when it is strictly quieter than ``threshold_db``.
    """

    if threshold_db > 0.0:
        raise ValueError(f"Auto-mono threshold must be <= 0 dB, got {threshold_db}.")
    if stereo_peak_diff_db is None:
        return False
    if math.isinf(stereo_peak_diff_db) and stereo_peak_diff_db < 0:
        return True
    return stereo_peak_diff_db < threshold_db
