"""Fixed-column, one-line summaries of conversion plans.

Column layout (single-space separated)::

    <bit-depth:10> <channels:9> <stereo-diff:>7> <effective-bits:>6> <path> [<status>]

When a run targets sample rates, a ``<sample-rate:14>`` column follows the
bit-depth column. A planned change renders as ``before->after`` with a reason
suffix: ``+A`` auto-mono, ``+P`` pre-normalize, ``+M`` minimum enforced.
"""

from __future__ import annotations

import math

from .domain.models import (
    ChangedProperty,
    ConversionPlan,
    PropertyChange,
    ReasonCode,
    SampleProperties,
)
from .utils.config import RunMode

BIT_DEPTH_WIDTH = 10
SAMPLE_RATE_WIDTH = 14
CHANNELS_WIDTH = 9
STEREO_DIFF_WIDTH = 7
EFFECTIVE_BITS_WIDTH = 6

APPLIED_STATUS = "[CHANGED]"
PENDING_STATUS = "[CHANGE]"

REASON_SUFFIXES: dict[ReasonCode, str] = {
    ReasonCode.NONE: "",
    ReasonCode.AUTO_MONO: "+A",
    ReasonCode.PRE_NORMALIZE: "+P",
    ReasonCode.MINIMUM_ENFORCED: "+M",
}


def _numeric_segment(current: int, change: PropertyChange | None) -> str:
    if change is None:
        return str(current)
    return f"{change.before}->{change.after}{REASON_SUFFIXES[change.reason]}"


def channel_label(channels: int) -> str:
    if channels <= 1:
        return "mono"
    if channels == 2:
        return "st"
    return f"{channels}ch"


def _channel_segment(channels: int, change: PropertyChange | None) -> str:
    label = channel_label(channels)
    if change is None:
        return label
    return f"{label}->m{REASON_SUFFIXES[change.reason]}"


def format_stereo_diff(stereo_peak_diff_db: float | None) -> str:
    if stereo_peak_diff_db is None:
        return ""
    if math.isinf(stereo_peak_diff_db):
        return "-inf" if stereo_peak_diff_db < 0 else "inf"
    return f"{stereo_peak_diff_db:.2f}"


def status_for(plan: ConversionPlan, mode: RunMode) -> str | None:
    if not plan.requires_conversion:
        return None
    return APPLIED_STATUS if mode is RunMode.CONVERT else PENDING_STATUS


def format_summary(
    plan: ConversionPlan,
    props: SampleProperties,
    mode: RunMode = RunMode.CONVERT,
    show_sample_rate: bool = False,
) -> str:
    """Render ``plan`` for ``props`` as a single fixed-width line.

    A sample-rate change is always shown; ``show_sample_rate`` keeps the
    column in place for unchanged samples too, so a run's lines stay aligned.
    """

    bit_depth = _numeric_segment(
        props.bit_depth, plan.change_for(ChangedProperty.BIT_DEPTH)
    )
    rate_change = plan.change_for(ChangedProperty.SAMPLE_RATE)
    channels = _channel_segment(
        props.channels, plan.change_for(ChangedProperty.CHANNELS)
    )

    columns = [f"{bit_depth:<{BIT_DEPTH_WIDTH}}"]
    if show_sample_rate or rate_change is not None:
        sample_rate = _numeric_segment(props.sample_rate, rate_change)
        columns.append(f"{sample_rate:<{SAMPLE_RATE_WIDTH}}")
    stereo_diff = format_stereo_diff(props.stereo_peak_diff_db)
    columns.extend(
        (
            f"{channels:<{CHANNELS_WIDTH}}",
            f"{stereo_diff:>{STEREO_DIFF_WIDTH}}",
            f"{props.effective_bit_depth:>{EFFECTIVE_BITS_WIDTH}}",
            str(plan.source_path),
        )
    )
    line = " ".join(columns)
    status = status_for(plan, mode)
    if status is None:
        return line
    return f"{line} {status}"
