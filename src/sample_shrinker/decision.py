"""Mapping sample properties into concrete conversion plans.

The planner is a pure function of a :class:`SampleProperties` snapshot, the
run's :class:`TargetConfig` and the auto-mono verdict. Policies run in a fixed
order (bit-depth, sample-rate, channels) and each one records its property
change and directives on a shared :class:`PlanBuilder`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .audio_contract import (
    BIT_DEPTH_FLOOR,
    CANONICAL_EXTENSION,
    NO_DITHER_BIT_DEPTH,
    NORMALIZE_GUARD_DB,
    SAMPLE_RATE_FLOOR_HZ,
    destination_for,
)
from .domain.directives import (
    ConversionDirective,
    DisableDither,
    MixDownChannels,
    Normalize,
    SetBitDepth,
    SetEncoding,
    SetSampleRate,
)
from .domain.errors import UnsupportedEncodingError
from .domain.models import (
    ChangedProperty,
    ConversionPlan,
    PropertyChange,
    ReasonCode,
    SampleEncoding,
    SampleProperties,
)
from .utils.config import TargetConfig

_DECODE_HINTS = (SampleEncoding.SIGNED_INTEGER, SampleEncoding.FLOATING_POINT)


@dataclass(slots=True)
class PlanBuilder:
    """Mutable accumulator threaded through the planning policies."""

    source_path: Path
    changes: list[PropertyChange] = field(default_factory=list)
    source_directives: list[ConversionDirective] = field(default_factory=list)
    destination_directives: list[ConversionDirective] = field(default_factory=list)
    post_directives: list[ConversionDirective] = field(default_factory=list)

    def record(
        self,
        prop: ChangedProperty,
        before: int,
        after: int,
        reason: ReasonCode = ReasonCode.NONE,
    ) -> None:
        self.changes.append(PropertyChange(prop, before, after, reason))

    def build(self) -> ConversionPlan:
        extension_differs = self.source_path.suffix.lower() != CANONICAL_EXTENSION
        return ConversionPlan(
            source_path=self.source_path,
            destination_path=destination_for(self.source_path),
            changes=tuple(self.changes),
            source_directives=tuple(self.source_directives),
            destination_directives=tuple(self.destination_directives),
            post_directives=tuple(self.post_directives),
            extension_change_only=not self.changes and extension_differs,
        )


def _plan_bit_depth(
    builder: PlanBuilder, props: SampleProperties, config: TargetConfig
) -> None:
    bit_depth = props.bit_depth
    target = config.target_bit_depth

    if bit_depth == target:
        return

    if bit_depth > target:
        if bit_depth == 32 and props.encoding not in _DECODE_HINTS:
            raise UnsupportedEncodingError(
                props.path, props.encoding_detail or props.encoding.value
            )

        reason = ReasonCode.NONE
        if config.pre_normalize:
            builder.source_directives.insert(0, Normalize(guard_db=NORMALIZE_GUARD_DB))
            reason = ReasonCode.PRE_NORMALIZE
        builder.destination_directives.append(SetBitDepth(target))
        if target == NO_DITHER_BIT_DEPTH:
            builder.destination_directives.append(DisableDither())
        if bit_depth == 32:
            # 32-bit containers are ambiguous; decoders misread them without a hint.
            builder.source_directives.append(SetEncoding(props.encoding))
        builder.record(ChangedProperty.BIT_DEPTH, bit_depth, target, reason)
        return

    if bit_depth < BIT_DEPTH_FLOOR:
        minimum = config.minimum_bit_depth
        if minimum is None or minimum <= bit_depth:
            return
        builder.destination_directives.append(SetBitDepth(minimum))
        if minimum == NO_DITHER_BIT_DEPTH:
            builder.destination_directives.append(DisableDither())
        builder.record(
            ChangedProperty.BIT_DEPTH, bit_depth, minimum, ReasonCode.MINIMUM_ENFORCED
        )


def _plan_sample_rate(
    builder: PlanBuilder, props: SampleProperties, config: TargetConfig
) -> None:
    rate = props.sample_rate
    target = config.target_sample_rate

    if target is not None and rate > target:
        builder.destination_directives.append(SetSampleRate(target))
        builder.record(ChangedProperty.SAMPLE_RATE, rate, target)
        return

    below_target = target is None or rate < target
    if rate < SAMPLE_RATE_FLOOR_HZ and below_target:
        minimum = config.minimum_sample_rate
        if minimum is None or minimum <= rate:
            return
        builder.destination_directives.append(SetSampleRate(minimum))
        builder.record(
            ChangedProperty.SAMPLE_RATE, rate, minimum, ReasonCode.MINIMUM_ENFORCED
        )


def _plan_channels(
    builder: PlanBuilder,
    props: SampleProperties,
    config: TargetConfig,
    effectively_mono: bool,
) -> None:
    channels = props.channels
    if channels <= 1:
        return

    if config.auto_mono and effectively_mono:
        reason = ReasonCode.AUTO_MONO
    elif channels > config.target_channels:
        reason = ReasonCode.NONE
    else:
        return

    builder.post_directives.append(
        MixDownChannels(from_channels=channels, to_channels=1)
    )
    builder.record(ChangedProperty.CHANNELS, channels, 1, reason)


def plan_conversion(
    props: SampleProperties,
    config: TargetConfig,
    effectively_mono: bool = False,
) -> ConversionPlan:
    """Decide what must change for ``props`` to meet ``config``.

    Raises :class:`UnsupportedEncodingError` for 32-bit samples whose encoding
    is neither signed-integer nor floating-point PCM.
    """

    builder = PlanBuilder(source_path=props.path)
    _plan_bit_depth(builder, props, config)
    _plan_sample_rate(builder, props, config)
    _plan_channels(builder, props, config, effectively_mono)
    return builder.build()
