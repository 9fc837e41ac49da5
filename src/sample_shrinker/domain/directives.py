"""Typed instructions for the external conversion tool.

Directives describe *what* the converter must do. Turning them into concrete
command line syntax is the job of :mod:`sample_shrinker.infrastructure.sox_tool`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from sample_shrinker.domain.models import SampleEncoding


@dataclass(frozen=True, slots=True)
class Normalize:
    """Normalize the source to ``guard_db`` below full scale before conversion."""

    guard_db: float


@dataclass(frozen=True, slots=True)
class SetEncoding:
    """Decode hint: read the source explicitly as the given PCM encoding."""

    encoding: SampleEncoding


@dataclass(frozen=True, slots=True)
class SetBitDepth:
    """Write the destination at ``bits`` per sample."""

    bits: int


@dataclass(frozen=True, slots=True)
class DisableDither:
    """Turn off dithering when reducing bit-depth."""


@dataclass(frozen=True, slots=True)
class SetSampleRate:
    """Write the destination at ``rate_hz``."""

    rate_hz: int


@dataclass(frozen=True, slots=True)
class MixDownChannels:
    """Mix ``from_channels`` source channels into ``to_channels`` output channels."""

    from_channels: int
    to_channels: int = 1


ConversionDirective = Union[
    Normalize,
    SetEncoding,
    SetBitDepth,
    DisableDither,
    SetSampleRate,
    MixDownChannels,
]
