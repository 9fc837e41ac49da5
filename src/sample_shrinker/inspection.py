"""Sample inspection backed by libsndfile.

Container facts (channels, sample-rate, nominal bit-depth, encoding) come
from the file header. Signal facts (effective bit-depth and the stereo peak
difference used by auto-mono) are measured in a single streaming pass over
the samples, read as left-justified 32-bit integers.
"""

from __future__ import annotations

import math
from pathlib import Path

import numpy as np
import soundfile as sf

from .domain.errors import InspectionError
from .domain.models import SampleEncoding, SampleProperties

_BLOCK_FRAMES = 65_536
_FULL_SCALE = float(2**31)

# libsndfile subtype -> (nominal bit-depth, encoding family)
SUBTYPE_FORMATS: dict[str, tuple[int, SampleEncoding]] = {
    "PCM_S8": (8, SampleEncoding.SIGNED_INTEGER),
    "PCM_16": (16, SampleEncoding.SIGNED_INTEGER),
    "PCM_24": (24, SampleEncoding.SIGNED_INTEGER),
    "PCM_32": (32, SampleEncoding.SIGNED_INTEGER),
    "FLOAT": (32, SampleEncoding.FLOATING_POINT),
    "DOUBLE": (64, SampleEncoding.FLOATING_POINT),
    "PCM_U8": (8, SampleEncoding.OTHER),
    "ULAW": (8, SampleEncoding.OTHER),
    "ALAW": (8, SampleEncoding.OTHER),
    "IMA_ADPCM": (4, SampleEncoding.OTHER),
    "MS_ADPCM": (4, SampleEncoding.OTHER),
    "VOX_ADPCM": (4, SampleEncoding.OTHER),
    "G721_32": (4, SampleEncoding.OTHER),
    "G723_24": (3, SampleEncoding.OTHER),
    "G723_40": (5, SampleEncoding.OTHER),
    "DWVW_12": (12, SampleEncoding.OTHER),
    "DWVW_16": (16, SampleEncoding.OTHER),
    "DWVW_24": (24, SampleEncoding.OTHER),
    "DPCM_8": (8, SampleEncoding.OTHER),
    "DPCM_16": (16, SampleEncoding.OTHER),
    "ALAC_16": (16, SampleEncoding.OTHER),
    "ALAC_20": (20, SampleEncoding.OTHER),
    "ALAC_24": (24, SampleEncoding.OTHER),
    "ALAC_32": (32, SampleEncoding.OTHER),
}


def peak_to_db(peak: float) -> float:
    """Convert a linear peak (1.0 = full scale) to dBFS; silence is ``-inf``."""

    if peak <= 0.0:
        return -math.inf
    return 20.0 * math.log10(peak)


def _trailing_zero_bits(mask: int) -> int:
    return (mask & -mask).bit_length() - 1


def measure_signal(
    path: Path, channels: int, nominal_bit_depth: int
) -> tuple[int, float | None]:
    """Return ``(effective_bit_depth, stereo_peak_diff_db)`` for the sample at ``path``.

    The stereo difference is the peak of channel 1 plus phase-inverted channel 2,
    and is ``None`` for mono samples.
    """

    used_bits = 0
    diff_peak = 0
    blocks = sf.blocks(
        str(path), blocksize=_BLOCK_FRAMES, dtype="int32", always_2d=True
    )
    for block in blocks:
        if block.size == 0:
            continue
        used_bits |= int(np.bitwise_or.reduce(block.view(np.uint32).ravel()))
        if channels >= 2:
            difference = block[:, 0].astype(np.int64) - block[:, 1].astype(np.int64)
            diff_peak = max(diff_peak, int(np.max(np.abs(difference))))

    effective = 0
    if used_bits:
        effective = min(nominal_bit_depth, 32 - _trailing_zero_bits(used_bits))
    stereo_diff = peak_to_db(diff_peak / _FULL_SCALE) if channels >= 2 else None
    return effective, stereo_diff


def inspect_sample(path: Path) -> SampleProperties:
    """Read the current audio properties of ``path``.

    Raises :class:`InspectionError` if the file is missing, cannot be parsed, or
    uses a codec with no nominal bit-depth.
    """

    if not path.is_file():
        raise InspectionError(path, "No such file")

    try:
        info = sf.info(str(path))
    except (RuntimeError, OSError) as exc:
        raise InspectionError(path, f"Unreadable or unsupported audio ({exc})") from exc

    try:
        bit_depth, encoding = SUBTYPE_FORMATS[info.subtype]
    except KeyError as exc:
        raise InspectionError(
            path, f"No nominal bit-depth for subtype {info.subtype}"
        ) from exc

    if info.channels < 1 or info.samplerate <= 0:
        raise InspectionError(path, "Invalid channel count or sample rate")

    try:
        effective_bit_depth, stereo_diff = measure_signal(
            path, info.channels, bit_depth
        )
    except (RuntimeError, OSError) as exc:
        raise InspectionError(path, f"Cannot decode audio ({exc})") from exc

    return SampleProperties(
        path=path,
        channels=int(info.channels),
        bit_depth=bit_depth,
        sample_rate=int(info.samplerate),
        encoding=encoding,
        effective_bit_depth=effective_bit_depth,
        stereo_peak_diff_db=stereo_diff,
        encoding_detail=info.subtype,
    )
