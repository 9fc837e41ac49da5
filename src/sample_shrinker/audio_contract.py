"""Sample format contract shared by the planner, the CLI and the converter.

Invariants
----------
* Every converted sample is written as ``CANONICAL_EXTENSION``.
* Bit-depth and sample-rate are only ever lowered towards their targets; they
  are raised only when a minimum is configured and the sample sits below the
  corresponding floor.
"""

from __future__ import annotations

from pathlib import Path

# Container every output sample ends up in (lower-case, with leading dot).
CANONICAL_EXTENSION = ".wav"

# Extension searched for when walking directories.
DEFAULT_SOURCE_EXTENSION = "wav"

# Bit-depths a configuration may name, and the subset the CLI accepts.
BIT_DEPTH_CHOICES: tuple[int, ...] = (8, 16, 24, 32)
CLI_BIT_DEPTH_CHOICES: tuple[int, ...] = (8, 16, 24)
CHANNEL_CHOICES: tuple[int, ...] = (1, 2)

# Samples below these are "below the floor" and only raised when a minimum is set.
BIT_DEPTH_FLOOR = 8
SAMPLE_RATE_FLOOR_HZ = 11_025

# Headroom left by pre-normalization so the normalize step itself cannot clip.
NORMALIZE_GUARD_DB = -0.1

# Dithering down to this depth is disabled.
NO_DITHER_BIT_DEPTH = 8

DEFAULT_TARGET_BIT_DEPTH = 16
DEFAULT_TARGET_CHANNELS = 2
DEFAULT_AUTO_MONO_THRESHOLD_DB = -95.5
DEFAULT_BACKUP_DIR = Path("_backup")


def normalize_extension(extension: str) -> str:
    """Return an extension lower-cased and without its leading dot."""

    return extension.strip().lstrip(".").lower()


def destination_for(source: Path) -> Path:
    """Return the canonical output path for ``source``.

    A source that already carries the canonical extension in any letter case keeps
    its exact name, so it is replaced in place rather than shadowed by a sibling.
    """

    if source.suffix.lower() == CANONICAL_EXTENSION:
        return source
    return source.with_suffix(CANONICAL_EXTENSION)
