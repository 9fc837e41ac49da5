"""Resolve command line FILE|DIRECTORY arguments into sample files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Iterator

from .audio_contract import normalize_extension

logger = logging.getLogger(__name__)


def _is_within(path: Path, directory: Path) -> bool:
    try:
        path.resolve().relative_to(directory.resolve())
    except ValueError:
        return False
    return True


def walk_directory(
    directory: Path, extension: str, exclude: Path | None = None
) -> list[Path]:
    """Return files under ``directory`` whose suffix matches ``extension``.

    Suffixes are compared case-insensitively.
    """

    suffix = f".{normalize_extension(extension)}"
    matches = []
    for candidate in sorted(directory.rglob("*")):
        if not candidate.is_file() or candidate.suffix.lower() != suffix:
            continue
        if exclude is not None and _is_within(candidate, exclude):
            continue
        matches.append(candidate)
    return matches


def select_sample_files(
    inputs: Iterable[Path],
    extension: str,
    exclude: Path | None = None,
) -> Iterator[Path]:
    """Yield sample files for each input.

    Files are yielded as given, whatever their extension. Directories are walked
    recursively for ``extension`` files, skipping anything under ``exclude``.
    Other inputs are skipped with a warning.
    """

    for source in inputs:
        if source.is_dir():
            found = walk_directory(source, extension, exclude=exclude)
            logger.debug("INPUTS under '%s': %d", source, len(found))
            yield from found
        elif source.is_file():
            yield source
        else:
            logger.warning("SKIPPING: Not a file or directory: '%s'", source)
