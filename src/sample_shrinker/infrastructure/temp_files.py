"""Temporary-file infrastructure helpers."""

from __future__ import annotations

import os
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator


def sibling_temp_path(destination: Path) -> Path:
    """Return a process-unique path next to ``destination``.

    The audio extension is kept so converters still infer the output format.
    """

    name = f"{destination.name}.{os.getpid()}{destination.suffix}"
    return destination.with_name(name)


@contextmanager
def temporary_sibling_path(destination: Path) -> Iterator[Path]:
    """Yield a temp path beside ``destination``; removed unless renamed away."""

    temp_path = sibling_temp_path(destination)
    try:
        yield temp_path
    finally:
        temp_path.unlink(missing_ok=True)
