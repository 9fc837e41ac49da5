"""Port for the external audio conversion tool."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from sample_shrinker.domain.models import ConversionPlan


class ConversionTool(Protocol):
    """Converts samples and renders spectrograms.

    Implementations raise :class:`~sample_shrinker.domain.errors.ConversionFailure`
    when the tool fails, is unavailable or times out.
    """

    def conversion_command(self, plan: ConversionPlan, destination: Path) -> list[str]:
        """Return the exact command that :meth:`convert` would run."""

    def convert(self, plan: ConversionPlan, destination: Path) -> None:
        """Write the converted ``plan.source_path`` to ``destination``."""

    def render_spectrogram(self, source: Path, image: Path) -> None:
        """Render a spectrogram image of ``source``."""
