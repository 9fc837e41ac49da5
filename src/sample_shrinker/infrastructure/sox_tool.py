"""Conversion and spectrogram adapters backed by the ``sox`` command line tool."""

from __future__ import annotations

import logging
import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from sample_shrinker.domain.directives import (
    ConversionDirective,
    DisableDither,
    MixDownChannels,
    Normalize,
    SetBitDepth,
    SetEncoding,
    SetSampleRate,
)
from sample_shrinker.domain.errors import ConversionFailure
from sample_shrinker.domain.models import ConversionPlan

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 300.0


def directive_arguments(directive: ConversionDirective) -> list[str]:
    """Translate one directive into sox command line syntax."""

    if isinstance(directive, Normalize):
        return [f"--norm={directive.guard_db:g}"]
    if isinstance(directive, SetEncoding):
        return ["-e", directive.encoding.value]
    if isinstance(directive, SetBitDepth):
        return [f"--bits={directive.bits}"]
    if isinstance(directive, DisableDither):
        return ["--no-dither"]
    if isinstance(directive, SetSampleRate):
        return ["-r", str(directive.rate_hz)]
    if isinstance(directive, MixDownChannels):
        if directive.to_channels != 1:
            raise ValueError("sox remix directives only support mixing down to mono.")
        return ["remix", f"1-{directive.from_channels}"]
    raise TypeError(f"Unknown conversion directive: {directive!r}")


def sox_arguments(directives: Iterable[ConversionDirective]) -> list[str]:
    arguments: list[str] = []
    for directive in directives:
        arguments.extend(directive_arguments(directive))
    return arguments


def format_command(command: Iterable[str]) -> str:
    """Render a command for logs and dry-run output."""

    return shlex.join(list(command))


@dataclass(frozen=True, slots=True)
class SoxTool:
    """Run sox as a bounded subprocess."""

    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    executable: str = "sox"

    def conversion_command(self, plan: ConversionPlan, destination: Path) -> list[str]:
        return [
            self.executable,
            *sox_arguments(plan.source_directives),
            str(plan.source_path),
            *sox_arguments(plan.destination_directives),
            str(destination),
            *sox_arguments(plan.post_directives),
        ]

    def spectrogram_command(self, source: Path, image: Path) -> list[str]:
        return [self.executable, str(source), "-n", "spectrogram", "-o", str(image)]

    def convert(self, plan: ConversionPlan, destination: Path) -> None:
        """Convert ``plan.source_path`` into ``destination``."""

        self._run(self.conversion_command(plan, destination))

    def render_spectrogram(self, source: Path, image: Path) -> None:
        self._run(self.spectrogram_command(source, image))

    def _run(self, command: list[str]) -> None:
        logger.debug("[sox] %s", format_command(command))
        try:
            completed = subprocess.run(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                timeout=self.timeout_seconds,
                check=False,
            )
        except FileNotFoundError as exc:
            raise ConversionFailure(
                command, f"'{self.executable}' executable not found"
            ) from exc
        except subprocess.TimeoutExpired as exc:
            raise ConversionFailure(
                command,
                f"'{self.executable}' timed out after {self.timeout_seconds:g}s",
            ) from exc

        if completed.stderr:
            logger.debug("[sox] %s", completed.stderr.strip())
        if completed.returncode != 0:
            detail = completed.stderr.strip() or "no output"
            raise ConversionFailure(
                command,
                f"'{self.executable}' exited with status "
                f"{completed.returncode}: {detail}",
            )
