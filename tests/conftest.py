from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import pytest
import soundfile as sf

from sample_shrinker.application.context import RunContext
from sample_shrinker.domain.errors import ConversionFailure
from sample_shrinker.infrastructure.sox_tool import SoxTool
from sample_shrinker.utils.config import build_target_config


class RecordingPublisher:
    def __init__(self) -> None:
        self.events = []

    def publish(self, event) -> None:
        self.events.append(event)


class FakeConversionTool:
    """Stands in for sox: records calls and writes recognisable output."""

    def __init__(self) -> None:
        self.conversions = []
        self.spectrograms = []
        self.fail = False
        self.fail_spectrograms = False

    def conversion_command(self, plan, destination):
        return SoxTool().conversion_command(plan, destination)

    def convert(self, plan, destination: Path) -> None:
        self.conversions.append((plan, destination))
        if self.fail:
            destination.write_bytes(b"half-written")
            raise ConversionFailure(["sox"], "'sox' exited with status 2: boom")
        destination.write_bytes(b"converted")

    def render_spectrogram(self, source: Path, image: Path) -> None:
        self.spectrograms.append((source, image))
        if self.fail_spectrograms:
            raise ConversionFailure(
                ["sox"], "'sox' exited with status 1: no spectrogram"
            )
        image.write_bytes(b"png")


@pytest.fixture
def write_sample():
    """Write a short 440 Hz test sample and return its path.

    ``signal`` is one of ``"identical"`` (all channels equal), ``"wide"`` (only
    the first channel carries the tone) or ``"silent"``.
    """

    def _write(
        path: Path,
        *,
        channels: int = 1,
        subtype: str = "PCM_16",
        sample_rate: int = 44_100,
        frames: int = 2_048,
        signal: str = "identical",
        file_format: str | None = None,
    ) -> Path:
        t = np.arange(frames) / sample_rate
        tone = 0.5 * np.sin(2 * np.pi * 440.0 * t)
        if signal == "silent":
            tone = np.zeros(frames)
        columns = [tone] * channels
        if signal == "wide" and channels >= 2:
            columns = [tone] + [np.zeros(frames)] * (channels - 1)
        data = columns[0] if channels == 1 else np.column_stack(columns)
        path.parent.mkdir(parents=True, exist_ok=True)
        sf.write(str(path), data, sample_rate, subtype=subtype, format=file_format)
        return path

    return _write


@pytest.fixture(autouse=True)
def _reset_package_logger():
    yield
    logger = logging.getLogger("sample_shrinker")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture
def fake_tool() -> FakeConversionTool:
    return FakeConversionTool()


@pytest.fixture
def make_context(publisher):
    def _make(**config_values) -> RunContext:
        return RunContext(
            config=build_target_config(**config_values),
            logger=logging.getLogger("sample_shrinker.tests"),
            event_publisher=publisher,
        )

    return _make
