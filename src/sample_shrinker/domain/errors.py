"""Error taxonomy shared by the planner, inspector and orchestrator."""

from __future__ import annotations

from pathlib import Path


class SampleShrinkerError(Exception):
    """Base class for all sample-shrinker failures."""

    code = "error"


class ConfigError(SampleShrinkerError, ValueError):
    """Raised for invalid configuration values; fatal before any file is processed."""

    code = "config"


class InspectionError(SampleShrinkerError):
    """Raised when a sample cannot be read or its properties cannot be determined."""

    code = "inspection"

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(f"{message}: '{path}'")
        self.path = path


class UnsupportedEncodingError(SampleShrinkerError):
    """Raised when a 32-bit sample uses an encoding that cannot be re-interpreted."""

    code = "unsupported_encoding"

    def __init__(self, path: Path, encoding: str) -> None:
        super().__init__(f"Unsupported 32-bit encoding '{encoding}': '{path}'")
        self.path = path
        self.encoding = encoding


class ConversionFailure(SampleShrinkerError):
    """Raised when the external conversion tool fails, is missing or times out."""

    code = "conversion"

    def __init__(self, command: list[str], message: str) -> None:
        super().__init__(message)
        self.command = command


class FilesystemError(SampleShrinkerError):
    """Raised when backup or replace steps fail; the file needs operator review."""

    code = "filesystem"
