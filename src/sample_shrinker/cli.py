"""CLI interface for sample-shrinker."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click
import typer

from .audio_contract import CHANNEL_CHOICES, CLI_BIT_DEPTH_CHOICES
from .domain.errors import ConfigError
from .domain.models import ProcessingOutcome, SampleResult
from .infrastructure.sox_tool import format_command
from .interfaces.cli_handlers import build_context, log_settings, run_batch, summarize
from .utils.config import (
    RunMode,
    TargetConfig,
    build_target_config,
    load_target_config,
)

PROG_NAME = "sample-shrinker"

app = typer.Typer(
    help="Conditionally batch-convert audio samples into minimal .wav files.",
    add_completion=False,
)


def _cli_bit_depth(flag: str, value: int) -> int:
    if value not in CLI_BIT_DEPTH_CHOICES:
        allowed = ", ".join(str(choice) for choice in CLI_BIT_DEPTH_CHOICES)
        raise ConfigError(
            f"{flag} takes a bitdepth of {allowed}; got invalid value: '{value}'"
        )
    return value


def _cli_channels(value: str) -> int | None:
    """Parse ``-c``; anything other than a supported channel count is ignored."""

    try:
        channels = int(value)
    except ValueError:
        return None
    return channels if channels in CHANNEL_CHOICES else None


def _reject_late_options(paths: list[Path]) -> None:
    for path in paths:
        text = str(path)
        if text.startswith("-") and not path.is_file() and not path.is_dir():
            raise click.UsageError(
                f"Argument '{text}' looks like an option, and is not a FILE or "
                "DIRECTORY (options must be provided before all files and "
                "directories)"
            )


def _echo_result(result: SampleResult) -> None:
    if result.outcome in (ProcessingOutcome.LISTED, ProcessingOutcome.SUCCEEDED):
        typer.echo(result.summary)
    elif result.outcome is ProcessingOutcome.DRY_RUN:
        typer.echo(result.summary)
        typer.echo(f"    {format_command(result.command or ())}")
    elif result.outcome in (ProcessingOutcome.FAILED, ProcessingOutcome.INCONSISTENT):
        outcome = result.outcome.value.upper()
        typer.echo(f"[{outcome}] {result.path} error={result.error}")


def build_config(config_file: Path | None, values: dict[str, Any]) -> TargetConfig:
    if config_file is not None:
        return load_target_config(config_file, **values)
    return build_target_config(**values)


@app.command(
    context_settings={
        "allow_interspersed_args": False,
        "help_option_names": ["-h", "--help"],
    }
)
def shrink_command(
    paths: list[Path] = typer.Argument(
        None,
        metavar="FILE|DIRECTORY ...",
        show_default=False,
        help=(
            "Files are processed whatever their extension; "
            "directories are searched recursively."
        ),
    ),
    source_extension: str | None = typer.Option(
        None,
        "-x",
        metavar="EXT",
        help="Sample extension searched for under directories. Default: wav.",
    ),
    target_bit_depth: int | None = typer.Option(
        None,
        "-b",
        metavar="BITDEPTH",
        help="Target bitdepth (only decreases): 8, 16 or 24. Default: 16.",
    ),
    minimum_bit_depth: int | None = typer.Option(
        None,
        "-B",
        metavar="BITDEPTH",
        help="Raise samples below 8 bits to this bitdepth: 8, 16 or 24.",
    ),
    target_sample_rate: int | None = typer.Option(
        None,
        "-s",
        "-r",
        metavar="RATE",
        help="Target sample rate in Hz (only decreases).",
    ),
    minimum_sample_rate: int | None = typer.Option(
        None,
        "-R",
        metavar="RATE",
        help="Raise samples below 11025 Hz to this sample rate.",
    ),
    target_channels: str | None = typer.Option(
        None,
        "-c",
        metavar="CHANNELS",
        help=(
            "Target channels (only decreases): 1 or 2. "
            "Other values are ignored. Default: 2."
        ),
    ),
    auto_mono: bool = typer.Option(
        False, "-a", help="Convert effectively mono stereo samples to mono."
    ),
    auto_mono_threshold: float | None = typer.Option(
        None,
        "-A",
        metavar="DB",
        help="Auto-mono threshold as negative peak dB (implies -a). Default: -95.5.",
    ),
    pre_normalize: bool = typer.Option(
        False, "-p", help="Pre-normalize samples before down-converting bitdepth."
    ),
    no_spectrograms: bool = typer.Option(
        False,
        "-S",
        help="Do not render before/after spectrogram images into the backup directory.",
    ),
    backup_dir: Path | None = typer.Option(
        None,
        "-d",
        metavar="BACKUP_DIR",
        help="Directory for backed up originals. Default: _backup.",
    ),
    list_mode: bool = typer.Option(
        False,
        "-l",
        help="List: dry run that reports every file and how it meets the targets.",
    ),
    dry_run: bool = typer.Option(
        False, "-n", help="Dry run: report the files and commands that would change."
    ),
    log_file: Path | None = typer.Option(
        None, "-o", metavar="FILE", help="Append log lines to FILE."
    ),
    verbose: int = typer.Option(
        0, "-v", count=True, help="Increase verbosity (stacks)."
    ),
    jobs: int | None = typer.Option(
        None, "-j", metavar="N", help="Number of samples processed in parallel."
    ),
    timeout: float | None = typer.Option(
        None,
        "-t",
        metavar="SECONDS",
        help="Timeout for each sox invocation. Default: 300.",
    ),
    config_file: Path | None = typer.Option(
        None,
        "--config",
        metavar="FILE",
        help="JSON or YAML file with default settings.",
    ),
) -> None:
    """Conditionally batch-convert audio samples into minimal .wav files.

    Samples that do not already meet the targets are converted in place and
    the originals are backed up to a parallel directory structure.
    """

    paths = list(paths or [])
    _reject_late_options(paths)
    if not paths:
        raise click.UsageError("At least one FILE or DIRECTORY is required.")

    values: dict[str, Any] = {}
    ignored_channels: str | None = None
    try:
        if source_extension is not None:
            values["source_extension"] = source_extension
        if target_bit_depth is not None:
            values["target_bit_depth"] = _cli_bit_depth("-b", target_bit_depth)
        if minimum_bit_depth is not None:
            values["minimum_bit_depth"] = _cli_bit_depth("-B", minimum_bit_depth)
        if target_sample_rate is not None:
            values["target_sample_rate"] = target_sample_rate
        if minimum_sample_rate is not None:
            values["minimum_sample_rate"] = minimum_sample_rate
        if target_channels is not None:
            channels = _cli_channels(target_channels)
            if channels is None:
                ignored_channels = target_channels
            else:
                values["target_channels"] = channels
        if auto_mono or auto_mono_threshold is not None:
            values["auto_mono"] = True
        if auto_mono_threshold is not None:
            values["auto_mono_threshold_db"] = auto_mono_threshold
        if pre_normalize:
            values["pre_normalize"] = True
        if no_spectrograms:
            values["generate_spectrograms"] = False
        if backup_dir is not None:
            values["backup_dir"] = backup_dir
        if list_mode:
            values["mode"] = RunMode.LIST
        elif dry_run:
            values["mode"] = RunMode.DRY_RUN
        if log_file is not None:
            values["log_file"] = log_file
        if verbose:
            values["verbosity"] = verbose
        if jobs is not None:
            values["jobs"] = jobs
        if timeout is not None:
            values["tool_timeout_seconds"] = timeout
        config = build_config(config_file, values)
    except ConfigError as exc:
        typer.echo(f"[ERROR]  {exc}", err=True)
        raise typer.Exit(code=1) from exc

    context = build_context(config)
    log_settings(context)
    if ignored_channels is not None:
        context.logger.debug(
            "Ignoring invalid -c value '%s'; channels left unchanged",
            ignored_channels,
        )

    results = []
    for result in run_batch(paths, context):
        results.append(result)
        _echo_result(result)

    summary = summarize(results)
    counts = " ".join(f"{name}={count}" for name, count in summary.items())
    typer.echo(f"Summary: {counts}")


def main(argv: list[str] | None = None) -> int:
    """Run the CLI and return its exit status (usage and config errors exit 1)."""

    try:
        result = app(args=argv, prog_name=PROG_NAME, standalone_mode=False)
    except click.ClickException as exc:
        exc.show()
        return 1
    except click.exceptions.Abort:
        typer.echo("Aborted!", err=True)
        return 1
    return result if isinstance(result, int) else 0


if __name__ == "__main__":
    raise SystemExit(main())
