"""CLI-facing handlers that delegate to application services."""

from __future__ import annotations

from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterable, Iterator

from sample_shrinker.application.context import RunContext
from sample_shrinker.application.shrink_service import ShrinkSample
from sample_shrinker.domain.models import ProcessingOutcome, SampleResult
from sample_shrinker.infrastructure.logging_event_publisher import LoggingEventPublisher
from sample_shrinker.infrastructure.sox_tool import SoxTool
from sample_shrinker.selection import select_sample_files
from sample_shrinker.utils.config import TargetConfig
from sample_shrinker.utils.log import configure_logging


def build_context(config: TargetConfig) -> RunContext:
    """Create the run context: configured logger plus logging event publisher."""

    logger = configure_logging(config.verbosity, config.log_file)
    return RunContext(
        config=config, logger=logger, event_publisher=LoggingEventPublisher()
    )


def build_service(context: RunContext) -> ShrinkSample:
    tool = SoxTool(timeout_seconds=context.config.tool_timeout_seconds)
    return ShrinkSample(context=context, tool=tool)


def log_settings(context: RunContext) -> None:
    log = context.logger
    log.debug("-" * 70)
    log.debug("                  Settings after parsing CLI options:")
    log.debug("-" * 70)
    for name, value in context.config.model_dump().items():
        log.debug("%-24s %s", f"{name}:", value)
    log.debug("-" * 70)


def run_batch(
    inputs: Iterable[Path],
    context: RunContext,
    service: ShrinkSample | None = None,
) -> Iterator[SampleResult]:
    """Process every selected sample, yielding results in input order."""

    config = context.config
    shrink = service or build_service(context)
    files = list(
        select_sample_files(
            inputs, config.source_extension, exclude=config.backup_dir
        )
    )
    context.logger.debug("INPUTS: %d", len(files))

    def _process(path: Path) -> SampleResult:
        try:
            return shrink.process(path)
        except Exception as error:  # noqa: BLE001
            context.logger.exception("[convert] FAILED (unexpected): '%s'", path)
            return SampleResult(path, ProcessingOutcome.FAILED, error=str(error))

    with ThreadPoolExecutor(max_workers=max(1, config.jobs)) as executor:
        yield from executor.map(_process, files)


def summarize(results: Iterable[SampleResult]) -> dict[str, int]:
    """Count results by outcome, plus a ``total``."""

    counts = Counter(result.outcome.value for result in results)
    summary = {"total": sum(counts.values())}
    summary.update(
        {outcome.value: counts.get(outcome.value, 0) for outcome in ProcessingOutcome}
    )
    return summary
