"""Application service orchestrating the per-sample shrink use-case.

For each sample the service inspects, classifies, plans and then lists,
skips, dry-runs or applies the plan. Applying always converts into a
temporary sibling of the destination and only touches the original once the
converter has succeeded:

* source and destination differ: rename the converted file onto the
  destination, then move the original into the backup tree;
* source and destination collide (case-insensitively): copy the original into
  the backup tree first, then atomically replace the destination.
"""

from __future__ import annotations

import os
import re
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from sample_shrinker.application.context import RunContext
from sample_shrinker.application.conversion_tool import ConversionTool
from sample_shrinker.auto_mono import properties_are_effectively_mono
from sample_shrinker.decision import plan_conversion
from sample_shrinker.domain.errors import (
    ConversionFailure,
    FilesystemError,
    InspectionError,
    SampleShrinkerError,
    UnsupportedEncodingError,
)
from sample_shrinker.domain.events import (
    ConversionPlanned,
    SampleConverted,
    SampleFailed,
    SampleInspected,
    SampleSkipped,
)
from sample_shrinker.domain.models import (
    BackupRecord,
    ConversionPlan,
    ProcessingOutcome,
    SampleProperties,
    SampleResult,
)
from sample_shrinker.formatting import format_stereo_diff, format_summary
from sample_shrinker.infrastructure.sox_tool import format_command
from sample_shrinker.infrastructure.temp_files import temporary_sibling_path
from sample_shrinker.inspection import inspect_sample
from sample_shrinker.utils.config import RunMode
from sample_shrinker.utils.log import NOTICE

_RULE = "-" * 71

# Backups of samples outside the working directory live under this component.
OUTSIDE_CWD_DIR = "__abs__"
_RESERVED_COMPONENT = re.compile(rf"^_*{re.escape(OUTSIDE_CWD_DIR)}$")


def backup_location(backup_root: Path, source: Path) -> Path:
    """Return the directory under ``backup_root`` that mirrors ``source``'s directory.

    The parent directory is normalized first, so ``a/../b`` and ``b`` share a
    backup directory while distinct directories never do. Directories inside
    the working directory are mirrored relative to it. Anything else is
    mirrored by its absolute path under :data:`OUTSIDE_CWD_DIR`; a first
    component inside the working directory that could clash with that name
    gains a leading underscore.
    """

    cwd = Path.cwd()
    parent = Path(os.path.normpath(cwd / source.parent))
    try:
        parts = parent.relative_to(cwd).parts
    except ValueError:
        drive = parent.drive.replace(":", "").strip("\\/")
        prefix = [OUTSIDE_CWD_DIR, drive] if drive else [OUTSIDE_CWD_DIR]
        return backup_root.joinpath(*prefix, *parent.relative_to(parent.anchor).parts)

    if parts and _RESERVED_COMPONENT.match(parts[0]):
        parts = (f"_{parts[0]}", *parts[1:])
    return backup_root.joinpath(*parts)


def spectrogram_paths(
    plan: ConversionPlan, backup: BackupRecord
) -> tuple[Path, Path]:
    """Return the ``(before, after)`` spectrogram image paths for an applied plan."""

    image_dir = backup.backup_path.parent
    stem = plan.source_path.stem
    return image_dir / f"{stem}.old.png", image_dir / f"{stem}.new.png"


@dataclass(slots=True)
class ShrinkSample:
    """Use case that brings one sample in line with the run's targets."""

    context: RunContext
    tool: ConversionTool
    inspector: Callable[[Path], SampleProperties] = inspect_sample

    def process(self, path: Path) -> SampleResult:
        config = self.context.config
        log = self.context.logger
        log.log(NOTICE, "")
        log.log(NOTICE, " %s", path)
        log.log(NOTICE, _RULE)

        try:
            props = self.inspector(path)
        except InspectionError as exc:
            return self._failed(path, "inspection", exc)
        self._publish(
            SampleInspected,
            path,
            channels=props.channels,
            bit_depth=props.bit_depth,
            sample_rate=props.sample_rate,
            encoding=props.encoding.value,
        )

        effectively_mono = config.auto_mono and properties_are_effectively_mono(
            props, config.auto_mono_threshold_db
        )
        if props.stereo_peak_diff_db is not None:
            log.debug(
                "[auto-mono] %s dB diff (threshold: %s dB)",
                format_stereo_diff(props.stereo_peak_diff_db),
                config.auto_mono_threshold_db,
            )
        if effectively_mono:
            log.log(
                NOTICE,
                "Stereo sample is effectively mono: (%s dB): '%s'",
                format_stereo_diff(props.stereo_peak_diff_db),
                path,
            )

        try:
            plan = plan_conversion(props, config, effectively_mono)
        except UnsupportedEncodingError as exc:
            return self._failed(path, "planning", exc)
        self._publish(
            ConversionPlanned,
            path,
            changes=[change.property.value for change in plan.changes],
            extension_change_only=plan.extension_change_only,
        )
        self._log_plan(props, plan)

        summary = format_summary(
            plan,
            props,
            config.mode,
            show_sample_rate=config.sample_rate_configured,
        )
        if config.mode is RunMode.LIST:
            return SampleResult(path, ProcessingOutcome.LISTED, summary=summary)

        if not plan.requires_conversion:
            log.log(NOTICE, "[convert] SKIP (nothing to change):  %s", path)
            self._publish(SampleSkipped, path)
            return SampleResult(path, ProcessingOutcome.SKIPPED)

        command = tuple(self.tool.conversion_command(plan, plan.destination_path))
        if config.mode is RunMode.DRY_RUN:
            log.log(NOTICE, "[convert] DRY RUN: %s", format_command(command))
            return SampleResult(
                path, ProcessingOutcome.DRY_RUN, summary=summary, command=command
            )

        log.log(NOTICE, "[convert] %s", format_command(command))
        try:
            backup = self.apply(plan)
        except ConversionFailure as exc:
            return self._failed(path, "conversion", exc)
        except FilesystemError as exc:
            log.error("[backup] INCONSISTENT, needs review: %s", exc)
            self._publish(SampleFailed, path, stage="filesystem", error=str(exc))
            return SampleResult(
                path,
                ProcessingOutcome.INCONSISTENT,
                summary=summary,
                command=command,
                error=str(exc),
            )

        if config.generate_spectrograms:
            self.render_spectrograms(plan, backup)

        self._publish(
            SampleConverted,
            path,
            destination=str(plan.destination_path),
            backup=str(backup.backup_path),
        )
        return SampleResult(
            path,
            ProcessingOutcome.SUCCEEDED,
            summary=summary,
            command=command,
            backup=backup,
        )

    def apply(self, plan: ConversionPlan) -> BackupRecord:
        """Convert ``plan`` and preserve the original under the backup directory."""

        log = self.context.logger
        backup_dir = backup_location(self.context.config.backup_dir, plan.source_path)
        try:
            backup_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise FilesystemError(
                f"Cannot create backup directory '{backup_dir}': {exc}"
            ) from exc
        backup_path = backup_dir / plan.source_path.name
        if backup_path.exists():
            log.warning("[backup] Overwriting existing backup: '%s'", backup_path)

        with temporary_sibling_path(plan.destination_path) as temp_path:
            if plan.paths_collide:
                log.debug("[convert] src == dst")
                try:
                    shutil.copy2(plan.source_path, backup_path)
                except OSError as exc:
                    raise FilesystemError(
                        f"Cannot back up '{plan.source_path}': {exc}"
                    ) from exc
                self.tool.convert(plan, temp_path)
                self._replace(temp_path, plan.destination_path)
            else:
                log.debug("[convert] src != dst")
                self.tool.convert(plan, temp_path)
                self._replace(temp_path, plan.destination_path)
                try:
                    shutil.move(str(plan.source_path), str(backup_path))
                except OSError as exc:
                    raise FilesystemError(
                        f"Converted '{plan.destination_path}' but cannot move "
                        f"original '{plan.source_path}' to backup: {exc}"
                    ) from exc

        log.debug("[backup] b_src_dir = '%s'", backup_dir)
        log.debug("[backup] src = '%s'", plan.source_path)
        log.debug("[backup] dst = '%s'", plan.destination_path)
        return BackupRecord(original_path=plan.source_path, backup_path=backup_path)

    def render_spectrograms(self, plan: ConversionPlan, backup: BackupRecord) -> None:
        log = self.context.logger
        before_image, after_image = spectrogram_paths(plan, backup)
        try:
            self.tool.render_spectrogram(backup.backup_path, before_image)
            self.tool.render_spectrogram(plan.destination_path, after_image)
        except ConversionFailure as exc:
            log.warning(
                "[spectrogram] Cannot render spectrograms for '%s': %s",
                plan.source_path,
                exc,
            )
            return
        log.log(NOTICE, "[spectrogram] before: %s", before_image)
        log.log(NOTICE, "[spectrogram] after:  %s", after_image)

    @staticmethod
    def _replace(temp_path: Path, destination: Path) -> None:
        try:
            os.replace(temp_path, destination)
        except OSError as exc:
            raise FilesystemError(
                f"Cannot replace '{destination}' with converted sample: {exc}"
            ) from exc

    def _log_plan(self, props: SampleProperties, plan: ConversionPlan) -> None:
        config = self.context.config
        log = self.context.logger
        log.debug(
            "[plan] bitdepth: %s  (target: %s)",
            props.bit_depth,
            config.target_bit_depth,
        )
        log.debug(
            "[plan] samplerate: %s  (target: %s)",
            props.sample_rate,
            config.target_sample_rate,
        )
        log.debug(
            "[plan] channels: %s  (target: %s)", props.channels, config.target_channels
        )
        log.debug("[plan] src directives: %s", list(plan.source_directives))
        log.debug("[plan] dst directives: %s", list(plan.destination_directives))
        log.debug("[plan] post directives: %s", list(plan.post_directives))

    def _failed(
        self,
        path: Path,
        stage: str,
        error: SampleShrinkerError,
    ) -> SampleResult:
        self.context.logger.error("[convert] FAILED (%s): %s", stage, error)
        self._publish(SampleFailed, path, stage=stage, error=str(error))
        return SampleResult(path, ProcessingOutcome.FAILED, error=str(error))

    def _publish(self, event_type: type, path: Path, **payload: object) -> None:
        event = event_type(sample_path=str(path), payload_summary=payload)
        self.context.event_publisher.publish(event)
