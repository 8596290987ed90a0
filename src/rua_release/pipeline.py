"""Release pipeline orchestration: reset, build, collect, archive."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from uuid import uuid4

from rua_release.collect.build import BuildResult, run_build
from rua_release.collect.collector import CollectResult, collect_components
from rua_release.collect.components import build_component_specs
from rua_release.config import AppSettings
from rua_release.package.archive import ArchiveResult, create_archive
from rua_release.utils.paths import directory_stats, write_json_atomically
from rua_release.utils.time_utils import now_utc
from rua_release.workspace.reset import reset_workspace

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ReleaseRunOptions:
    """Runtime options for a release run."""

    skip_build: bool = False
    create_archive: bool = True


@dataclass(frozen=True, slots=True)
class ReleaseRunResult:
    """Return object for a completed release run."""

    run_id: str
    staging_dir: Path
    archive_path: Path | None
    collect: CollectResult
    build: BuildResult | None
    archive: ArchiveResult | None
    summary: dict[str, Any]
    summary_path: Path


def run_release_pipeline(
    settings: AppSettings,
    *,
    options: ReleaseRunOptions | None = None,
    logger: logging.Logger | None = None,
) -> ReleaseRunResult:
    """Produce the staging directory and self-extracting archive for one release.

    Every step runs at most once, in order. Any ``PackagingError`` propagates
    to the caller and nothing after the failing step runs.
    """

    effective_logger = logger or LOGGER
    run_options = options or ReleaseRunOptions()

    run_id = f"release-run-{uuid4().hex[:12]}"
    started_ts = now_utc()
    started_mono = time.monotonic()

    work_dir = settings.paths.work_root
    staging_dir = settings.staging_dir()
    archive_path = settings.archive_path()
    specs = build_component_specs(settings.components)

    effective_logger.info(
        "release_run.start run_id=%s release=%s version=%s work_dir=%s components=%s",
        run_id,
        settings.project.name,
        settings.project.version,
        work_dir,
        len(specs),
    )

    reset_workspace(staging_dir, archive_path, logger=effective_logger)

    build_result: BuildResult | None = None
    if run_options.skip_build:
        effective_logger.info("release_run.build_skipped")
    else:
        build_result = run_build(settings.build, work_dir, logger=effective_logger)

    collect_result = collect_components(specs, work_dir, staging_dir, logger=effective_logger)
    staged_files, staged_bytes = directory_stats(staging_dir)

    archive_result: ArchiveResult | None = None
    if run_options.create_archive:
        archive_result = create_archive(
            staging_dir,
            archive_path,
            settings.compression,
            logger=effective_logger,
        )
    else:
        effective_logger.info("release_run.archive_skipped")

    finished_ts = now_utc()
    summary: dict[str, Any] = {
        "run_id": run_id,
        "release": settings.project.name,
        "version": settings.project.version,
        "started_ts": started_ts.isoformat(),
        "finished_ts": finished_ts.isoformat(),
        "duration_sec": round(time.monotonic() - started_mono, 3),
        "work_dir": str(work_dir),
        "build": None
        if build_result is None
        else {
            "command": build_result.command,
            "duration_sec": round(build_result.duration_seconds, 3),
            "artifact_path": build_result.artifact_path,
        },
        "components": collect_result.as_dict(),
        "staged_files": staged_files,
        "staged_bytes": staged_bytes,
        "archive": None
        if archive_result is None
        else {
            "path": archive_result.archive_path,
            "command": archive_result.command,
            "duration_sec": round(archive_result.duration_seconds, 3),
            "size_bytes": archive_result.size_bytes,
            "sha256": archive_result.sha256,
        },
    }
    summary_path = write_json_atomically(summary, settings.paths.reports_root / f"{run_id}.json")

    effective_logger.info(
        "release_run.complete run_id=%s collected=%s skipped=%s archive=%s summary=%s",
        run_id,
        len(collect_result.collected),
        len(collect_result.skipped),
        archive_result.archive_path if archive_result else None,
        summary_path,
    )

    return ReleaseRunResult(
        run_id=run_id,
        staging_dir=staging_dir,
        archive_path=archive_result.archive_path if archive_result else None,
        collect=collect_result,
        build=build_result,
        archive=archive_result,
        summary=summary,
        summary_path=summary_path,
    )
