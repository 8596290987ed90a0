"""Remove stale release outputs and recreate an empty staging directory."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from rua_release.errors import StagingDirectoryError
from rua_release.utils.paths import remove_path

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ResetResult:
    """Outcome of a workspace reset."""

    staging_dir: Path
    archive_path: Path
    removed_staging: bool
    removed_archive: bool


def reset_workspace(
    staging_dir: Path,
    archive_path: Path,
    *,
    logger: logging.Logger | None = None,
) -> ResetResult:
    """Delete a previous staging tree and archive, then create the empty staging directory."""

    effective_logger = logger or LOGGER

    try:
        removed_staging = remove_path(staging_dir)
    except OSError as exc:
        raise StagingDirectoryError(staging_dir, f"removing previous contents failed: {exc}") from exc
    try:
        removed_archive = remove_path(archive_path)
    except OSError as exc:
        raise StagingDirectoryError(staging_dir, f"removing previous archive {archive_path} failed: {exc}") from exc
    effective_logger.info(
        "reset.cleaned staging_dir=%s removed_staging=%s archive=%s removed_archive=%s",
        staging_dir,
        removed_staging,
        archive_path,
        removed_archive,
    )

    try:
        staging_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise StagingDirectoryError(staging_dir, str(exc)) from exc
    effective_logger.info("reset.staging_ready staging_dir=%s", staging_dir)

    return ResetResult(
        staging_dir=staging_dir,
        archive_path=archive_path,
        removed_staging=removed_staging,
        removed_archive=removed_archive,
    )
