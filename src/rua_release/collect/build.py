"""Upstream build invocation."""

from __future__ import annotations

import logging
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path

from rua_release.config import BuildConfig
from rua_release.errors import BuildFailedError
from rua_release.utils.paths import with_platform_suffix

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BuildResult:
    """Outcome of a successful build. ``artifact_path`` is None when the build produced nothing there."""

    command: list[str]
    returncode: int
    duration_seconds: float
    artifact_path: Path | None


def _locate_artifact(artifact: Path, work_dir: Path) -> Path | None:
    candidate = artifact if artifact.is_absolute() else work_dir / artifact
    for path in (candidate, with_platform_suffix(candidate)):
        if path.exists():
            return path
    return None


def run_build(
    build: BuildConfig,
    work_dir: Path,
    *,
    logger: logging.Logger | None = None,
) -> BuildResult:
    """Run the release build in ``work_dir`` and block until it finishes."""

    effective_logger = logger or LOGGER
    command = list(build.command)
    effective_logger.info("build.start cwd=%s command=%s", work_dir, command)

    started = time.monotonic()
    try:
        completed = subprocess.run(command, cwd=work_dir, check=False)
    except OSError as exc:
        effective_logger.error("build.spawn_failed command=%s error=%s", command, exc)
        raise BuildFailedError(command, None, str(exc)) from exc
    duration = time.monotonic() - started

    if completed.returncode != 0:
        effective_logger.error("build.failed returncode=%s duration_s=%.2f", completed.returncode, duration)
        raise BuildFailedError(command, completed.returncode)

    artifact_path = _locate_artifact(build.artifact, work_dir)
    if artifact_path is None:
        effective_logger.warning("build.artifact_missing expected=%s", work_dir / build.artifact)
    effective_logger.info("build.done duration_s=%.2f artifact=%s", duration, artifact_path)
    return BuildResult(
        command=command,
        returncode=completed.returncode,
        duration_seconds=duration,
        artifact_path=artifact_path,
    )
