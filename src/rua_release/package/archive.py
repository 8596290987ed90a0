"""Compress the staging directory into a self-extracting 7-Zip archive."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path

from rua_release.config import CompressionConfig
from rua_release.errors import CompressionFailedError, CompressorNotFoundError
from rua_release.utils.paths import file_sha256

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ArchiveResult:
    """Produced archive and the command that made it."""

    archive_path: Path
    command: list[str]
    returncode: int
    duration_seconds: float
    size_bytes: int
    sha256: str


def locate_compressor(config: CompressionConfig) -> Path:
    """Find the compressor on PATH, then in the configured install directories."""

    found = shutil.which(config.executable)
    if found is None and config.extra_search_dirs:
        search_path = os.pathsep.join(str(directory) for directory in config.extra_search_dirs)
        found = shutil.which(config.executable, path=search_path)
    if found is None:
        raise CompressorNotFoundError(config.executable)
    return Path(found)


def build_compress_command(executable: Path, archive_path: Path, config: CompressionConfig) -> list[str]:
    """Argument vector adding everything in the current directory to ``archive_path``."""

    command = [str(executable), "a", f"-t{config.archive_type}"]
    if config.self_extracting:
        command.append(f"-sfx{config.sfx_module}" if config.sfx_module else "-sfx")
    command.extend(
        [
            f"-m0={config.method}",
            f"-mx={config.level}",
            f"-md={config.dictionary_size}",
            f"-mfb={config.word_size}",
            f"-ms={config.solid_block_size}",
            f"-mmt={config.threads}",
            str(archive_path),
            "*",
        ]
    )
    return command


def create_archive(
    staging_dir: Path,
    archive_path: Path,
    config: CompressionConfig,
    *,
    logger: logging.Logger | None = None,
) -> ArchiveResult:
    """Run the compressor once against the staging directory contents."""

    effective_logger = logger or LOGGER
    executable = locate_compressor(config)
    archive_path = archive_path.resolve()
    try:
        archive_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise CompressionFailedError(
            archive_path, None, f"Cannot create archive directory {archive_path.parent}: {exc}"
        ) from exc
    command = build_compress_command(executable, archive_path, config)
    effective_logger.info("archive.start staging_dir=%s command=%s", staging_dir, command)

    started = time.monotonic()
    try:
        completed = subprocess.run(command, cwd=staging_dir, check=False)
    except OSError as exc:
        effective_logger.error("archive.spawn_failed command=%s error=%s", command, exc)
        raise CompressionFailedError(
            archive_path, None, f"Compressor {executable} could not be started: {exc}"
        ) from exc
    duration = time.monotonic() - started

    if completed.returncode != 0:
        effective_logger.error(
            "archive.failed returncode=%s archive=%s exists=%s",
            completed.returncode,
            archive_path,
            archive_path.exists(),
        )
        raise CompressionFailedError(archive_path, completed.returncode)
    if not archive_path.exists():
        effective_logger.error("archive.missing_output archive=%s", archive_path)
        raise CompressionFailedError(
            archive_path,
            completed.returncode,
            f"Compressor exited cleanly but produced no archive at {archive_path}",
        )

    size_bytes = archive_path.stat().st_size
    digest = file_sha256(archive_path)
    effective_logger.info(
        "archive.done archive=%s size_bytes=%s sha256=%s duration_s=%.2f",
        archive_path,
        size_bytes,
        digest,
        duration,
    )
    return ArchiveResult(
        archive_path=archive_path,
        command=command,
        returncode=completed.returncode,
        duration_seconds=duration,
        size_bytes=size_bytes,
        sha256=digest,
    )
