"""Path and filesystem helper functions."""

from __future__ import annotations

import hashlib
import json
import os
import shutil
import sys
from pathlib import Path
from typing import Any
from uuid import uuid4

_HASH_CHUNK_BYTES = 1024 * 1024


def remove_path(path: Path) -> bool:
    """Delete a file or directory tree. Returns False when nothing was there."""

    if path.is_symlink() or path.is_file():
        path.unlink()
        return True
    if path.is_dir():
        shutil.rmtree(path)
        return True
    return False


def copy_into(source: Path, destination_dir: Path, name: str | None = None) -> Path:
    """Copy a file or directory tree into ``destination_dir`` as ``name`` (default: its own name)."""

    target = destination_dir / (name or source.name)
    if source.is_dir():
        shutil.copytree(source, target, symlinks=True)
    else:
        shutil.copy2(source, target)
    return target


def with_platform_suffix(path: Path, platform: str | None = None) -> Path:
    """Return the platform-equivalent executable path (``.exe`` on Windows)."""

    effective_platform = platform or sys.platform
    if effective_platform.startswith("win") and path.suffix.lower() != ".exe":
        return path.with_name(path.name + ".exe")
    return path


def directory_stats(root: Path) -> tuple[int, int]:
    """Return (file_count, total_bytes) for every regular file under root."""

    file_count = 0
    total_bytes = 0
    for file_path in root.rglob("*"):
        if file_path.is_file() and not file_path.is_symlink():
            file_count += 1
            total_bytes += file_path.stat().st_size
    return file_count, total_bytes


def file_sha256(path: Path) -> str:
    """Hex SHA-256 digest of a file, read in chunks."""

    digest = hashlib.sha256()
    with path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(_HASH_CHUNK_BYTES), b""):
            digest.update(chunk)
    return digest.hexdigest()


def _atomic_temp_path(target_path: Path) -> Path:
    return target_path.parent / f".{target_path.name}.{uuid4().hex}.tmp"


def write_json_atomically(payload: dict[str, Any], output_path: Path) -> Path:
    """Write JSON payload atomically to output path."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = _atomic_temp_path(output_path)
    try:
        temp_path.write_text(json.dumps(payload, indent=2, sort_keys=True, default=str) + "\n", encoding="utf-8")
        os.replace(temp_path, output_path)
    finally:
        if temp_path.exists():
            temp_path.unlink()
    return output_path
