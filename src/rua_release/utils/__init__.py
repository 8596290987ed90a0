"""Shared utility helpers."""

from rua_release.utils.paths import (
    copy_into,
    directory_stats,
    file_sha256,
    remove_path,
    with_platform_suffix,
    write_json_atomically,
)
from rua_release.utils.time_utils import now_utc

__all__ = [
    "copy_into",
    "directory_stats",
    "file_sha256",
    "remove_path",
    "with_platform_suffix",
    "write_json_atomically",
    "now_utc",
]
