"""Self-extracting archive step."""

from rua_release.package.archive import (
    ArchiveResult,
    build_compress_command,
    create_archive,
    locate_compressor,
)

__all__ = [
    "ArchiveResult",
    "build_compress_command",
    "create_archive",
    "locate_compressor",
]
