"""Fatal pipeline errors. Each one maps to process exit status 1."""

from __future__ import annotations

from pathlib import Path


class PackagingError(RuntimeError):
    """Base class for conditions that halt the release pipeline."""


class StagingDirectoryError(PackagingError):
    """The staging directory could not be reset or created."""

    def __init__(self, staging_dir: Path, reason: str) -> None:
        super().__init__(f"Cannot prepare staging directory {staging_dir}: {reason}")
        self.staging_dir = staging_dir


class BuildFailedError(PackagingError):
    """The upstream build exited non-zero or could not be started."""

    def __init__(self, command: list[str], returncode: int | None, detail: str | None = None) -> None:
        rendered = " ".join(command)
        if returncode is None:
            message = f"Build command could not be started: {rendered}"
        else:
            message = f"Build command failed with exit status {returncode}: {rendered}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
        self.command = command
        self.returncode = returncode


class MissingComponentError(PackagingError):
    """An essential component was not found at any candidate path."""

    def __init__(self, name: str, candidates: list[Path]) -> None:
        searched = ", ".join(str(path) for path in candidates)
        super().__init__(f"Required component '{name}' not found; searched: {searched}")
        self.name = name
        self.candidates = candidates


class ComponentCopyError(PackagingError):
    """A component was found but could not be copied into staging."""

    def __init__(self, name: str, source: Path, reason: str) -> None:
        super().__init__(f"Copying component '{name}' from {source} failed: {reason}")
        self.name = name
        self.source = source


class ComponentTableError(PackagingError):
    """The configured component table violates its invariants."""


class CompressorNotFoundError(PackagingError):
    """The external compressor is not on the execution path."""

    def __init__(self, executable: str) -> None:
        super().__init__(
            f"Compressor '{executable}' not found on PATH. Install 7-Zip (https://www.7-zip.org/) "
            "and make sure its directory is on PATH, or set compression.executable."
        )
        self.executable = executable


class CompressionFailedError(PackagingError):
    """The compressor failed; any partial archive is left in place."""

    def __init__(self, archive_path: Path, returncode: int | None, detail: str | None = None) -> None:
        message = detail or f"Compressor exited with status {returncode}; partial output kept at {archive_path}"
        super().__init__(message)
        self.archive_path = archive_path
        self.returncode = returncode
