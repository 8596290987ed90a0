"""Copy the component table into the staging directory."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from rua_release.collect.components import ComponentSpec
from rua_release.errors import ComponentCopyError, MissingComponentError
from rua_release.utils.paths import copy_into, with_platform_suffix

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CollectedComponent:
    """A component copied into staging."""

    name: str
    source: Path
    destination: Path
    used_fallback: bool


@dataclass(slots=True)
class CollectResult:
    """Collected and skipped components, in table order."""

    staging_dir: Path
    collected: list[CollectedComponent] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    def as_dict(self) -> dict[str, object]:
        return {
            "staging_dir": str(self.staging_dir),
            "collected": [
                {
                    "name": item.name,
                    "source": str(item.source),
                    "destination": str(item.destination),
                    "used_fallback": item.used_fallback,
                }
                for item in self.collected
            ],
            "skipped": list(self.skipped),
        }


def _candidate_paths(spec: ComponentSpec, work_dir: Path) -> list[Path]:
    candidates: list[Path] = []
    for relative in (spec.source, *spec.fallbacks):
        path = relative if relative.is_absolute() else work_dir / relative
        candidates.append(path)
        if spec.executable:
            suffixed = with_platform_suffix(path)
            if suffixed != path:
                candidates.append(suffixed)
    return candidates


def resolve_component(spec: ComponentSpec, work_dir: Path) -> tuple[Path | None, list[Path]]:
    """Return the first existing candidate for ``spec`` and every path searched."""

    candidates = _candidate_paths(spec, work_dir)
    for candidate in candidates:
        if candidate.exists():
            return candidate, candidates
    return None, candidates


def collect_components(
    specs: Iterable[ComponentSpec],
    work_dir: Path,
    staging_dir: Path,
    *,
    logger: logging.Logger | None = None,
) -> CollectResult:
    """Copy each table entry into ``staging_dir`` in order.

    Essential entries are resolved before anything is copied, so a missing
    required component leaves staging exactly as the reset step left it.
    Missing optional entries are logged and skipped.
    """

    effective_logger = logger or LOGGER
    table = list(specs)

    resolved: dict[str, Path | None] = {}
    for spec in table:
        source, searched = resolve_component(spec, work_dir)
        if source is None and spec.essential:
            effective_logger.error("collect.required_missing name=%s searched=%s", spec.name, searched)
            raise MissingComponentError(spec.name, searched)
        resolved[spec.name] = source

    result = CollectResult(staging_dir=staging_dir)
    for index, spec in enumerate(table, start=1):
        source = resolved[spec.name]
        if source is None:
            effective_logger.warning(
                "collect.component_missing name=%s source=%s step=%s/%s",
                spec.name,
                work_dir / spec.source,
                index,
                len(table),
            )
            result.skipped.append(spec.name)
            continue

        used_fallback = not _is_primary(spec, source, work_dir)
        if used_fallback:
            effective_logger.info("collect.fallback_used name=%s source=%s", spec.name, source)
        try:
            destination = copy_into(source, staging_dir, name=staging_name(spec, source))
        except OSError as exc:
            effective_logger.error("collect.copy_failed name=%s source=%s error=%s", spec.name, source, exc)
            raise ComponentCopyError(spec.name, source, str(exc)) from exc
        effective_logger.info(
            "collect.copied name=%s source=%s destination=%s step=%s/%s",
            spec.name,
            source,
            destination,
            index,
            len(table),
        )
        result.collected.append(
            CollectedComponent(
                name=spec.name,
                source=source,
                destination=destination,
                used_fallback=used_fallback,
            )
        )

    effective_logger.info(
        "collect.done collected=%s skipped=%s",
        len(result.collected),
        result.skipped,
    )
    return result


def _is_primary(spec: ComponentSpec, source: Path, work_dir: Path) -> bool:
    primary = spec.source if spec.source.is_absolute() else work_dir / spec.source
    return source in (primary, with_platform_suffix(primary))


def staging_name(spec: ComponentSpec, source: Path) -> str:
    """Name of the staged entry: the primary source basename, keeping a resolved ``.exe`` suffix."""

    name = spec.source.name
    if spec.executable and source.suffix.lower() == ".exe" and not name.lower().endswith(".exe"):
        return name + ".exe"
    return name
