"""Static component table records."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from rua_release.config import ComponentConfig
from rua_release.errors import ComponentTableError


@dataclass(frozen=True, slots=True)
class ComponentSpec:
    """One bundled component and where to find it, relative to the working directory."""

    name: str
    source: Path
    required: bool = False
    executable: bool = False
    fallbacks: tuple[Path, ...] = ()

    @property
    def essential(self) -> bool:
        """Whether absence after every candidate is fatal.

        Entries with fallbacks are treated as essential even when not flagged
        ``required``.
        """

        return self.required or bool(self.fallbacks)


def validate_component_table(specs: Iterable[ComponentSpec]) -> list[ComponentSpec]:
    """Check the table holds unique names and exactly one required entry."""

    table = list(specs)
    if not table:
        raise ComponentTableError("Component table is empty.")

    seen: set[str] = set()
    destinations: set[str] = set()
    for spec in table:
        if spec.name in seen:
            raise ComponentTableError(f"Duplicate component name '{spec.name}'.")
        # staging entries are named after the source basename
        if spec.source.name in destinations:
            raise ComponentTableError(f"Component '{spec.name}' would overwrite staged entry '{spec.source.name}'.")
        seen.add(spec.name)
        destinations.add(spec.source.name)

    required = [spec.name for spec in table if spec.required]
    if len(required) != 1:
        raise ComponentTableError(
            f"Component table must mark exactly one entry as required, found {len(required)}: {required}"
        )
    return table


def build_component_specs(entries: Iterable[ComponentConfig]) -> list[ComponentSpec]:
    """Convert configured table rows into validated specs, preserving order."""

    specs = [
        ComponentSpec(
            name=entry.name,
            source=entry.source,
            required=entry.required,
            executable=entry.executable,
            fallbacks=tuple(entry.fallbacks),
        )
        for entry in entries
    ]
    return validate_component_table(specs)
