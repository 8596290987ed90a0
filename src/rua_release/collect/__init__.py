"""Upstream build and component collection."""

from rua_release.collect.build import BuildResult, run_build
from rua_release.collect.collector import (
    CollectedComponent,
    CollectResult,
    collect_components,
    resolve_component,
)
from rua_release.collect.components import ComponentSpec, build_component_specs, validate_component_table

__all__ = [
    "BuildResult",
    "run_build",
    "CollectedComponent",
    "CollectResult",
    "collect_components",
    "resolve_component",
    "ComponentSpec",
    "build_component_specs",
    "validate_component_table",
]
