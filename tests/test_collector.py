from __future__ import annotations

import logging
from pathlib import Path

import pytest

from rua_release.collect.collector import collect_components, resolve_component, staging_name
from rua_release.collect.components import ComponentSpec
from rua_release.errors import ComponentCopyError, MissingComponentError
from rua_release.utils.paths import with_platform_suffix


def _make_tree(root: Path, *names: str) -> None:
    for name in names:
        (root / name / "sub").mkdir(parents=True)
        (root / name / "sub" / f"{name}.txt").write_text(name, encoding="utf-8")


def test_optional_missing_component_is_skipped(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    work = tmp_path / "work"
    staging = tmp_path / "out"
    staging.mkdir()
    _make_tree(work, "tool", "extra1")
    specs = [
        ComponentSpec("tool", Path("tool"), required=True),
        ComponentSpec("extra1", Path("extra1")),
        ComponentSpec("extra2", Path("extra2")),
    ]

    with caplog.at_level(logging.WARNING):
        result = collect_components(specs, work, staging)

    assert sorted(path.name for path in staging.iterdir()) == ["extra1", "tool"]
    assert (staging / "tool" / "sub" / "tool.txt").read_text(encoding="utf-8") == "tool"
    assert [item.name for item in result.collected] == ["tool", "extra1"]
    assert result.skipped == ["extra2"]
    assert "collect.component_missing name=extra2" in caplog.text


def test_missing_required_component_halts_before_any_copy(tmp_path: Path) -> None:
    work = tmp_path / "work"
    staging = tmp_path / "out"
    staging.mkdir()
    _make_tree(work, "extra1")
    specs = [
        ComponentSpec("extra1", Path("extra1")),
        ComponentSpec("tool", Path("tool"), required=True),
    ]

    with pytest.raises(MissingComponentError) as excinfo:
        collect_components(specs, work, staging)

    assert excinfo.value.name == "tool"
    assert list(staging.iterdir()) == []


def test_fallback_one_level_above_work_dir(tmp_path: Path) -> None:
    work = tmp_path / "checkout"
    staging = tmp_path / "out"
    staging.mkdir()
    _make_tree(work, "tool")
    _make_tree(tmp_path, "platform-tools")
    specs = [
        ComponentSpec("tool", Path("tool"), required=True),
        ComponentSpec("platform-tools", Path("platform-tools"), fallbacks=(Path("../platform-tools"),)),
    ]

    result = collect_components(specs, work, staging)

    assert (staging / "platform-tools" / "sub" / "platform-tools.txt").exists()
    assert result.collected[1].used_fallback is True
    assert result.collected[0].used_fallback is False


def test_fallback_exhaustion_is_fatal(tmp_path: Path) -> None:
    work = tmp_path / "checkout"
    staging = tmp_path / "out"
    staging.mkdir()
    _make_tree(work, "tool")
    specs = [
        ComponentSpec("tool", Path("tool"), required=True),
        ComponentSpec("platform-tools", Path("platform-tools"), fallbacks=(Path("../platform-tools"),)),
    ]

    with pytest.raises(MissingComponentError) as excinfo:
        collect_components(specs, work, staging)

    assert excinfo.value.name == "platform-tools"
    assert work / "../platform-tools" in excinfo.value.candidates
    assert list(staging.iterdir()) == []


def test_single_file_component_copied_under_its_name(tmp_path: Path) -> None:
    work = tmp_path / "work"
    (work / "target" / "release").mkdir(parents=True)
    (work / "target" / "release" / "rua_cli").write_bytes(b"bin")
    staging = tmp_path / "out"
    staging.mkdir()

    collect_components(
        [ComponentSpec("rua_cli", Path("target/release/rua_cli"), required=True, executable=True)],
        work,
        staging,
    )

    assert (staging / "rua_cli").read_bytes() == b"bin"


@pytest.mark.parametrize(
    ("platform", "expected"),
    [("win32", "rua_cli.exe"), ("linux", "rua_cli"), ("darwin", "rua_cli")],
)
def test_platform_suffix(platform: str, expected: str) -> None:
    assert with_platform_suffix(Path("target/release/rua_cli"), platform).name == expected
    assert with_platform_suffix(Path("rua_cli.exe"), "win32").name == "rua_cli.exe"


def test_resolve_reports_every_candidate_searched(tmp_path: Path) -> None:
    spec = ComponentSpec("platform-tools", Path("platform-tools"), fallbacks=(Path("../platform-tools"),))

    source, searched = resolve_component(spec, tmp_path)

    assert source is None
    assert searched == [tmp_path / "platform-tools", tmp_path / "../platform-tools"]


def test_fallback_is_staged_under_primary_name(tmp_path: Path) -> None:
    work = tmp_path / "checkout"
    staging = tmp_path / "out"
    staging.mkdir()
    _make_tree(work, "tool")
    _make_tree(tmp_path / "sdk", "pt")
    specs = [
        ComponentSpec("tool", Path("tool"), required=True),
        ComponentSpec("platform-tools", Path("platform-tools"), fallbacks=(Path("../sdk/pt"),)),
    ]

    result = collect_components(specs, work, staging)

    assert sorted(path.name for path in staging.iterdir()) == ["platform-tools", "tool"]
    assert (staging / "platform-tools" / "sub" / "pt.txt").exists()
    assert result.collected[1].destination == staging / "platform-tools"


def test_staging_name_keeps_resolved_exe_suffix() -> None:
    spec = ComponentSpec("rua_cli", Path("target/release/rua_cli"), required=True, executable=True)

    assert staging_name(spec, Path("/build/target/release/rua_cli.exe")) == "rua_cli.exe"
    assert staging_name(spec, Path("/build/target/release/rua_cli")) == "rua_cli"
    assert staging_name(ComponentSpec("tools", Path("tools")), Path("/sdk/other")) == "tools"


def test_copy_failure_is_fatal(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    work = tmp_path / "work"
    staging = tmp_path / "out"
    staging.mkdir()
    _make_tree(work, "tool")

    def refuse_copy(source: Path, destination_dir: Path, name: str | None = None) -> Path:
        raise PermissionError(13, "Permission denied", str(destination_dir))

    monkeypatch.setattr("rua_release.collect.collector.copy_into", refuse_copy)

    with pytest.raises(ComponentCopyError) as excinfo:
        collect_components([ComponentSpec("tool", Path("tool"), required=True)], work, staging)

    assert excinfo.value.name == "tool"
