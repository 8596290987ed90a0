from __future__ import annotations

import sys
from pathlib import Path

import pytest

from rua_release.collect.build import run_build
from rua_release.config import BuildConfig
from rua_release.errors import BuildFailedError


def test_build_runs_in_work_dir_and_locates_artifact(tmp_path: Path) -> None:
    script = (
        "from pathlib import Path; "
        "out = Path('target/release'); out.mkdir(parents=True, exist_ok=True); "
        "(out / 'rua_cli').write_bytes(b'binary')"
    )
    build = BuildConfig(command=[sys.executable, "-c", script])

    result = run_build(build, tmp_path)

    assert result.returncode == 0
    assert result.artifact_path == tmp_path / "target" / "release" / "rua_cli"
    assert result.artifact_path.read_bytes() == b"binary"


def test_build_without_artifact_reports_none(tmp_path: Path) -> None:
    result = run_build(BuildConfig(command=[sys.executable, "-c", "pass"]), tmp_path)

    assert result.artifact_path is None


def test_nonzero_build_status_is_fatal(tmp_path: Path) -> None:
    build = BuildConfig(command=[sys.executable, "-c", "import sys; sys.exit(3)"])

    with pytest.raises(BuildFailedError) as excinfo:
        run_build(build, tmp_path)

    assert excinfo.value.returncode == 3


def test_unstartable_build_is_fatal(tmp_path: Path) -> None:
    build = BuildConfig(command=["rua-release-no-such-build-tool"])

    with pytest.raises(BuildFailedError) as excinfo:
        run_build(build, tmp_path)

    assert excinfo.value.returncode is None
