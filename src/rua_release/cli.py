"""Typer CLI entrypoint for rua_release."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
import yaml

from rua_release.collect.collector import resolve_component
from rua_release.collect.components import build_component_specs
from rua_release.config import AppSettings, load_settings
from rua_release.errors import PackagingError
from rua_release.logging_utils import configure_logging
from rua_release.pipeline import ReleaseRunOptions, run_release_pipeline
from rua_release.workspace.reset import reset_workspace

app = typer.Typer(
    add_completion=False,
    help="rua_release command line interface.",
    no_args_is_help=True,
)

CONFIG_FILE_OPTION = typer.Option(
    None,
    "--config-file",
    help="Optional settings YAML path.",
    exists=False,
    file_okay=True,
    dir_okay=False,
    readable=True,
)
WORK_DIR_OPTION = typer.Option(
    None,
    "--work-dir",
    help="Directory holding the build tree and component sources (default: configured work_root).",
    file_okay=False,
    dir_okay=True,
)


def _load_and_optionally_configure_logger(
    config_file: Path | None,
    work_dir: Path | None,
    configure: bool,
) -> tuple[AppSettings, logging.Logger]:
    settings = load_settings(config_file=config_file, work_root=work_dir)
    if configure:
        logger = configure_logging(settings.paths.logs_root / "release.log")
    else:
        logger = logging.getLogger("rua_release")
    return settings, logger


def _fail(logger: logging.Logger, exc: PackagingError) -> typer.Exit:
    logger.error("release.fatal error=%s", exc)
    typer.echo(f"error: {exc}", err=True)
    return typer.Exit(code=1)


@app.command("show-config")
def show_config(
    config_file: Path | None = CONFIG_FILE_OPTION,
    work_dir: Path | None = WORK_DIR_OPTION,
) -> None:
    """Print the effective configuration after env overrides."""

    settings, _ = _load_and_optionally_configure_logger(config_file, work_dir, configure=False)
    rendered = yaml.safe_dump(settings.as_dict(), sort_keys=False)
    typer.echo(rendered)


@app.command("components")
def list_components(
    config_file: Path | None = CONFIG_FILE_OPTION,
    work_dir: Path | None = WORK_DIR_OPTION,
) -> None:
    """Show the component table and whether each source is currently present."""

    settings, logger = _load_and_optionally_configure_logger(config_file, work_dir, configure=False)
    try:
        specs = build_component_specs(settings.components)
    except PackagingError as exc:
        raise _fail(logger, exc) from exc

    for spec in specs:
        source, searched = resolve_component(spec, settings.paths.work_root)
        kind = "required" if spec.essential else "optional"
        status = "present" if source is not None else "missing"
        location = source if source is not None else searched[0]
        typer.echo(f"{spec.name}: {status} ({kind}) {location}")


@app.command("reset")
def reset(
    config_file: Path | None = CONFIG_FILE_OPTION,
    work_dir: Path | None = WORK_DIR_OPTION,
) -> None:
    """Delete the previous staging directory and archive, leaving an empty staging directory."""

    settings, logger = _load_and_optionally_configure_logger(config_file, work_dir, configure=True)
    try:
        result = reset_workspace(settings.staging_dir(), settings.archive_path(), logger=logger)
    except PackagingError as exc:
        raise _fail(logger, exc) from exc
    typer.echo(f"staging_dir: {result.staging_dir}")
    typer.echo(f"archive_removed: {result.removed_archive}")


@app.command("run")
def run(
    skip_build: bool = typer.Option(
        False,
        "--skip-build",
        help="Do not invoke the upstream build; package the existing artifact.",
    ),
    no_archive: bool = typer.Option(
        False,
        "--no-archive",
        help="Stop after collecting components into the staging directory.",
    ),
    config_file: Path | None = CONFIG_FILE_OPTION,
    work_dir: Path | None = WORK_DIR_OPTION,
) -> None:
    """Reset the workspace, build, collect components and create the self-extracting archive."""

    settings, logger = _load_and_optionally_configure_logger(config_file, work_dir, configure=True)
    options = ReleaseRunOptions(skip_build=skip_build, create_archive=not no_archive)
    try:
        result = run_release_pipeline(settings, options=options, logger=logger)
    except PackagingError as exc:
        raise _fail(logger, exc) from exc

    typer.echo(f"run_id: {result.run_id}")
    typer.echo(f"staging_dir: {result.staging_dir}")
    typer.echo(f"components_collected: {', '.join(item.name for item in result.collect.collected)}")
    typer.echo(f"components_skipped: {', '.join(result.collect.skipped) or '-'}")
    if result.archive is not None:
        typer.echo(f"archive_path: {result.archive.archive_path}")
        typer.echo(f"archive_sha256: {result.archive.sha256}")
    typer.echo(f"summary_path: {result.summary_path}")


def main() -> None:
    """CLI script entrypoint."""

    app()


if __name__ == "__main__":
    main()
