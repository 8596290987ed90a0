"""Configuration models and loading logic."""

from __future__ import annotations

import os
from pathlib import Path
from typing import ClassVar, Literal

from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

DEFAULT_SETTINGS_FILE = Path("configs/settings.yaml")
SETTINGS_FILE_ENV = "RUA_RELEASE_SETTINGS_FILE"


class ProjectConfig(BaseModel):
    """Release identity used to name the staging directory and archive."""

    name: str = "RuaFlashTool"
    version: str = "1.0.0-rc2"
    archive_name_template: str = "{name}_v{version}.exe"

    def archive_name(self) -> str:
        """Render the archive file name from the template."""

        return self.archive_name_template.format(name=self.name, version=self.version)


class PathsConfig(BaseModel):
    """Filesystem roots used by each pipeline step."""

    work_root: Path = Path(".")
    output_root: Path = Path("./release")
    reports_root: Path = Path("./release/reports")
    logs_root: Path = Path("./logs")

    def resolved(self, project_root: Path) -> "PathsConfig":
        """Return a copy with project-relative paths resolved to absolute paths."""

        updates: dict[str, Path] = {}
        for field_name in type(self).model_fields:
            value = getattr(self, field_name)
            updates[field_name] = value if value.is_absolute() else (project_root / value).resolve()
        return self.model_copy(update=updates)


class BuildConfig(BaseModel):
    """Upstream build invocation."""

    command: list[str] = Field(default_factory=lambda: ["cargo", "build", "--release"], min_length=1)
    artifact: Path = Path("target/release/rua_cli")


class CompressionConfig(BaseModel):
    """7-Zip invocation policy for the self-extracting archive."""

    executable: str = "7z"
    extra_search_dirs: list[Path] = Field(
        default_factory=lambda: [Path("C:/Program Files/7-Zip"), Path("C:/Program Files (x86)/7-Zip")]
    )
    archive_type: Literal["7z"] = "7z"
    self_extracting: bool = True
    sfx_module: str | None = None
    method: Literal["lzma2", "lzma", "ppmd", "bzip2", "deflate"] = "lzma2"
    level: int = Field(default=9, ge=0, le=9)
    dictionary_size: str = "128m"
    word_size: int = Field(default=64, ge=1)
    solid_block_size: str = "16g"
    threads: int = Field(default=16, ge=1)


class ComponentConfig(BaseModel):
    """One row of the ordered component table."""

    name: str
    source: Path
    required: bool = False
    executable: bool = False
    fallbacks: list[Path] = Field(default_factory=list)


def default_components() -> list[ComponentConfig]:
    """Return the release layout: the CLI binary first, then bundled directories."""

    return [
        ComponentConfig(name="rua_cli", source=Path("target/release/rua_cli"), required=True, executable=True),
        ComponentConfig(
            name="platform-tools",
            source=Path("platform-tools"),
            fallbacks=[Path("../platform-tools")],
        ),
        ComponentConfig(name="scrcpy", source=Path("scrcpy")),
        ComponentConfig(name="drivers", source=Path("drivers")),
        ComponentConfig(name="Magisk", source=Path("Magisk")),
        ComponentConfig(name="avbkey", source=Path("avbkey")),
        ComponentConfig(name="KSUINIT", source=Path("KSUINIT")),
        ComponentConfig(name="LKM", source=Path("LKM")),
    ]


class AppSettings(BaseSettings):
    """Top-level application settings."""

    _yaml_file_override: ClassVar[Path | None] = None

    project: ProjectConfig = Field(default_factory=ProjectConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)
    build: BuildConfig = Field(default_factory=BuildConfig)
    compression: CompressionConfig = Field(default_factory=CompressionConfig)
    components: list[ComponentConfig] = Field(default_factory=default_components, min_length=1)

    model_config = SettingsConfigDict(
        env_prefix="RUA_RELEASE_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Use YAML defaults while allowing env vars to override values."""

        yaml_file = resolve_settings_file(cls._yaml_file_override)
        yaml_settings = YamlConfigSettingsSource(settings_cls, yaml_file=yaml_file)
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            yaml_settings,
            file_secret_settings,
        )

    def staging_dir(self) -> Path:
        """Staging directory for this release, under the output root."""

        return self.paths.output_root / self.project.name

    def archive_path(self) -> Path:
        """Self-extracting archive path, under the output root."""

        return self.paths.output_root / self.project.archive_name()

    def as_dict(self) -> dict[str, object]:
        """Return settings as a standard nested dictionary."""

        return self.model_dump(mode="json")


def find_project_root(start: Path | None = None) -> Path:
    """Locate the project root by traversing upward for config markers."""

    current = (start or Path.cwd()).resolve()
    for candidate in (current, *current.parents):
        if (candidate / "configs/settings.yaml").exists():
            return candidate
    return current


def resolve_settings_file(override: Path | None = None) -> Path:
    """Resolve settings file from explicit override, env var, or default."""

    chosen = override
    if chosen is None:
        env_value = os.getenv(SETTINGS_FILE_ENV)
        if env_value:
            chosen = Path(env_value)
    if chosen is None:
        chosen = DEFAULT_SETTINGS_FILE

    if not chosen.is_absolute():
        chosen = (find_project_root() / chosen).resolve()
    return chosen


def load_settings(config_file: Path | None = None, work_root: Path | None = None) -> AppSettings:
    """Load settings with YAML defaults and environment variable overrides.

    ``work_root`` replaces the configured working directory; component sources
    and the build command resolve against it. A relative working directory is
    taken from the process cwd, every other relative path from the project root.
    """

    settings_file = resolve_settings_file(config_file)
    project_root = settings_file.parent.parent.resolve()
    AppSettings._yaml_file_override = settings_file
    try:
        settings = AppSettings()
    finally:
        AppSettings._yaml_file_override = None
    chosen_work_root = work_root if work_root is not None else settings.paths.work_root
    paths = settings.paths.model_copy(update={"work_root": (Path.cwd() / chosen_work_root).resolve()})
    resolved_paths = paths.resolved(project_root=project_root)
    return settings.model_copy(update={"paths": resolved_paths})
