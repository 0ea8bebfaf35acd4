"""Application state and configuration."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any

import platformdirs
from pydantic import BaseModel, ConfigDict, Field, SecretStr, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from unitybuild.build.model import (
    BuildParams,
    BuildPlatform,
    BuildSettings,
    ToolchainConfig,
    UnityOutput,
)
from unitybuild.core.base import BaseConfig, BaseState
from unitybuild.core.log import Logger
from unitybuild.core.yaml_settings import LayeredYamlSettingsSource

# ============================================================
# CONFIG MODELS (loaded from YAML/env/CLI)
# ============================================================

class ProjectConfig(BaseConfig):
    """Location of the Unity project being built."""

    path: Path = Field(
        default=Path("."),
        description="Unity project root (the parent of the assets dir)",
    )
    assets_dir: str = Field(
        default="Assets",
        description="Name of the project's asset directory",
    )


class BuildConfig(BaseConfig):
    """Output naming and per-platform output directories."""

    extension: str = Field(
        default="apk", description="Extension of the produced binary"
    )
    development_path: str = Field(
        description=(
            "Output directory for AndroidDevelopment builds, relative "
            "to the root directory"
        )
    )
    release_path: str = Field(
        description=(
            "Output directory for AndroidRelease builds, relative "
            "to the root directory"
        )
    )

    def path_for(self, platform: BuildPlatform) -> str:
        if platform is BuildPlatform.ANDROID_DEVELOPMENT:
            return self.development_path
        return self.release_path


class PipelineConfig(BaseConfig):
    """Command that performs the actual packaging."""

    command: str = Field(
        description=(
            "Command template. Placeholders: {editor}, {method}, "
            "{project}, {target}, {output}, {scenes}, "
            "{scripting_backend}, {development}"
        )
    )
    editor: str = Field(
        default="unity", description="Editor executable for {editor}"
    )
    method: str = Field(
        default="Builds.Packager.BuildPlayer",
        description="Editor method for {method}",
    )
    timeout: int = Field(
        default=7200,
        description="Packaging timeout in seconds; expiry is a cancel",
    )
    log_dir: str = Field(
        default="Logs",
        description="Pipeline log directory, relative to the root dir",
    )


class LogBehavior(str, Enum):
    STDOUT = "stdout"
    STDOUT_FILE = "stdout_file"
    FILE = "file"


class LaunchConfig(BaseConfig):
    """Caller side: how to start the editor for a build."""

    bin: str = Field(default="unity", description="Editor executable")
    editor_project_path: Path | None = Field(
        default=None,
        description=(
            "Project path as seen by the editor, when it differs from "
            "project.path (containers, WSL)"
        ),
    )
    build_entry: str = Field(
        default="Builds.BuildSystem.Build",
        description="Method passed to -executeMethod",
    )
    teleroot: str = Field(
        default="Telebuild",
        description="Parent of per-run root dirs, relative to the project",
    )
    log_dir: str = Field(
        default="Logs", description="Log directory inside the run root"
    )
    log_behavior: LogBehavior = Field(
        default=LogBehavior.STDOUT_FILE,
        description="Editor output: stdout, stdout_file or file",
    )
    platform: BuildPlatform = Field(
        default=BuildPlatform.ANDROID_DEVELOPMENT,
        description="Variant written to settings.json",
    )
    keystore_password: SecretStr = Field(
        default=SecretStr(""),
        description="Keystore and key alias passphrase",
    )
    timeout: int | None = Field(
        default=None, description="Editor timeout in seconds"
    )


class Config(BaseConfig):
    """Application configuration loaded from YAML/env/CLI."""

    logger: Logger = Field(
        default=None, description="Logger configuration"
    )
    project: ProjectConfig = Field(default_factory=ProjectConfig)
    build: BuildConfig
    pipeline: PipelineConfig
    launch: LaunchConfig = Field(default_factory=LaunchConfig)
    log_root: Path = Field(
        default_factory=(
            lambda: Path(platformdirs.user_state_dir()) / "unitybuild"
        ),
        description="Root directory for log files",
    )

    @model_validator(mode='after')
    def _setup_logger(self) -> Config:
        """Install the global logger once configuration has loaded."""
        from unitybuild.core.log import setup_logger

        if self.logger is None:
            self.logger = Logger()

        self.logger = setup_logger(
            log_root=self.log_root,
            run_name="unitybuild",
            level=self.logger.level,
            console=self.logger.console,
            file=self.logger.file,
        )
        return self


# ============================================================
# RUNTIME STATE (mutated while a build runs)
# ============================================================

class BuildState(BaseState):
    """Orchestrator state, filled in step by step."""

    teleroot_local: str | None = None
    teleroot: Path | None = None
    project: Any = Field(default=None, description="UnityProject")
    settings: BuildSettings | None = None
    toolchain: ToolchainConfig = Field(default_factory=ToolchainConfig)
    scenes: list[str] = Field(default_factory=list)
    params: BuildParams | None = None
    pipeline: Any = Field(default=None, description="BuildPipeline")
    output: UnityOutput | None = None

    model_config = ConfigDict(arbitrary_types_allowed=True)


class Runtime(BaseModel):
    build: BuildState = Field(default_factory=BuildState)


# ============================================================
# STATE (config + runtime combined)
# ============================================================

class State(BaseSettings):
    """Configuration plus runtime state; what the workflow carries.

    Configuration sources, highest priority first:
    1. Init arguments (and CLI arguments under CliApp)
    2. Environment variables (UNITYBUILD_CONFIG__PROJECT__PATH=...)
    3. .env file
    4. YAML: package defaults < user config < ./unitybuild.yaml
    """

    config: Config
    runtime: Runtime = Field(default_factory=Runtime)

    model_config = SettingsConfigDict(
        yaml_file="unitybuild.yaml",
        env_file=".env",
        env_prefix="UNITYBUILD_",
        env_nested_delimiter="__",
        cli_implicit_flags=True,
        cli_use_class_docs_for_groups=True,
        arbitrary_types_allowed=True,
        extra='ignore',
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
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            LayeredYamlSettingsSource(settings_cls),
            file_secret_settings,
        )
