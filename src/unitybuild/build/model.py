"""Records exchanged between the caller, the orchestrator and the
packaging pipeline."""

from __future__ import annotations

import posixpath
from datetime import datetime
from enum import Enum, IntFlag
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from unitybuild.core.base import BaseState


class BuildPlatform(str, Enum):
    """Supported platform/build-type variants, serialized by name."""

    ANDROID_DEVELOPMENT = "AndroidDevelopment"
    ANDROID_RELEASE = "AndroidRelease"


class ScriptingBackend(str, Enum):
    MONO = "Mono2x"
    IL2CPP = "IL2CPP"


class BuildTarget(str, Enum):
    NO_TARGET = "NoTarget"
    ANDROID = "Android"


class BuildOptions(IntFlag):
    NONE = 0
    DEVELOPMENT = 1


class ReportResult(str, Enum):
    """Outcome reported by the packaging pipeline."""

    UNKNOWN = "Unknown"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"
    CANCELLED = "Cancelled"


class BuildSettings(BaseModel):
    """Contents of settings.json."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    platform: BuildPlatform
    keystore_password: str
    build_path: str


class UnityOutput(BaseModel):
    """Contents of output.json, the terminal artifact of a run."""

    platform: BuildPlatform
    build_path: str
    exit_code: int


class BuildReport(BaseModel):
    """What a pipeline returns from build_player()."""

    result: ReportResult
    output_path: Path
    returncode: int | None = None
    log_file: Path | None = None
    timestamp: datetime = Field(default_factory=datetime.now)


class SceneEntry(BaseModel):
    path: str
    enabled: bool


class AppIdentity(BaseModel):
    product_name: str
    version: str


class ToolchainConfig(BaseState):
    """Toolchain settings for one run.

    Mutated by the orchestrator and the platform driver, then handed
    to the pipeline. Nothing is rolled back when a build fails.
    """

    scripting_backend: ScriptingBackend = ScriptingBackend.MONO
    active_build_target: BuildTarget = BuildTarget.NO_TARGET
    keystore_pass: str | None = None
    keyalias_pass: str | None = None
    development: bool = False


class BuildParams(BaseModel):
    """Everything the platform driver needs for one build.

    Attributes:
        settings: Loaded settings.json
        scenes: Enabled scene paths in declared order
        teleroot: Absolute root directory
        teleroot_local: Root directory as given on the command line
        build_path_local: Output directory relative to the root
    """

    settings: BuildSettings
    scenes: list[str]
    teleroot: Path
    teleroot_local: str
    build_path_local: str

    @property
    def build_path(self) -> Path:
        """Absolute output directory."""
        return self.teleroot / self.settings.build_path

    def relative_output(self, name: str) -> str:
        """Caller-relative path of an output file, with forward slashes."""
        local = self.build_path_local
        joined = posixpath.join(local, name) if local else name
        return joined.replace("\\", "/")


class LaunchResult(BaseModel):
    """A finished build as seen by the launcher."""

    platform: BuildPlatform
    build_path: str
    exit_code: int
    log_path: Path | None = None
