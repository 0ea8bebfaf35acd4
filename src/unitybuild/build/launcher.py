"""Caller side of a build: prepare a root, run the editor, read the
result."""

from __future__ import annotations

import shlex
import uuid
from pathlib import Path, PurePosixPath

from unitybuild.build.io import read_result, write_settings
from unitybuild.build.model import BuildPlatform, BuildSettings, LaunchResult
from unitybuild.core.config import Config, LogBehavior
from unitybuild.core.log import logger
from unitybuild.core.runner import Runner

EDITOR_LOG = "android_build.log"


class Launcher:
    """Start the editor in batch mode against a fresh root directory.

    Each launch gets its own root, ``{launch.teleroot}/{uuid1}``,
    relative to the project. settings.json is written there before the
    editor starts and output.json is read from there afterwards.
    """

    def __init__(self, config: Config, runner: Runner | None = None):
        self.config = config
        self.runner = runner or Runner()

    @property
    def project_path(self) -> Path:
        return self.config.project.path

    def new_teleroot(self) -> PurePosixPath:
        return PurePosixPath(self.config.launch.teleroot) / str(uuid.uuid1())

    def create_build_settings(
        self, teleroot: PurePosixPath, platform: BuildPlatform
    ) -> BuildSettings:
        """Write settings.json for platform into the run root."""
        settings = BuildSettings(
            platform=platform,
            keystore_password=(
                self.config.launch.keystore_password.get_secret_value()
            ),
            build_path=self.config.build.path_for(platform),
        )
        write_settings(self.project_path / teleroot, settings)
        return settings

    def editor_command(self, teleroot: PurePosixPath) -> str:
        launch = self.config.launch
        project = launch.editor_project_path or self.project_path
        return shlex.join([
            launch.bin,
            "-batchmode",
            "-quit",
            "-projectPath", str(project),
            "-executeMethod", launch.build_entry,
            "-buildTarget", "android",
            "-logFile", "-",
            "-teleroot", str(teleroot),
        ])

    def launch(self, platform: BuildPlatform | None = None) -> LaunchResult:
        """Run one build and return where its binary went.

        Raises:
            ResultError: If the editor left no readable output.json
        """
        platform = platform or self.config.launch.platform
        teleroot = self.new_teleroot()
        process_root = self.project_path / teleroot
        log_path = process_root / self.config.launch.log_dir / EDITOR_LOG
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.info("Run root", teleroot=str(teleroot), log=str(log_path))

        self.create_build_settings(teleroot, platform)

        behavior = self.config.launch.log_behavior
        with logger.span("Editor build", platform=platform.value):
            result = self.runner.execute(
                self.editor_command(teleroot),
                cwd=self.project_path,
                timeout=self.config.launch.timeout,
                log_file=None if behavior is LogBehavior.STDOUT else log_path,
                check=False,
                echo=behavior is not LogBehavior.FILE,
            )
        logger.info("Editor exit code", exit_code=result.exited)

        output = read_result(process_root)
        return LaunchResult(
            platform=output.platform,
            build_path=str(teleroot / output.build_path),
            exit_code=output.exit_code,
            log_path=None if behavior is LogBehavior.STDOUT else log_path,
        )
