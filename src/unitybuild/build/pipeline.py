"""Adapters for the external packaging pipeline."""

from __future__ import annotations

import shlex
from datetime import datetime
from pathlib import Path
from typing import Protocol

from unitybuild.build.model import (
    BuildOptions,
    BuildReport,
    BuildTarget,
    ReportResult,
    ToolchainConfig,
)
from unitybuild.core.log import logger
from unitybuild.core.runner import Runner


class BuildPipeline(Protocol):
    """The packaging entry point.

    Turns scenes plus toolchain configuration into a binary at
    output_path and reports how it went. Implementations block until
    the build is over.
    """

    def build_player(
        self,
        scenes: list[str],
        output_path: Path,
        target: BuildTarget,
        options: BuildOptions,
        toolchain: ToolchainConfig,
    ) -> BuildReport:
        ...


class CommandPipeline:
    """Run a configured shell command as the packaging step.

    The command template is formatted with the build parameters; the
    keystore passphrases go into the environment instead of onto the
    command line. Exit 0 is success, a timeout is a cancellation and
    anything else is a failure.
    """

    def __init__(
        self,
        command: str,
        project: Path,
        log_dir: Path,
        editor: str = "unity",
        method: str = "",
        timeout: int | None = None,
        runner: Runner | None = None,
    ):
        self.command = command
        self.project = Path(project)
        self.log_dir = Path(log_dir)
        self.editor = editor
        self.method = method
        self.timeout = timeout
        self.runner = runner or Runner()

    def format_command(
        self,
        scenes: list[str],
        output_path: Path,
        target: BuildTarget,
        options: BuildOptions,
        toolchain: ToolchainConfig,
    ) -> str:
        development = toolchain.development or bool(
            options & BuildOptions.DEVELOPMENT
        )
        return self.command.format(
            editor=self.editor,
            method=self.method,
            project=shlex.quote(str(self.project)),
            target=target.value,
            output=shlex.quote(str(output_path)),
            scenes=shlex.quote(";".join(scenes)),
            scripting_backend=toolchain.scripting_backend.value,
            development=str(development).lower(),
        )

    def build_player(
        self,
        scenes: list[str],
        output_path: Path,
        target: BuildTarget,
        options: BuildOptions,
        toolchain: ToolchainConfig,
    ) -> BuildReport:
        command = self.format_command(
            scenes, output_path, target, options, toolchain
        )
        timestamp = datetime.now()
        log_file = (
            self.log_dir
            / f"pipeline-{timestamp.strftime('%Y%m%d-%H%M%S')}.log"
        )
        output_path.parent.mkdir(parents=True, exist_ok=True)

        env = {}
        if toolchain.keystore_pass is not None:
            env["UNITY_KEYSTORE_PASS"] = toolchain.keystore_pass
        if toolchain.keyalias_pass is not None:
            env["UNITY_KEYALIAS_PASS"] = toolchain.keyalias_pass

        with logger.span("Packaging", target=target.value, scenes=len(scenes)):
            result = self.runner.execute(
                command,
                cwd=self.project,
                timeout=self.timeout,
                log_file=log_file,
                log_level="debug",
                check=False,
                env=env,
            )

        if result.exited == 0:
            outcome = ReportResult.SUCCEEDED
        elif result.exited == -1:
            outcome = ReportResult.CANCELLED
        else:
            outcome = ReportResult.FAILED

        logger.info(
            "Packaging finished",
            result=outcome.value,
            returncode=result.exited,
            log_file=str(log_file),
        )
        return BuildReport(
            result=outcome,
            output_path=output_path,
            returncode=result.exited,
            log_file=log_file,
            timestamp=timestamp,
        )
