"""Launch command - start the editor for a build and report the
result."""

from __future__ import annotations

from pydantic import BaseModel, Field

from unitybuild.build.launcher import Launcher
from unitybuild.build.model import BuildPlatform
from unitybuild.core.config import State
from unitybuild.core.log import logger


class LaunchCommand(BaseModel):
    """Create a fresh root directory, write settings.json, run the
    editor in batch mode and read back output.json."""

    platform: BuildPlatform | None = Field(
        default=None,
        description=(
            "AndroidDevelopment or AndroidRelease "
            "(default: config.launch.platform)"
        ),
    )

    async def run_workflow(self, state: State) -> int:
        result = Launcher(state.config).launch(self.platform)
        if result.exit_code == 0:
            logger.info("Build succeeded", build_path=result.build_path)
        else:
            logger.error(
                "Build failed",
                log_path=str(result.log_path) if result.log_path else None,
            )
        return result.exit_code
