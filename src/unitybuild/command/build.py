"""Build command - run the orchestrator against a root directory."""

from __future__ import annotations

from pydantic import BaseModel, Field

from unitybuild.core.config import State
from unitybuild.workflow.graph import run_build


class BuildCommand(BaseModel):
    """Build the project using settings.json from a root directory.

    Writes output.json next to settings.json and exits with its
    exit_code.
    """

    teleroot: str = Field(
        description=(
            "Root directory holding settings.json, relative to the "
            "project's asset directory parent"
        )
    )

    async def run_workflow(self, state: State) -> int:
        return await run_build(state, self.teleroot)
