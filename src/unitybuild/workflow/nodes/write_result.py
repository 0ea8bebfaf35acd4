"""WriteResult node - record the outcome and finish."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, End, GraphRunContext

from unitybuild.build.io import write_result
from unitybuild.core.config import State
from unitybuild.core.log import logger


@dataclass
class WriteResult(BaseNode[State, None, int]):
    """Write output.json; the run ends with its exit code."""

    async def run(self, ctx: GraphRunContext[State]) -> End[int]:
        build = ctx.state.runtime.build
        # Logged first so the binary can be found if the write fails
        logger.info(
            "Build result",
            build_path=build.output.build_path,
            exit_code=build.output.exit_code,
        )
        path = write_result(build.teleroot, build.output)
        logger.debug("Wrote result", path=str(path))
        return End(build.output.exit_code)
