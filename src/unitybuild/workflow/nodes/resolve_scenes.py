"""ResolveScenes node - pick the scenes to build."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, GraphRunContext

from unitybuild.core.config import State
from unitybuild.core.log import logger


@dataclass
class ResolveScenes(BaseNode[State]):
    """Collect enabled scenes in their declared order."""

    async def run(self, ctx: GraphRunContext[State]) -> "AssembleParams":
        build = ctx.state.runtime.build
        build.scenes = build.project.enabled_scenes()
        if not build.scenes:
            logger.warn("No enabled scenes in build settings")
        logger.debug("Scenes", scenes=build.scenes)

        from unitybuild.workflow.nodes.assemble_params import AssembleParams
        return AssembleParams()
