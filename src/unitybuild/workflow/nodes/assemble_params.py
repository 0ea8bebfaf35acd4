"""AssembleParams node - combine everything the driver needs."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, GraphRunContext

from unitybuild.build.model import BuildParams
from unitybuild.core.config import State


@dataclass
class AssembleParams(BaseNode[State]):
    async def run(self, ctx: GraphRunContext[State]) -> "Dispatch":
        build = ctx.state.runtime.build
        build.params = BuildParams(
            settings=build.settings,
            scenes=build.scenes,
            teleroot=build.teleroot,
            teleroot_local=build.teleroot_local,
            build_path_local=build.settings.build_path,
        )

        from unitybuild.workflow.nodes.dispatch import Dispatch
        return Dispatch()
