"""ResolveRoot node - locate the root directory."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, GraphRunContext

from unitybuild.build.project import UnityProject
from unitybuild.core.config import State
from unitybuild.core.log import logger


@dataclass
class ResolveRoot(BaseNode[State]):
    """Resolve the caller-relative root against the project."""

    teleroot_local: str

    async def run(self, ctx: GraphRunContext[State]) -> "LoadSettings":
        build = ctx.state.runtime.build
        project_config = ctx.state.config.project

        build.project = UnityProject(
            project_config.path, project_config.assets_dir
        )
        build.teleroot_local = self.teleroot_local
        build.teleroot = build.project.resolve_root(self.teleroot_local)
        logger.info("Root directory", teleroot=str(build.teleroot))

        from unitybuild.workflow.nodes.load_settings import LoadSettings
        return LoadSettings()
