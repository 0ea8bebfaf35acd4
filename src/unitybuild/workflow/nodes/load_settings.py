"""LoadSettings node - read settings.json."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, GraphRunContext

from unitybuild.build.io import load_settings
from unitybuild.core.config import State
from unitybuild.core.log import logger


@dataclass
class LoadSettings(BaseNode[State]):
    """Load settings.json from the root directory."""

    async def run(self, ctx: GraphRunContext[State]) -> "SetSecrets":
        build = ctx.state.runtime.build
        build.settings = load_settings(build.teleroot)
        logger.info(
            "Loaded build settings",
            platform=build.settings.platform.value,
            build_path=build.settings.build_path,
        )

        from unitybuild.workflow.nodes.set_secrets import SetSecrets
        return SetSecrets()
