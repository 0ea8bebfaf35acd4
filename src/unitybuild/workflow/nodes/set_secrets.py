"""SetSecrets node - hand the keystore passphrase to the toolchain."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, GraphRunContext

from unitybuild.core.config import State


@dataclass
class SetSecrets(BaseNode[State]):
    """Use the settings passphrase for both keystore and key alias."""

    async def run(self, ctx: GraphRunContext[State]) -> "ResolveScenes":
        build = ctx.state.runtime.build
        password = build.settings.keystore_password
        build.toolchain.keystore_pass = password
        build.toolchain.keyalias_pass = password

        from unitybuild.workflow.nodes.resolve_scenes import ResolveScenes
        return ResolveScenes()
