"""Dispatch node - run the platform build."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, GraphRunContext

from unitybuild.build.android import AndroidBuild
from unitybuild.build.pipeline import CommandPipeline
from unitybuild.core.config import State


def create_pipeline(state: State) -> CommandPipeline:
    """Build the configured command pipeline for the current root."""
    pipeline = state.config.pipeline
    return CommandPipeline(
        command=pipeline.command,
        project=state.runtime.build.project.path,
        log_dir=state.runtime.build.teleroot / pipeline.log_dir,
        editor=pipeline.editor,
        method=pipeline.method,
        timeout=pipeline.timeout,
    )


@dataclass
class Dispatch(BaseNode[State]):
    """Hand the build to the driver for the requested platform.

    An unknown platform raises UnsupportedPlatformError, ending the run
    without a result file.
    """

    async def run(self, ctx: GraphRunContext[State]) -> "WriteResult":
        build = ctx.state.runtime.build
        if build.pipeline is None:
            build.pipeline = create_pipeline(ctx.state)

        driver = AndroidBuild(
            pipeline=build.pipeline,
            toolchain=build.toolchain,
            identity=build.project.identity(),
            extension=ctx.state.config.build.extension,
        )
        build.output = driver.build(build.settings.platform, build.params)

        from unitybuild.workflow.nodes.write_result import WriteResult
        return WriteResult()
