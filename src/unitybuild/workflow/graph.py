"""Graph workflow definition."""

from pydantic_graph import Graph

from unitybuild.core.config import State
from unitybuild.core.log import logger


def create_workflow() -> Graph:
    """Create the build workflow graph.

    ResolveRoot → LoadSettings → SetSecrets → ResolveScenes →
        AssembleParams → Dispatch → WriteResult → End(exit code)
    """
    logger.debug("Building workflow graph")

    from unitybuild.workflow.nodes import (
        AssembleParams,
        Dispatch,
        LoadSettings,
        ResolveRoot,
        ResolveScenes,
        SetSecrets,
        WriteResult,
    )

    return Graph(
        nodes=(
            ResolveRoot,
            LoadSettings,
            SetSecrets,
            ResolveScenes,
            AssembleParams,
            Dispatch,
            WriteResult,
        ),
        state_type=State,
    )


async def run_build(state: State, teleroot_local: str) -> int:
    """Run the build workflow for one root directory.

    Returns:
        Exit code recorded in output.json
    """
    from unitybuild.workflow.nodes import ResolveRoot

    workflow = create_workflow()
    result = await workflow.run(ResolveRoot(teleroot_local), state=state)
    return result.output
