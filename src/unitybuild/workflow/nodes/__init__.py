"""Workflow nodes for the build state machine."""

from unitybuild.workflow.nodes.assemble_params import AssembleParams
from unitybuild.workflow.nodes.dispatch import Dispatch
from unitybuild.workflow.nodes.load_settings import LoadSettings
from unitybuild.workflow.nodes.resolve_root import ResolveRoot
from unitybuild.workflow.nodes.resolve_scenes import ResolveScenes
from unitybuild.workflow.nodes.set_secrets import SetSecrets
from unitybuild.workflow.nodes.write_result import WriteResult

__all__ = [
    "ResolveRoot",
    "LoadSettings",
    "SetSecrets",
    "ResolveScenes",
    "AssembleParams",
    "Dispatch",
    "WriteResult",
]
