"""CLI command modules for unitybuild."""

from unitybuild.command.build import BuildCommand
from unitybuild.command.launch import LaunchCommand

__all__ = ["BuildCommand", "LaunchCommand"]
