#!/usr/bin/env python3
"""unitybuild CLI - Android builds of Unity projects."""

import asyncio
import sys

from pydantic_settings import CliApp, CliSubCommand, get_subcommand

from unitybuild.command.build import BuildCommand
from unitybuild.command.launch import LaunchCommand
from unitybuild.core.config import State
from unitybuild.core.errors import MissingArgumentError, UnityBuildError
from unitybuild.core.log import logger
from unitybuild.workflow.graph import run_build

TELEROOT_FLAG = "-teleroot"


class CliState(State):
    """Android builds of Unity projects.

    `build` runs the build itself against a root directory holding
    settings.json. `launch` is the caller side: it prepares a root,
    starts the editor with -teleroot and reads back output.json.

    Configuration sources (in priority order):
    1. Command-line arguments (--config.project.path value)
    2. Environment variables (UNITYBUILD_CONFIG__PROJECT__PATH=value)
    3. .env file
    4. unitybuild.yaml in the current directory, then the user
       config file, then package defaults
    """

    build: CliSubCommand[BuildCommand]
    launch: CliSubCommand[LaunchCommand]

    def cli_cmd(self):
        subcommand = get_subcommand(self, is_required=False)

        if subcommand is None:
            CliApp.run(CliState, cli_args=['--help'])
            sys.exit(1)

        with logger:
            raise SystemExit(_run(subcommand.run_workflow(self)))


def _run(workflow) -> int:
    """Run a workflow coroutine, turning fatal errors into exit 1."""
    try:
        return asyncio.run(workflow)
    except UnityBuildError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1


def parse_teleroot(argv: list[str]) -> str:
    """Return the token following -teleroot in argv.

    Every other token belongs to the host's own command line and is
    ignored.

    Raises:
        MissingArgumentError: If the flag is absent or is the last token
    """
    try:
        index = argv.index(TELEROOT_FLAG)
    except ValueError:
        raise MissingArgumentError(
            f"{TELEROOT_FLAG} <path> is required"
        ) from None
    if index + 1 >= len(argv):
        raise MissingArgumentError(f"{TELEROOT_FLAG} has no value")
    return argv[index + 1]


def run(argv: list[str] | None = None):
    """Entry point for hosts that pass ``-teleroot <path>`` among
    their own arguments.

    The flag is parsed before configuration is loaded, so a missing
    flag exits without touching the filesystem.
    """
    argv = sys.argv if argv is None else argv
    try:
        teleroot_local = parse_teleroot(argv)
    except MissingArgumentError as e:
        print(f"error: {e}", file=sys.stderr)
        raise SystemExit(2) from None

    state = State()
    with logger:
        raise SystemExit(_run(run_build(state, teleroot_local)))


def main():
    """Main entry point for CLI."""
    CliApp.run(CliState)


if __name__ == "__main__":
    main()
