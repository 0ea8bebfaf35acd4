"""Command execution on top of invoke."""

import contextlib
import os
from pathlib import Path

from invoke import Context, Result
from invoke.exceptions import CommandTimedOut

from unitybuild.core.log import logger


class Runner(Context):
    """invoke.Context with a single execute() entry point.

    Used for both the packaging command and the editor launch.
    """

    def kill(self) -> None:
        """Kill the running subprocess.

        invoke's kill() sends signal.SIGKILL, which does not exist on
        Windows. os.kill() there takes a numeric code and terminates
        the process, so pass 9 directly.
        """
        import platform

        if platform.system() == "Windows":
            pid = self.pid if self.using_pty else self.process.pid
            with contextlib.suppress(ProcessLookupError):
                os.kill(pid, 9)
            return
        super().kill()

    def execute(
        self,
        command: str,
        cwd: Path | None = None,
        timeout: int | None = None,
        log_file: Path | None = None,
        log_level: str | None = None,
        check: bool = True,
        env: dict[str, str] | None = None,
        echo: bool = False,
    ) -> Result:
        """Run a shell command.

        Args:
            command: Command string to execute
            cwd: Working directory for the command
            timeout: Maximum execution time in seconds
            log_file: Path to write combined stdout/stderr to
            log_level: Level at which to replay output lines into the
                logger after the command finishes
            check: If True, raise on non-zero exit
            env: Extra environment variables (merged over os.environ)
            echo: Stream output to the console while it runs

        Returns:
            invoke.Result; ``exited`` is -1 when the timeout expired

        Raises:
            invoke.UnexpectedExit: If check=True and command
                returns non-zero
        """
        kwargs = {
            "hide": not echo,
            "warn": not check,
            "in_stream": False,
        }
        if timeout:
            kwargs["timeout"] = timeout
        if env:
            kwargs["env"] = env

        logger.debug("Executing command", command=command, cwd=str(cwd))
        try:
            if cwd:
                with self.cd(str(cwd)):
                    result = self.run(command, **kwargs)
            else:
                result = self.run(command, **kwargs)
        except CommandTimedOut as e:
            logger.warn("Command timed out", timeout=timeout)
            result = e.result
            result.exited = -1

        if log_file:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            log_file.write_text(result.stdout + result.stderr)

        if log_level:
            for line in (result.stdout + result.stderr).splitlines():
                logger.log(log_level, line.rstrip())

        return result
