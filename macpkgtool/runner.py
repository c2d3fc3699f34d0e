# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""External command execution for macpkgtool.

The packager never spawns processes itself. It hands an argument list to a
CommandRunner, which makes the stage builder testable with a fake runner
that records invocations.

Design Principles:
    - Blocking calls: the caller waits until the child exits or times out
    - A timeout kills the child and raises ExternalToolTimeoutError
    - A non-zero exit is reported in CommandResult; check_result() turns it
      into ExternalToolError
    - stdout and stderr are captured and merged into a single output string

Example:
    ```python
    from pathlib import Path
    from macpkgtool.runner import SubprocessRunner, check_result

    runner = SubprocessRunner()
    result = runner.run(["pkgbuild", "--help"], cwd=Path("/tmp"), timeout=60)
    check_result(result)
    ```
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
import subprocess
from typing import Protocol

from macpkgtool.exceptions import ExternalToolError, ExternalToolTimeoutError
from macpkgtool.logging import Logger

__all__ = ["CommandResult", "CommandRunner", "SubprocessRunner", "check_result"]


@dataclass(frozen=True)
class CommandResult:
    """Outcome of a finished external command.

    Attributes:
        argv: Full command line that was executed.
        returncode: Exit status of the process.
        output: Combined stdout and stderr.
    """

    argv: list[str]
    returncode: int
    output: str


class CommandRunner(Protocol):
    """Capability to run an external command to completion."""

    def run(
        self, argv: Sequence[str], *, cwd: Path, timeout: float
    ) -> CommandResult:
        """Run argv in cwd, waiting at most timeout seconds.

        Raises:
            ExternalToolTimeoutError: If the command does not finish in time.
        """
        ...


class SubprocessRunner:
    """CommandRunner backed by subprocess.run.

    Args:
        logger: Logger for command lines and tool output. Default is the
            global logger at the time of each run.
    """

    def __init__(self, logger: Logger | None = None) -> None:
        self.logger = logger

    def run(
        self, argv: Sequence[str], *, cwd: Path, timeout: float
    ) -> CommandResult:
        logger = self.logger
        if logger is None:
            from macpkgtool.logging import get_global_logger

            logger = get_global_logger()
        argv = [str(arg) for arg in argv]

        logger.verbose("RUN", f"Running: {' '.join(argv)}")
        logger.debug("RUN", f"cwd={cwd} timeout={timeout}")

        try:
            completed = subprocess.run(
                argv,
                cwd=cwd,
                capture_output=True,
                text=True,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired as err:
            # subprocess.run kills the child before re-raising
            raise ExternalToolTimeoutError(argv, err.timeout) from err
        except FileNotFoundError as err:
            raise ExternalToolError(argv, 127, str(err)) from err

        output = (completed.stdout or "") + (completed.stderr or "")
        for line in output.strip().splitlines():
            logger.debug("RUN", f"  {line}")

        return CommandResult(
            argv=argv, returncode=completed.returncode, output=output
        )


def check_result(result: CommandResult) -> CommandResult:
    """Raise ExternalToolError if a command exited non-zero.

    Args:
        result: Result returned by a CommandRunner.

    Returns:
        The same result, for chaining.

    Raises:
        ExternalToolError: If result.returncode is not zero.
    """
    if result.returncode != 0:
        raise ExternalToolError(result.argv, result.returncode, result.output)
    return result
