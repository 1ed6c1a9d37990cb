"""Infrastructure: re-run the updated executable with the original invocation.

The child inherits the parent's standard streams unless the invocation
names explicit handles, so its output reaches the terminal untouched.
Its exit status is returned to the caller, which terminates the parent
with it.
"""

from __future__ import annotations

import logging
import subprocess

from binup.core.models import ProcessInvocation
from binup.exceptions import RespawnError

_LOGGER = logging.getLogger(__name__)

_SIGNAL_EXIT_BASE = 128


class SubprocessRespawner:
    """Concrete :class:`~binup.core.protocols.ProcessRespawner`."""

    def respawn(self, invocation: ProcessInvocation) -> int:
        """Run *invocation* to completion and return its exit status.

        A child killed by signal ``N`` is reported as ``128 + N``, the
        shell convention.

        Raises
        ------
        RespawnError
            If the executable cannot be started or waited on.
        """
        command = [str(invocation.executable), *invocation.arguments]
        _LOGGER.debug("Respawning %s", command)
        try:
            completed = subprocess.run(
                command,
                stdin=invocation.stdin,
                stdout=invocation.stdout,
                stderr=invocation.stderr,
                check=False,
            )
        except OSError as exc:
            raise RespawnError(
                f"Failed to restart {invocation.executable}: {exc}",
                hint="The update was installed; run your command again.",
            ) from exc

        return exit_status(completed.returncode)


def exit_status(returncode: int) -> int:
    """Map a :mod:`subprocess` return code to a process exit status."""
    if returncode < 0:
        return _SIGNAL_EXIT_BASE - returncode
    return returncode
