"""Infrastructure: describe the running executable and its platform.

Platform names follow the release-asset convention (``linux``/``darwin``/
``windows``, ``amd64``/``arm64``...), not Python's own spelling.
"""

from __future__ import annotations

import platform
import shutil
import sys
from pathlib import Path

from binup.core.models import PlatformTarget
from binup.exceptions import EnvironmentError

_OS_NAMES: dict[str, str] = {
    "linux": "linux",
    "darwin": "darwin",
    "win32": "windows",
    "cygwin": "windows",
    "freebsd": "freebsd",
    "openbsd": "openbsd",
    "netbsd": "netbsd",
}

_ARCH_NAMES: dict[str, str] = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "386",
    "i686": "386",
    "x86": "386",
    "armv7l": "arm",
    "armv6l": "arm",
}


def detect_platform() -> PlatformTarget:
    """Return the release target for the current interpreter."""
    system = sys.platform
    for prefix, name in _OS_NAMES.items():
        if system.startswith(prefix):
            os_name = name
            break
    else:
        os_name = system

    machine = platform.machine().lower()
    return PlatformTarget(os=os_name, arch=_ARCH_NAMES.get(machine, machine))


def current_executable() -> Path:
    """Return the absolute path of the executable that started this process.

    Frozen builds report themselves through ``sys.executable``; otherwise
    the console-script path in ``sys.argv[0]`` is used, looked up on
    ``PATH`` when it is a bare name.

    Raises
    ------
    EnvironmentError
        If the process was started from a Python source file (for example
        ``python -m binup``, where ``argv[0]`` is ``__main__.py``).  That
        file is not a replaceable binary.
    """
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve()

    launcher = sys.argv[0] if sys.argv and sys.argv[0] else sys.executable
    if launcher.endswith(".py"):
        raise EnvironmentError(
            f"{launcher} is a Python source file, not a standalone executable.",
            hint="Self-update only works for the installed binup binary.",
        )
    candidate = Path(launcher)
    if not candidate.parent.parts:
        found = shutil.which(launcher)
        if found is not None:
            candidate = Path(found)
    return candidate.resolve()
