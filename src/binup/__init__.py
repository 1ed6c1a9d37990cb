"""binup — self-update core for a single-binary command-line tool.

Detects newer releases, swaps the running executable atomically, and
resumes the original invocation on the new binary.
"""

from binup.version import __version__

__all__: list[str] = ["__version__"]
