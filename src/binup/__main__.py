"""Allow ``python -m binup`` invocation.

Delegates to the CLI error-boundary entry point so that
``python -m binup`` behaves identically to the ``binup`` console script.
"""

from __future__ import annotations

from binup.cli.app import cli

if __name__ == "__main__":
    cli()
