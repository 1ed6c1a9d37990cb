"""Build version of the running binup executable.

Release builds stamp ``__version__`` with the semantic version of the
release.  Source checkouts keep the :data:`DEVELOPMENT_VERSION` sentinel,
which disables self-update entirely.
"""

from __future__ import annotations

DEVELOPMENT_VERSION: str = "development"
"""Sentinel build identifier for unreleased builds."""

__version__: str = DEVELOPMENT_VERSION
