"""CLI console helpers with optional Rich support.

This module intentionally avoids module-level imports of optional UI
dependencies so bootstrap paths (``--help``, ``--version``) and the
upgrade flow itself remain functional even when Rich is not installed.
"""

from __future__ import annotations

import re
import sys
from typing import Any

from binup.exceptions import EnvironmentError


def _load_rich_console_class() -> type[Any]:
	"""Return ``rich.console.Console`` class or raise ``EnvironmentError``."""
	try:
		from rich.console import Console
	except ModuleNotFoundError as exc:
		raise EnvironmentError(
			"rich is not installed. Install with: pip install rich",
		) from exc
	return Console


def get_rich_console() -> Any:
	"""Create a Rich console instance targeting stderr."""
	console_class = _load_rich_console_class()
	return console_class(stderr=True)


def rich_available() -> bool:
	"""Return ``True`` when Rich can be imported."""
	try:
		_load_rich_console_class()
	except EnvironmentError:
		return False
	return True


class _ConsoleProxy:
	"""Minimal ``print``-compatible proxy with Rich fallback."""

	def print(self, *objects: object) -> None:
		"""Render with Rich when available, else plain stderr print."""
		try:
			rich_console = get_rich_console()
		except EnvironmentError:
			print(*(_strip_markup(obj) for obj in objects), file=sys.stderr)
			return
		rich_console.print(*objects)


def _strip_markup(obj: object) -> object:
	if not isinstance(obj, str):
		return obj
	return re.sub(r"\[/?[a-z_ ]+\]", "", obj)


console = _ConsoleProxy()
