"""httpx-backed release endpoints.

:class:`HttpxTagSource` satisfies :class:`~binup.core.protocols.TagSource`
and :class:`HttpxReleaseFetcher` satisfies
:class:`~binup.core.protocols.ReleaseFetcher`.  This module is the
**only** place in the codebase that imports ``httpx``; every httpx
exception is re-raised here as :class:`~binup.exceptions.NetworkError`.
"""

from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO

import httpx

from binup.core.models import Deadline
from binup.core.protocols import ProgressCallback
from binup.exceptions import NetworkError
from binup.version import __version__

_LOGGER = logging.getLogger(__name__)

_USER_AGENT = f"binup/{__version__}"

# Read-inactivity bound for archive downloads; the download itself has no
# overall deadline once the user has confirmed.
_DOWNLOAD_TIMEOUT = httpx.Timeout(60.0, connect=10.0)


def _build_client(
    transport: httpx.BaseTransport | None,
    timeout: httpx.Timeout | float,
) -> httpx.Client:
    return httpx.Client(
        transport=transport,
        timeout=timeout,
        follow_redirects=True,
        headers={"User-Agent": _USER_AGENT},
    )


class HttpxTagSource:
    """Fetch the raw tag listing with a deadline-bounded GET.

    Parameters
    ----------
    transport:
        Optional httpx transport, used by tests to serve canned responses.
    """

    def __init__(self, transport: httpx.BaseTransport | None = None) -> None:
        self._transport = transport

    def fetch_tag_listing(self, url: str, *, deadline: Deadline) -> str:
        """Return the body of *url* as text.

        httpx timeouts only bound each individual network operation, so
        the body is streamed and *deadline* is checked on every chunk to
        bound the exchange as a whole.

        Raises
        ------
        NetworkError
            On timeout, connection failure, a non-2xx status, or when
            *deadline* passes before the body is complete.
        """
        remaining = deadline.remaining()
        if remaining <= 0:
            raise NetworkError("Version check deadline exceeded.")

        try:
            with _build_client(self._transport, remaining) as client:
                with client.stream(
                    "GET",
                    url,
                    headers={"Accept": "application/vnd.github+json"},
                ) as response:
                    response.raise_for_status()
                    body = bytearray()
                    for chunk in response.iter_bytes():
                        if deadline.expired:
                            raise NetworkError("Version check deadline exceeded.")
                        body.extend(chunk)
                    if deadline.expired:
                        raise NetworkError("Version check deadline exceeded.")
                    return body.decode(response.encoding or "utf-8", errors="replace")
        except httpx.HTTPStatusError as exc:
            raise NetworkError(
                f"Tag listing returned HTTP {exc.response.status_code}.",
            ) from exc
        except httpx.HTTPError as exc:
            raise NetworkError(f"Could not reach {url}: {exc}") from exc


class HttpxReleaseFetcher:
    """Stream a release archive into a private temporary file.

    Parameters
    ----------
    transport:
        Optional httpx transport, used by tests to serve canned responses.
    """

    def __init__(self, transport: httpx.BaseTransport | None = None) -> None:
        self._transport = transport

    @contextmanager
    def fetch(
        self,
        url: str,
        *,
        progress_callback: ProgressCallback | None = None,
    ) -> Iterator[Path]:
        """Download *url* completely, yield the file, then delete it.

        The file is removed on every exit path, including failures inside
        the caller's ``with`` block.

        Raises
        ------
        NetworkError
            If the download fails or the archive cannot be saved.
        """
        fd, name = tempfile.mkstemp(prefix="binup-", suffix=".tar.gz")
        archive_path = Path(name)
        try:
            with os.fdopen(fd, "wb") as sink:
                self._download_into(url, sink, progress_callback)
            _LOGGER.debug("Saved %s to %s", url, archive_path)
            yield archive_path
        finally:
            archive_path.unlink(missing_ok=True)
            _LOGGER.debug("Removed temporary archive %s", archive_path)

    def _download_into(
        self,
        url: str,
        sink: BinaryIO,
        progress_callback: ProgressCallback | None,
    ) -> None:
        try:
            with _build_client(self._transport, _DOWNLOAD_TIMEOUT) as client:
                with client.stream("GET", url) as response:
                    response.raise_for_status()
                    total = _content_length(response)
                    downloaded = 0
                    for chunk in response.iter_bytes():
                        sink.write(chunk)
                        downloaded += len(chunk)
                        if progress_callback is not None:
                            progress_callback(downloaded, total)
                    if progress_callback is not None:
                        progress_callback(downloaded, downloaded)
        except httpx.HTTPStatusError as exc:
            raise NetworkError(
                f"Release download returned HTTP {exc.response.status_code}: {url}",
                hint="The release may not provide an archive for this platform.",
            ) from exc
        except httpx.HTTPError as exc:
            raise NetworkError(f"Failed to download the update: {exc}") from exc
        except OSError as exc:
            raise NetworkError(f"Failed to save the downloaded archive: {exc}") from exc


def _content_length(response: httpx.Response) -> int | None:
    raw = response.headers.get("Content-Length")
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        return None
