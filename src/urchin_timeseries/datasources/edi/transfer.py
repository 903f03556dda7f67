"""Download an EDI data entity to a local temporary file.

Transfer strategies are tried in order until one leaves a non-empty file
behind. The default order is ``curl`` (fast, streams straight to disk)
followed by the shared ``requests`` session.
"""

from __future__ import annotations

import logging
import os
import subprocess
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

import requests

from urchin_timeseries.datasources.edi.client import DEFAULT_USER_AGENT
from urchin_timeseries.exceptions import TransferError
from urchin_timeseries.services.http import DEFAULT_TIMEOUT
from urchin_timeseries.services.http import session as default_session

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1 << 16


class TransferStrategy(Protocol):
    """Writes the resource at ``url`` to ``dest``, raising TransferError on failure."""

    name: str

    def __call__(self, url: str, dest: Path) -> None: ...


# =============================================================================
# Strategies
# =============================================================================


class CurlTransfer:
    """Download with the external ``curl`` binary."""

    name = "curl"

    def __init__(
        self,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = DEFAULT_TIMEOUT,
        executable: str = "curl",
    ) -> None:
        self.user_agent = user_agent
        self.timeout = timeout
        self.executable = executable

    def command(self, url: str, dest: Path) -> list[str]:
        return [
            self.executable,
            "--fail",
            "--silent",
            "--show-error",
            "--location",
            "--max-time",
            str(int(self.timeout)),
            "-A",
            self.user_agent,
            "-o",
            str(dest),
            url,
        ]

    def __call__(self, url: str, dest: Path) -> None:
        try:
            subprocess.run(
                self.command(url, dest),
                check=True,
                capture_output=True,
                text=True,
                # curl enforces --max-time; this only guards against a hung process
                timeout=self.timeout + 30,
            )
        except FileNotFoundError as e:
            raise TransferError(f"{self.executable} is not installed", url=url) from e
        except subprocess.CalledProcessError as e:
            detail = (e.stderr or "").strip() or f"exit status {e.returncode}"
            raise TransferError(f"curl failed: {detail}", url=url) from e
        except subprocess.TimeoutExpired as e:
            raise TransferError(f"curl timed out after {e.timeout}s", url=url) from e
        except OSError as e:
            raise TransferError(f"Could not run {self.executable}: {e}", url=url) from e


class SessionTransfer:
    """Download with the shared ``requests`` session, streamed to disk."""

    name = "requests"

    def __init__(
        self,
        session: requests.Session | None = None,
        user_agent: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self.session = session or default_session
        self.user_agent = user_agent
        self.timeout = timeout

    def __call__(self, url: str, dest: Path) -> None:
        headers = {"User-Agent": self.user_agent} if self.user_agent else None
        kwargs: dict[str, object] = {"headers": headers, "stream": True}
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout
        try:
            with self.session.get(url, **kwargs) as resp:  # type: ignore[arg-type]
                resp.raise_for_status()
                with dest.open("wb") as f:
                    for chunk in resp.iter_content(chunk_size=CHUNK_SIZE):
                        f.write(chunk)
        except requests.RequestException as e:
            raise TransferError(f"HTTP download failed: {e}", url=url) from e
        except OSError as e:
            raise TransferError(f"Could not write {dest}: {e}", url=url) from e


def default_strategies(
    user_agent: str = DEFAULT_USER_AGENT,
    timeout: float = DEFAULT_TIMEOUT,
) -> list[TransferStrategy]:
    """curl first, then the requests session."""
    return [
        CurlTransfer(user_agent=user_agent, timeout=timeout),
        SessionTransfer(user_agent=user_agent, timeout=timeout),
    ]


# =============================================================================
# Fetch
# =============================================================================


def _as_transfer_error(exc: Exception, name: str, url: str) -> TransferError:
    if isinstance(exc, TransferError):
        return exc
    error = TransferError(f"{name} raised {type(exc).__name__}: {exc}", url=url)
    error.__cause__ = exc
    return error


def file_size(path: Path) -> int | None:
    """Size of ``path`` in bytes, or None if it can't be determined."""
    try:
        return path.stat().st_size
    except OSError:
        return None


def fetch(
    url: str,
    strategies: Sequence[TransferStrategy] | None = None,
    *,
    user_agent: str = DEFAULT_USER_AGENT,
    timeout: float = DEFAULT_TIMEOUT,
) -> Path:
    """
    Download ``url`` into a fresh temporary file.

    Each strategy writes to the same temp path. A strategy that raises, or
    leaves the file missing or empty, hands over to the next one. Errors
    other than TransferError are wrapped in one. The temp file is removed on
    every failure path.

    Args:
        url: Fully qualified resource URL.
        strategies: Transfer strategies in priority order. Defaults to
            ``default_strategies(user_agent, timeout)``.
        user_agent: User-Agent for the default strategies.
        timeout: Per-attempt timeout for the default strategies, in seconds.

    Returns:
        Path of the downloaded file. The caller is responsible for deleting it.

    Raises:
        TransferError: If no strategy produced a non-empty file.
    """
    if strategies is None:
        strategies = default_strategies(user_agent=user_agent, timeout=timeout)

    fd, name = tempfile.mkstemp(prefix="edi-", suffix=".csv")
    os.close(fd)
    dest = Path(name)

    last_error: TransferError | None = None
    try:
        for strategy in strategies:
            logger.info("Downloading %s via %s", url, strategy.name)
            try:
                strategy(url, dest)
            except Exception as e:
                last_error = _as_transfer_error(e, strategy.name, url)
                logger.warning("Transfer via %s failed: %s", strategy.name, last_error)
                # A failed attempt may leave a partial file behind
                dest.write_bytes(b"")
                continue

            size = file_size(dest)
            if size:
                logger.info("Downloaded %d bytes to %s", size, dest)
                return dest
            last_error = TransferError(f"{strategy.name} produced no data", url=url)
            logger.warning("Transfer via %s produced no data", strategy.name)
    except BaseException:
        dest.unlink(missing_ok=True)
        raise

    dest.unlink(missing_ok=True)
    msg = f"All transfer strategies failed for {url}: {last_error}"
    raise TransferError(msg, url=url) from last_error
