"""
requests session for the PASTA data API.

PASTA occasionally answers large entity downloads with 503 or a dropped
connection. This session retries those with backoff and applies a default
timeout. ``SessionTransfer`` streams the biomass CSV through it when
curl is unavailable or fails.

Usage::

    from urchin_timeseries.services.http import session

    with session.get(DEFAULT_SOURCE_URL, stream=True) as resp:
        resp.raise_for_status()
        ...
"""

from __future__ import annotations

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from urchin_timeseries.datasources.edi.client import DEFAULT_USER_AGENT

#: Retries for idempotent requests to PASTA.
DEFAULT_RETRY = Retry(
    total=3,
    backoff_factor=2,  # 0s, 2s, 4s between retries
    status_forcelist=[429, 502, 503, 504],
    allowed_methods=["GET", "HEAD"],
    raise_on_status=False,  # let resp.raise_for_status() handle it
)

DEFAULT_TIMEOUT = 120  # seconds; the biomass CSV is ~20 MB


def create_session(
    retry: Retry | None = None,
    timeout: float = DEFAULT_TIMEOUT,
    user_agent: str = DEFAULT_USER_AGENT,
) -> requests.Session:
    """
    Build a ``requests.Session`` with retry adapter mounted.

    Args:
        retry: Custom retry strategy (defaults to ``DEFAULT_RETRY``).
        timeout: Default timeout applied to every request.
        user_agent: Value of the ``User-Agent`` header.
    """
    s = requests.Session()
    adapter = HTTPAdapter(max_retries=retry or DEFAULT_RETRY)
    s.mount("https://", adapter)
    s.mount("http://", adapter)
    s.headers["User-Agent"] = user_agent

    # Requests without an explicit timeout get this one
    _original_send = s.send

    def _send_with_timeout(
        prepared: requests.PreparedRequest, **kwargs: object
    ) -> requests.Response:
        kwargs.setdefault("timeout", timeout)
        return _original_send(prepared, **kwargs)  # type: ignore[arg-type]

    s.send = _send_with_timeout  # type: ignore[method-assign]
    return s


#: Shared session used by SessionTransfer unless one is passed in.
session: requests.Session = create_session()
