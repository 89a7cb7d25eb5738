"""Target acquisition and environment reporting."""
from __future__ import annotations

import logging
from typing import Any, Optional

import requests

log = logging.getLogger(__name__)

_DEFAULT_TIMEOUT = 10  # seconds
_USER_AGENT = "lockon/0.1"


def fetch_json(
    url: str,
    *,
    params: Optional[dict] = None,
    timeout: float = _DEFAULT_TIMEOUT,
) -> Any:
    """GET *url* and decode the JSON body.

    Raises ``requests.RequestException`` on network / HTTP errors and
    ``ValueError`` on an undecodable body.  No retries: callers that want
    a fallback move on to another source instead.
    """
    resp = requests.get(
        url,
        params=params,
        timeout=timeout,
        headers={"User-Agent": _USER_AGENT, "Cache-Control": "no-store"},
    )
    resp.raise_for_status()
    return resp.json()
