"""Best-effort HTTP check of the deployed site."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import requests

from ..utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class ServiceCheck:
    url: str
    ok: bool
    status_code: Optional[int] = None
    detail: str = ""

    def describe(self) -> str:
        if self.status_code is not None:
            return f"HTTP {self.status_code} {self.detail}".strip()
        return self.detail


def check_service(
    url: str,
    *,
    timeout: int = 10,
    session: Optional[requests.Session] = None,
) -> ServiceCheck:
    """GET ``url`` once. Failures are reported in the result, not raised."""
    http = session or requests.Session()
    try:
        response = http.get(url, timeout=timeout, allow_redirects=True)
    except requests.RequestException as exc:
        logger.warning("Service check for %s failed: %s", url, exc)
        return ServiceCheck(url=url, ok=False, detail=str(exc))
    finally:
        if session is None:
            http.close()
    return ServiceCheck(
        url=url,
        ok=response.ok,
        status_code=response.status_code,
        detail=response.reason or "",
    )
