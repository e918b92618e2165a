from typing import Any

import httpx


def upstream_details(e: Exception) -> Any:
    """Upstream JSON error payload when there is one, the message otherwise"""
    if isinstance(e, httpx.HTTPStatusError):
        try:
            return e.response.json()
        except ValueError:
            return e.response.text or str(e)
    return str(e) or e.__class__.__name__
