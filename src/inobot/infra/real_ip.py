"""Real client IP extraction for reverse-proxy deployments.

Deployment chain: Client -> Cloudflare -> FastAPI.

``request.client.host`` is the proxy's address, so the real IP is read
from proxy headers in priority order:

1. ``CF-Connecting-IP``: set by Cloudflare
2. ``X-Forwarded-For``: leftmost entry
3. ``X-Real-IP`` / ``X-Client-IP``: set by some proxy configs
4. ``request.client.host``: last resort (local dev / direct access)
"""

from __future__ import annotations

from fastapi import Request

_REAL_IP_HEADER_NAMES = [
    "cf-connecting-ip",
    "x-forwarded-for",
    "x-real-ip",
    "x-client-ip",
]

UNKNOWN_IP = "unknown"


def get_real_ip(request: Request) -> str:
    """Extract the real client IP from the request.

    Usable as a FastAPI dependency::

        real_ip: str = Depends(get_real_ip)
    """
    for header in _REAL_IP_HEADER_NAMES:
        value = request.headers.get(header)
        if value:
            first = value.split(",")[0].strip()
            if first:
                return first

    if request.client:
        return request.client.host

    return UNKNOWN_IP
