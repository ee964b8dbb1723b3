"""Absolute URL helpers for links that leave the app (embeds, share links)."""

from __future__ import annotations

from collections.abc import Mapping

LOCAL_HOST_PREFIXES = ("localhost", "127.0.0.1", "192.168.", "10.0.")
LOCAL_HOST_SUFFIX = ".local"


def is_local_network(host: str) -> bool:
    """Whether a ``host[:port]`` points at the local machine or LAN."""
    return host.startswith(LOCAL_HOST_PREFIXES) or host.endswith(LOCAL_HOST_SUFFIX)


def get_absolute_url(
    headers: Mapping[str, str] | None = None,
    localhost_address: str = "localhost:3000",
) -> str:
    """Build ``protocol//host`` for the current request.

    Local hosts are served over plain http. ``X-Forwarded-Host`` and
    ``X-Forwarded-Proto`` from a reverse proxy take precedence.
    """
    lowered = {k.lower(): v for k, v in (headers or {}).items()}

    host = lowered.get("host") or localhost_address
    protocol = "http:" if is_local_network(host) else "https:"

    forwarded_host = lowered.get("x-forwarded-host")
    if forwarded_host:
        host = forwarded_host

    forwarded_proto = lowered.get("x-forwarded-proto")
    if forwarded_proto:
        protocol = f"{forwarded_proto}:"

    return f"{protocol}//{host}"
