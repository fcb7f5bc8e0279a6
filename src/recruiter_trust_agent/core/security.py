"""Network safety defaults for outbound verification calls."""

from __future__ import annotations

from dataclasses import dataclass
import ipaddress


@dataclass(frozen=True)
class SecurityPolicy:
    scrape_timeout_s: float = 5.0
    max_response_bytes: int = 1_000_000
    max_redirects: int = 3
    allow_private_network: bool = False
    user_agent: str = "RecruiterTrustAgent/1.0"


def is_private_or_local_ip(value: str) -> bool:
    try:
        ip = ipaddress.ip_address(value)
    except ValueError:
        return False
    return (
        ip.is_private
        or ip.is_loopback
        or ip.is_link_local
        or ip.is_reserved
        or ip.is_multicast
        or ip.is_unspecified
    )


_PLACEHOLDER_KEY_MARKERS = ("placeholder", "your_", "demo_", "changeme")


def is_configured_key(key: str | None) -> bool:
    """Return False for empty keys and obvious template placeholders."""

    value = (key or "").strip()
    if not value:
        return False
    lowered = value.lower()
    return not any(marker in lowered for marker in _PLACEHOLDER_KEY_MARKERS)
