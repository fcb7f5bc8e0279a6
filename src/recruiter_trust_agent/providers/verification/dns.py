"""Asynchronous host resolution used by the email and domain channels."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
import socket

from recruiter_trust_agent.core.security import is_private_or_local_ip
from recruiter_trust_agent.infra.cache import TTLCache


@dataclass(frozen=True)
class DnsCheck:
    host: str
    is_valid: bool
    addresses: tuple[str, ...] = field(default_factory=tuple)
    error: str | None = None

    @property
    def is_private(self) -> bool:
        return bool(self.addresses) and any(is_private_or_local_ip(addr) for addr in self.addresses)

    def as_detail(self) -> dict[str, object]:
        return {
            "host": self.host,
            "is_valid": self.is_valid,
            "addresses": list(self.addresses),
            "error": self.error,
        }


class DnsResolver:
    def __init__(self, cache: TTLCache | None = None) -> None:
        self._cache = cache if cache is not None else TTLCache(ttl_s=300.0)

    async def resolve(self, host: str) -> DnsCheck:
        clean = (host or "").strip().lower().rstrip(".")
        if not clean:
            return DnsCheck(host=clean, is_valid=False, error="missing_host")
        cached = self._cache.get(clean)
        if isinstance(cached, DnsCheck):
            return cached
        loop = asyncio.get_running_loop()
        try:
            infos = await loop.getaddrinfo(clean, None, type=socket.SOCK_STREAM)
        except (socket.gaierror, UnicodeError) as exc:
            result = DnsCheck(host=clean, is_valid=False, error=str(exc) or "dns_resolution_failed")
        else:
            addresses = tuple(dict.fromkeys(str(entry[4][0]) for entry in infos))
            result = DnsCheck(host=clean, is_valid=bool(addresses), addresses=addresses)
        self._cache.set(clean, result)
        return result
