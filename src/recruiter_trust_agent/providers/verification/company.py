"""Company legitimacy channel: Clearbit domain lookup plus a guarded website scrape."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from html.parser import HTMLParser
import logging
from typing import Any
from urllib.parse import urljoin

import httpx

from recruiter_trust_agent.core.errors import describe_error
from recruiter_trust_agent.core.security import SecurityPolicy, is_configured_key
from recruiter_trust_agent.domain.results import ChannelCheck
from recruiter_trust_agent.domain.subject import Subject, is_valid_website, website_host
from recruiter_trust_agent.providers.verification.base import (
    API_CONFIDENCE,
    FALLBACK_CONFIDENCE,
    HEURISTIC_CONFIDENCE,
    VerificationProvider,
)
from recruiter_trust_agent.providers.verification.dns import DnsResolver

logger = logging.getLogger(__name__)

_REDIRECT_STATUSES = {301, 302, 303, 307, 308}
_SOCIAL_HOSTS = {
    "linkedin": "linkedin.com",
    "twitter": "twitter.com",
    "facebook": "facebook.com",
}


class ScrapeBlockedError(RuntimeError):
    pass


class _PageFeatureParser(HTMLParser):
    def __init__(self) -> None:
        super().__init__()
        self.title = ""
        self.description = ""
        self.hrefs: list[str] = []
        self._in_title = False

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        lower = tag.lower()
        attr_map = {k.lower(): (v or "") for k, v in attrs}
        if lower == "title":
            self._in_title = True
        elif lower == "meta" and attr_map.get("name", "").lower() == "description":
            if not self.description:
                self.description = " ".join(attr_map.get("content", "").split())[:300]
        elif lower == "a":
            href = attr_map.get("href", "").strip().lower()
            if href:
                self.hrefs.append(href)

    def handle_data(self, data: str) -> None:
        clean = " ".join(data.split())
        if clean and self._in_title and not self.title:
            self.title = clean[:160]

    def handle_endtag(self, tag: str) -> None:
        if tag.lower() == "title":
            self._in_title = False

    def links_to(self, token: str) -> bool:
        return any(token in href for href in self.hrefs)


@dataclass
class WebsiteFeatures:
    status_code: int
    final_url: str
    title: str = ""
    description: str = ""
    has_contact_page: bool = False
    has_about_page: bool = False
    has_privacy_policy: bool = False
    has_terms_of_service: bool = False
    social_links: dict[str, bool] = field(default_factory=dict)
    content_length: int = 0
    is_ssl: bool = False
    truncated: bool = False
    redirect_chain: list[str] = field(default_factory=list)


def parse_website_features(html: str, *, final_url: str, status_code: int) -> WebsiteFeatures:
    parser = _PageFeatureParser()
    parser.feed(html)
    parser.close()
    return WebsiteFeatures(
        status_code=status_code,
        final_url=final_url,
        title=parser.title,
        description=parser.description,
        has_contact_page=parser.links_to("contact"),
        has_about_page=parser.links_to("about"),
        has_privacy_policy=parser.links_to("privacy"),
        has_terms_of_service=parser.links_to("terms"),
        social_links={name: parser.links_to(host) for name, host in _SOCIAL_HOSTS.items()},
        content_length=len(html),
        is_ssl=final_url.lower().startswith("https://"),
    )


def score_company(
    company_name: str,
    clearbit: dict[str, Any] | None,
    website: WebsiteFeatures | None,
) -> tuple[int, bool]:
    score = 40
    valid = False
    if clearbit is not None:
        valid = True
        score = 85
        name = str(clearbit.get("name") or "").lower()
        if name and company_name.strip() and company_name.strip().lower() in name:
            score += 10
    if website is not None:
        valid = True
        if clearbit is None:
            score = 60
        if website.has_contact_page:
            score += 5
        if website.has_about_page:
            score += 5
        if website.has_privacy_policy:
            score += 3
        if website.is_ssl:
            score += 5
        if website.social_links.get("linkedin"):
            score += 8
        if website.social_links.get("twitter") or website.social_links.get("facebook"):
            score += 3
        if website.content_length > 5000:
            score += 5
    return min(100, score), valid


class CompanyVerificationProvider(VerificationProvider):
    channel = "company"

    def __init__(
        self,
        client: httpx.AsyncClient,
        resolver: DnsResolver,
        *,
        api_key: str | None = None,
        base_url: str = "https://company.clearbit.com/v1",
        policy: SecurityPolicy | None = None,
    ) -> None:
        self._client = client
        self._resolver = resolver
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._policy = policy or SecurityPolicy()

    @property
    def configured(self) -> bool:
        return is_configured_key(self._api_key)

    async def verify(self, subject: Subject) -> ChannelCheck:
        website_url = subject.website_url
        has_site = is_valid_website(website_url)
        detail: dict[str, Any] = {}
        clearbit: dict[str, Any] | None = None
        website: WebsiteFeatures | None = None

        if has_site and self.configured:
            try:
                clearbit = await self.lookup_clearbit(website_host(website_url))
            except (httpx.HTTPError, ValueError) as exc:
                logger.warning("Clearbit lookup failed, continuing with website scrape: %s", describe_error(exc))
                detail["clearbit_error"] = describe_error(exc)
        elif has_site:
            logger.debug("Clearbit API key not configured, skipping Clearbit lookup")

        if has_site:
            try:
                website = await self.scrape_website(website_url)
            except (httpx.HTTPError, ScrapeBlockedError) as exc:
                logger.warning("Website scrape failed: %s", describe_error(exc))
                detail["scrape_error"] = describe_error(exc)

        score, valid = score_company(subject.company_name, clearbit, website)
        if clearbit is not None:
            metrics = clearbit.get("metrics") if isinstance(clearbit.get("metrics"), dict) else {}
            category = clearbit.get("category") if isinstance(clearbit.get("category"), dict) else {}
            detail["clearbit"] = {
                "name": clearbit.get("name"),
                "domain": clearbit.get("domain"),
                "founded": clearbit.get("foundedYear"),
                "employees": metrics.get("employees"),
                "industry": category.get("industry"),
            }
        if website is not None:
            detail["website"] = asdict(website)
            detail["social_presence"] = dict(website.social_links)
        if not has_site:
            detail["reason"] = "Website URL not provided"

        return self.result(
            score=score,
            valid=valid,
            confidence=API_CONFIDENCE if clearbit is not None else HEURISTIC_CONFIDENCE,
            provider="clearbit+scraping" if clearbit is not None else "scraping",
            detail=detail,
            api_called=clearbit is not None,
        )

    async def fallback(self, subject: Subject, error: str) -> ChannelCheck | None:
        return self.result(
            score=30,
            valid=False,
            confidence=FALLBACK_CONFIDENCE,
            provider="verification-fallback",
            error=error,
            fallback=True,
        )

    async def lookup_clearbit(self, domain: str) -> dict[str, Any]:
        response = await self._client.get(
            f"{self._base_url}/domains/find",
            params={"domain": domain},
            headers={"Authorization": f"Bearer {self._api_key}"},
        )
        response.raise_for_status()
        data = response.json()
        if not isinstance(data, dict):
            raise ValueError("Clearbit response is not an object")
        return data

    async def _check_target(self, url: str) -> None:
        if not is_valid_website(url):
            raise ScrapeBlockedError("unsupported_scheme")
        if self._policy.allow_private_network:
            return
        dns = await self._resolver.resolve(website_host(url))
        if not dns.is_valid:
            raise ScrapeBlockedError("dns_resolution_failed")
        if dns.is_private:
            raise ScrapeBlockedError("private_network_blocked")

    async def scrape_website(self, url: str) -> WebsiteFeatures:
        """Fetch a page with manual redirect handling, re-checking every hop."""

        policy = self._policy
        current = url.strip()
        redirect_chain: list[str] = []
        await self._check_target(current)
        for _ in range(policy.max_redirects + 1):
            async with self._client.stream(
                "GET",
                current,
                headers={"User-Agent": policy.user_agent},
                timeout=policy.scrape_timeout_s,
                follow_redirects=False,
            ) as response:
                location = response.headers.get("Location")
                if location and response.status_code in _REDIRECT_STATUSES:
                    current = urljoin(current, location)
                    redirect_chain.append(current)
                    await self._check_target(current)
                    continue
                response.raise_for_status()
                body, truncated = await _read_body(response, policy.max_response_bytes)
                encoding = response.encoding or "utf-8"
                html = body.decode(encoding, errors="replace")
                features = parse_website_features(html, final_url=current, status_code=response.status_code)
                features.truncated = truncated
                features.redirect_chain = redirect_chain
                return features
        raise ScrapeBlockedError("too_many_redirects")

    async def check_connection(self) -> dict[str, Any]:
        if not self.configured:
            return {"status": "not_configured", "message": "API key not provided"}
        try:
            await self.lookup_clearbit("clearbit.com")
        except (httpx.HTTPError, ValueError) as exc:
            return {"status": "error", "message": describe_error(exc)}
        return {"status": "success", "message": "Connected successfully"}


async def _read_body(response: httpx.Response, max_bytes: int) -> tuple[bytes, bool]:
    chunks: list[bytes] = []
    total = 0
    truncated = False
    async for block in response.aiter_bytes():
        chunks.append(block)
        total += len(block)
        if total > max_bytes:
            truncated = True
            break
    data = b"".join(chunks)
    if truncated:
        data = data[:max_bytes]
    return data, truncated
