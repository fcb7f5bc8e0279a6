import httpx
import pytest

from conftest import static_resolver
from recruiter_trust_agent.core.security import SecurityPolicy, is_configured_key
from recruiter_trust_agent.domain.subject import Subject
from recruiter_trust_agent.providers.verification import (
    CompanyVerificationProvider,
    DomainVerificationProvider,
    EmailVerificationProvider,
    PhoneVerificationProvider,
)
from recruiter_trust_agent.providers.verification.phone import NumverifyError

PUBLIC_HOSTS = {
    "acme-analytics.io": ("93.184.216.34",),
    "acme.xyz": ("93.184.216.35",),
    "www.nowhere.example": (),
}

LANDING_PAGE = """
<html><head><title>Acme Analytics | Hiring</title>
<meta name="description" content="Data teams, hired well."></head>
<body>
<a href="/about">About</a><a href="/contact-us">Contact</a>
<a href="https://www.linkedin.com/company/acme">LinkedIn</a>
</body></html>
"""


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def test_placeholder_keys_are_not_configured():
    assert is_configured_key("live-key-123")
    assert not is_configured_key("")
    assert not is_configured_key(None)
    assert not is_configured_key("your_hunter_api_key")
    assert not is_configured_key("demo_key")
    assert not is_configured_key("PLACEHOLDER")


@pytest.mark.asyncio
async def test_email_hunter_deliverable(legit_subject):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["email"] = request.url.params["email"]
        return httpx.Response(
            200,
            json={"data": {"result": "deliverable", "mx_records": True, "smtp_server": True, "smtp_check": True}},
        )

    async with _client(handler) as client:
        provider = EmailVerificationProvider(client, static_resolver(PUBLIC_HOSTS), api_key="live-key")
        check = await provider.verify(legit_subject)
    assert seen == {"path": "/v2/email-verifier", "email": "alice.johnson@acme-analytics.io"}
    assert check.score == 100
    assert check.valid is True
    assert check.api_called is True
    assert check.provider == "hunter.io"


@pytest.mark.asyncio
async def test_email_without_key_uses_dns_only(legit_subject):
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no HTTP call expected")

    async with _client(handler) as client:
        provider = EmailVerificationProvider(client, static_resolver(PUBLIC_HOSTS), api_key="your_key_here")
        check = await provider.verify(legit_subject)
        fallback = await provider.fallback(legit_subject, "timeout")
    assert check.score == 60
    assert check.provider == "dns-only"
    assert check.api_called is False
    assert fallback is not None
    assert fallback.score == 40
    assert fallback.fallback is True
    assert fallback.error == "timeout"


@pytest.mark.asyncio
async def test_email_invalid_format_is_definitive():
    async with _client(lambda request: httpx.Response(500)) as client:
        provider = EmailVerificationProvider(client, static_resolver({}), api_key="live-key")
        check = await provider.verify(Subject(business_email="nobody"))
        fallback = await provider.fallback(Subject(business_email="nobody"), "boom")
    assert check.score == 0
    assert check.valid is False
    assert fallback is None


@pytest.mark.asyncio
async def test_email_http_error_raises_for_the_aggregator(legit_subject):
    async with _client(lambda request: httpx.Response(503)) as client:
        provider = EmailVerificationProvider(client, static_resolver(PUBLIC_HOSTS), api_key="live-key")
        with pytest.raises(httpx.HTTPStatusError):
            await provider.verify(legit_subject)


@pytest.mark.asyncio
async def test_phone_numverify_valid_mobile(legit_subject):
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["access_key"] == "nv-key"
        return httpx.Response(200, json={"valid": True, "line_type": "mobile", "carrier": "AT&T"})

    async with _client(handler) as client:
        check = await PhoneVerificationProvider(client, api_key="nv-key").verify(legit_subject)
    assert check.score == 95
    assert check.detail["numverify"]["carrier"] == "AT&T"


@pytest.mark.asyncio
async def test_phone_numverify_error_payload_raises(legit_subject):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"success": False, "error": {"code": 101, "info": "invalid access key"}})

    async with _client(handler) as client:
        provider = PhoneVerificationProvider(client, api_key="nv-key")
        with pytest.raises(NumverifyError, match="invalid access key"):
            await provider.verify(legit_subject)
        fallback = await provider.fallback(legit_subject, "invalid access key")
    assert fallback is not None
    assert fallback.score == 30


@pytest.mark.asyncio
async def test_phone_without_key_checks_digits():
    async with _client(lambda request: httpx.Response(500)) as client:
        provider = PhoneVerificationProvider(client)
        good = await provider.verify(Subject(phone_number="+44 20 7946 0958"))
        bad = await provider.verify(Subject(phone_number="555-01"))
        missing = await provider.verify(Subject())
    assert good.score == 50
    assert bad.score == 20
    assert missing.score == 0


@pytest.mark.asyncio
async def test_company_scrape_only(legit_subject):
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.host == "acme-analytics.io"
        return httpx.Response(200, text=LANDING_PAGE, headers={"Content-Type": "text/html; charset=utf-8"})

    async with _client(handler) as client:
        provider = CompanyVerificationProvider(client, static_resolver(PUBLIC_HOSTS))
        check = await provider.verify(legit_subject)
    assert check.valid is True
    assert check.provider == "scraping"
    assert check.score == 60 + 5 + 5 + 5 + 8
    assert check.detail["website"]["title"] == "Acme Analytics | Hiring"
    assert check.detail["social_presence"]["linkedin"] is True


@pytest.mark.asyncio
async def test_company_with_clearbit_name_match(legit_subject):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "company.clearbit.com":
            assert request.headers["Authorization"] == "Bearer cb-key"
            return httpx.Response(200, json={"name": "Acme Analytics Inc", "domain": "acme-analytics.io"})
        return httpx.Response(200, text="<html><title>Acme</title></html>")

    async with _client(handler) as client:
        provider = CompanyVerificationProvider(client, static_resolver(PUBLIC_HOSTS), api_key="cb-key")
        check = await provider.verify(legit_subject)
    assert check.api_called is True
    assert check.provider == "clearbit+scraping"
    assert check.score == 100
    assert check.detail["clearbit"]["name"] == "Acme Analytics Inc"


@pytest.mark.asyncio
async def test_company_never_fetches_private_hosts():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("private host must not be fetched")

    subject = Subject(company_name="Intranet", website_url="http://intranet.local")
    async with _client(handler) as client:
        provider = CompanyVerificationProvider(client, static_resolver({"intranet.local": ("10.0.0.5",)}))
        check = await provider.verify(subject)
    assert check.score == 40
    assert check.valid is False
    assert check.detail["scrape_error"] == "private_network_blocked"


@pytest.mark.asyncio
async def test_company_redirect_to_private_host_is_blocked(legit_subject):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(302, headers={"Location": "http://127.0.0.1/admin"})

    resolver = static_resolver({**PUBLIC_HOSTS, "127.0.0.1": ("127.0.0.1",)})
    async with _client(handler) as client:
        provider = CompanyVerificationProvider(client, resolver, policy=SecurityPolicy(max_redirects=2))
        check = await provider.verify(legit_subject)
    assert check.detail["scrape_error"] == "private_network_blocked"


@pytest.mark.asyncio
async def test_domain_scoring():
    provider = DomainVerificationProvider(static_resolver(PUBLIC_HOSTS))
    clean = await provider.verify(Subject(website_url="https://acme-analytics.io"))
    risky = await provider.verify(Subject(website_url="https://acme.xyz"))
    unresolved = await provider.verify(Subject(website_url="http://www.nowhere.example"))
    invalid = await provider.verify(Subject(website_url="acme"))
    assert clean.score == 85
    assert risky.score == 70
    assert "risky_tld" in risky.detail["indicators"]
    assert unresolved.score == 20
    assert unresolved.valid is False
    assert invalid.score == 0
    fallback = await provider.fallback(Subject(), "boom")
    assert fallback is not None
    assert fallback.score == 10
