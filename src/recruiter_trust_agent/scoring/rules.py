"""Deterministic heuristic scoring over recruiter profile attributes."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import re
import time
from urllib.parse import urlparse

from recruiter_trust_agent.core.logging_config import elapsed_ms
from recruiter_trust_agent.domain.results import PartialResult, RuleFlag
from recruiter_trust_agent.domain.subject import Subject, clean_phone, is_valid_email, is_valid_website
from recruiter_trust_agent.scoring.rounding import round_half_up

logger = logging.getLogger(__name__)

SUSPICIOUS_COMPANY_KEYWORDS = (
    "fake",
    "scam",
    "test",
    "xxx",
    "123",
    "temp",
    "sample",
    "demo",
    "placeholder",
    "example",
    "null",
    "undefined",
)
PLACEHOLDER_NAMES = ("test", "fake", "asdf", "qwerty", "john doe", "jane doe")
SENIOR_ROLE_KEYWORDS = ("ceo", "founder", "owner", "president", "vp", "director")
HIGH_RISK_INDUSTRIES = ("adult", "gambling", "cryptocurrency", "mlm", "pyramid")
FREE_EMAIL_PROVIDERS = frozenset(
    {
        "gmail.com",
        "yahoo.com",
        "hotmail.com",
        "outlook.com",
        "protonmail.com",
        "mail.com",
        "10minutemail.com",
        "tempmail.org",
        "guerrillamail.com",
    }
)
GENERIC_COMPANY_NAMES = ("company", "business", "corp", "inc", "ltd", "llc")
VAGUE_INDUSTRIES = frozenset({"other", "various", "multiple", "general"})

_SPAM_EMAIL_PATTERNS = (
    re.compile(r"^[a-z]+[0-9]{3,}@", re.IGNORECASE),
    re.compile(r"^(?:test|admin|info|contact)\d*@", re.IGNORECASE),
    re.compile(r"noreply|no-reply|donotreply", re.IGNORECASE),
)
_SPAM_PHONE_PATTERNS = (
    re.compile(r"^(?:\+?1)?0{3,}"),
    re.compile(r"^(?:\+?1)?1{3,}"),
    re.compile(r"^(?:\+?1)?9{3,}"),
)
_SPAM_WEBSITE_PATTERNS = (
    re.compile(r"localhost", re.IGNORECASE),
    re.compile(r"192\.168\."),
    re.compile(r"127\.0\.0\.1"),
    re.compile(r"example\.(?:com|org|net)", re.IGNORECASE),
    re.compile(r"test\.(?:com|org|net)", re.IGNORECASE),
)
_TRAILING_DIGITS = re.compile(r"\d{3,}$")

CATEGORY_WEIGHTS: dict[str, float] = {
    "keywords": 0.25,
    "email": 0.20,
    "website": 0.20,
    "phone": 0.15,
    "company": 0.15,
    "industry": 0.05,
}
SEVERITY_PENALTY: dict[str, int] = {"high": 5, "medium": 2, "low": 1}


@dataclass
class CategoryScore:
    score: int
    flags: list[RuleFlag] = field(default_factory=list)

    def penalize(self, flag_type: str, severity: str, message: str, impact: int) -> None:
        self.flags.append(RuleFlag(type=flag_type, severity=severity, message=message, impact=-impact))
        self.score -= impact

    def floored(self) -> "CategoryScore":
        self.score = max(0, self.score)
        return self


def check_keywords(subject: Subject) -> CategoryScore:
    result = CategoryScore(score=85)
    company = subject.company_name.lower()
    for keyword in SUSPICIOUS_COMPANY_KEYWORDS:
        if keyword in company:
            result.penalize(
                "suspicious_company_keyword",
                "high",
                f'Company name contains suspicious keyword: "{keyword}"',
                15,
            )
    name = subject.full_name.lower()
    for placeholder in PLACEHOLDER_NAMES:
        if placeholder in name:
            result.penalize(
                "placeholder_name",
                "high",
                f'Full name looks like a placeholder: "{subject.full_name}"',
                15,
            )
    role = subject.role.lower()
    for keyword in SENIOR_ROLE_KEYWORDS:
        if re.search(rf"\b{re.escape(keyword)}\b", role):
            result.penalize("senior_role_flag", "medium", f'Role appears very senior: "{subject.role}"', 5)
    industry = subject.industry.lower()
    for keyword in HIGH_RISK_INDUSTRIES:
        if keyword in industry:
            result.penalize(
                "high_risk_industry",
                "high",
                f'Industry flagged as high-risk: "{subject.industry}"',
                20,
            )
    return result.floored()


def analyze_email(email: str) -> CategoryScore:
    if not is_valid_email(email):
        result = CategoryScore(score=30)
        result.flags.append(RuleFlag(type="invalid_email", severity="high", message="Invalid email format", impact=-50))
        return result

    result = CategoryScore(score=80)
    domain = email.rsplit("@", 1)[1].lower()
    if domain in FREE_EMAIL_PROVIDERS:
        result.penalize(
            "free_email_provider",
            "medium",
            "Using free email provider instead of business domain",
            10,
        )
    for pattern in _SPAM_EMAIL_PATTERNS:
        if pattern.search(email):
            result.penalize("spam_email_pattern", "high", "Email matches spam pattern", 25)
    if len(domain) < 4 or len(domain) > 50:
        result.penalize("suspicious_domain_length", "medium", "Domain name has unusual length", 5)
    return result.floored()


def analyze_website(website_url: str) -> CategoryScore:
    if not is_valid_website(website_url):
        result = CategoryScore(score=45)
        result.flags.append(
            RuleFlag(
                type="invalid_website_url",
                severity="high",
                message="Invalid or missing website URL",
                impact=-30,
            )
        )
        return result

    try:
        parsed = urlparse(website_url.strip())
        host = (parsed.hostname or "").lower()
    except ValueError:
        result = CategoryScore(score=65)
        result.flags.append(
            RuleFlag(
                type="website_analysis_error",
                severity="medium",
                message="Could not analyze website",
                impact=-10,
            )
        )
        return result

    result = CategoryScore(score=75)
    for pattern in _SPAM_WEBSITE_PATTERNS:
        if pattern.search(website_url):
            result.penalize("spam_website_pattern", "high", "Website URL matches spam pattern", 25)
    if parsed.scheme == "https":
        result.score += 5
    else:
        result.penalize("no_https", "low", "Website does not use HTTPS", 5)
    if len(host) < 4:
        result.penalize("domain_too_short", "medium", "Website domain is very short", 10)
    if len(host.split(".")) > 4:
        result.penalize("too_many_subdomains", "medium", "Website has many subdomains", 5)
    return result.floored()


def analyze_phone(phone_number: str) -> CategoryScore:
    if not phone_number:
        result = CategoryScore(score=65)
        result.flags.append(
            RuleFlag(type="missing_phone", severity="medium", message="Phone number is missing", impact=-15)
        )
        return result

    result = CategoryScore(score=80)
    cleaned = clean_phone(phone_number)
    if len(cleaned) < 10 or len(cleaned) > 15:
        result.penalize("invalid_phone_length", "medium", "Phone number has invalid length", 10)
    for pattern in _SPAM_PHONE_PATTERNS:
        if pattern.search(phone_number):
            result.penalize("spam_phone_pattern", "high", "Phone number matches spam pattern", 20)
    if cleaned:
        max_repeats = max(cleaned.count(char) for char in set(cleaned))
        if max_repeats > 5:
            result.penalize("repeated_digits", "medium", "Phone number has too many repeated digits", 15)
    return result.floored()


def analyze_company_name(company_name: str) -> CategoryScore:
    if len(company_name.strip()) < 2:
        result = CategoryScore(score=55)
        result.flags.append(
            RuleFlag(
                type="invalid_company_name",
                severity="high",
                message="Company name is too short or missing",
                impact=-30,
            )
        )
        return result

    result = CategoryScore(score=85)
    lowered = company_name.strip().lower()
    if _TRAILING_DIGITS.search(lowered):
        result.penalize("company_name_with_many_numbers", "medium", "Company name ends with many numbers", 10)
    if any(lowered == generic or lowered.startswith(f"{generic} ") for generic in GENERIC_COMPANY_NAMES):
        result.penalize("generic_company_name", "medium", "Company name is very generic", 5)
    if company_name == company_name.upper() and len(company_name) > 10:
        result.penalize("excessive_caps", "low", "Company name is all capitals", 3)
    return result.floored()


def analyze_industry(industry: str) -> CategoryScore:
    if len(industry.strip()) < 2:
        result = CategoryScore(score=80)
        result.flags.append(
            RuleFlag(
                type="missing_industry",
                severity="medium",
                message="Industry information is missing or too short",
                impact=-10,
            )
        )
        return result

    result = CategoryScore(score=90)
    if industry.strip().lower() in VAGUE_INDUSTRIES:
        result.penalize("vague_industry", "low", "Industry description is vague", 5)
    return result.floored()


def combine_category_scores(categories: dict[str, CategoryScore]) -> int:
    weighted_sum = 0.0
    total_weight = 0.0
    for name, weight in CATEGORY_WEIGHTS.items():
        category = categories.get(name)
        if category is None:
            continue
        weighted_sum += category.score * weight
        total_weight += weight
    base = weighted_sum / total_weight if total_weight > 0 else 50.0
    penalty = sum(
        SEVERITY_PENALTY.get(flag.severity, 1) for category in categories.values() for flag in category.flags
    )
    return round_half_up(max(0.0, min(100.0, base - penalty)))


class RuleEngine:
    """Pure rule evaluator: never performs I/O and never raises on profile content."""

    def evaluate(self, subject: Subject) -> PartialResult:
        started = time.perf_counter()
        categories = {
            "keywords": check_keywords(subject),
            "email": analyze_email(subject.business_email),
            "website": analyze_website(subject.website_url),
            "phone": analyze_phone(subject.phone_number),
            "company": analyze_company_name(subject.company_name),
            "industry": analyze_industry(subject.industry),
        }
        score = combine_category_scores(categories)
        flags = [flag for category in categories.values() for flag in category.flags]
        latency_ms = elapsed_ms(started)
        logger.debug("Rule-based scoring completed score=%s flags=%d", score, len(flags))
        return PartialResult(
            source="rule_based",
            score=score,
            confidence=None,
            flags=[flag.type for flag in flags],
            details={
                "category_scores": {name: category.score for name, category in categories.items()},
                "flags": [flag.model_dump(mode="json") for flag in flags],
            },
            latency_ms=latency_ms,
        )
