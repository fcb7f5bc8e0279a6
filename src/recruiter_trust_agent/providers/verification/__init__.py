"""External verification channel providers."""

from recruiter_trust_agent.providers.verification.base import VerificationProvider
from recruiter_trust_agent.providers.verification.company import CompanyVerificationProvider
from recruiter_trust_agent.providers.verification.dns import DnsCheck, DnsResolver
from recruiter_trust_agent.providers.verification.domain import DomainVerificationProvider
from recruiter_trust_agent.providers.verification.email import EmailVerificationProvider
from recruiter_trust_agent.providers.verification.phone import PhoneVerificationProvider

__all__ = [
    "CompanyVerificationProvider",
    "DnsCheck",
    "DnsResolver",
    "DomainVerificationProvider",
    "EmailVerificationProvider",
    "PhoneVerificationProvider",
    "VerificationProvider",
]
