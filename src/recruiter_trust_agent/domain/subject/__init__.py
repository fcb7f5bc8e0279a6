"""Subject domain model and attribute parsing."""

from recruiter_trust_agent.domain.subject.models import Subject
from recruiter_trust_agent.domain.subject.parse import (
    clean_phone,
    has_plausible_phone_digits,
    is_valid_email,
    is_valid_website,
    website_host,
)

__all__ = [
    "Subject",
    "clean_phone",
    "has_plausible_phone_digits",
    "is_valid_email",
    "is_valid_website",
    "website_host",
]
