"""Subject (recruiter profile) domain model."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _field(name: str) -> Any:
    return Field(default="", validation_alias=AliasChoices(name, _camel(name)))


class Subject(BaseModel):
    """Read-only recruiter profile submitted for verification."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(default="", validation_alias=AliasChoices("id", "subject_id", "recruiter_id", "recruiterId"))
    full_name: str = _field("full_name")
    company_name: str = _field("company_name")
    business_email: str = _field("business_email")
    phone_number: str = _field("phone_number")
    role: str = _field("role")
    industry: str = _field("industry")
    website_url: str = _field("website_url")

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, (list, dict, set, tuple)):
            return ""
        return str(value).strip()

    @property
    def email_domain(self) -> str:
        if "@" not in self.business_email:
            return ""
        return self.business_email.rsplit("@", 1)[1].strip().lower()

    def has_identity(self) -> bool:
        return bool(self.full_name or self.company_name or self.business_email)

    def prompt_fields(self) -> dict[str, str]:
        return {
            "Full Name": self.full_name,
            "Company": self.company_name,
            "Website": self.website_url,
            "Business Email": self.business_email,
            "Phone": self.phone_number,
            "Role": self.role,
            "Industry": self.industry,
        }
