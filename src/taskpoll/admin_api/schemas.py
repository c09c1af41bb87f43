"""Request schemas for the admin API."""

from pydantic import BaseModel, Field, field_validator

__all__ = ["AuditJob"]


class AuditJob(BaseModel):
    """Parameters of a technical SEO audit crawl."""

    domain: str = Field(min_length=1, description="Domain to crawl")
    location: str | None = Field(None, description="Location name of the crawl")
    language: str | None = Field(None, description="Language name of the crawl")

    @field_validator("domain", mode="before")
    @classmethod
    def strip_domain(cls, value: object) -> object:
        """Strip surrounding whitespace from the domain."""
        return value.strip() if isinstance(value, str) else value
