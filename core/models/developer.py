# =============================================================================
# core/models/developer.py - Developer Schemas
# =============================================================================
# Input contracts for developer (real-estate company) writes. Cities are
# persisted as rows of the developer_cities relation table.
# =============================================================================

from pydantic import BaseModel, Field


class DeveloperCreate(BaseModel):
    """
    Schema for creating a developer.

    Example:
        {
            "name": "Emaar Properties",
            "email": "sales@example.com",
            "cities": ["Dubai", "Abu Dhabi"],
            "active": true
        }
    """

    name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Company name"
    )

    slug: str | None = Field(
        default=None,
        max_length=255,
        description="Explicit slug; derived from the name when omitted"
    )

    email: str | None = None
    phone: str | None = None
    website: str | None = None
    about: str | None = None
    country: str | None = None
    logo_url: str | None = None
    active: bool = True

    cities: list[str] = Field(
        default_factory=list,
        description="City labels the developer operates in"
    )


class DeveloperUpdate(BaseModel):
    """
    Schema for patching a developer.

    Unset fields are left untouched. A null `logo_url` or `remove_logo`
    clears the logo; `remove_logo` wins over a replacement. `cities`, when
    set, replaces the whole city list.
    """

    name: str | None = Field(default=None, min_length=1, max_length=255)
    slug: str | None = Field(default=None, max_length=255)
    email: str | None = None
    phone: str | None = None
    website: str | None = None
    about: str | None = None
    country: str | None = None
    logo_url: str | None = None
    active: bool | None = None
    cities: list[str] | None = None

    remove_logo: bool = False
