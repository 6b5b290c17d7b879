# =============================================================================
# core/models/project.py - Project Schemas
# =============================================================================
# Input contracts for project writes:
# - ProjectCreate: full payload for a new listing
# - ProjectUpdate: partial patch (unset fields are left untouched)
#
# Array fields are accepted loosely here and normalized by the repository
# (amenity shape, duplicate references) right before persistence.
# =============================================================================

from datetime import date
from typing import Any

from pydantic import BaseModel, Field


class ProjectCreate(BaseModel):
    """
    Schema for creating a project.

    Example:
        {
            "title": "Lake View",
            "location": "Dubai Marina",
            "status": true,
            "amenities": [{"title": "Pool"}],
            "hero_image": "https://.../hero-images/abc-front.jpg"
        }
    """

    title: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Human-readable project name"
    )

    # Derived from the title when omitted
    slug: str | None = Field(
        default=None,
        max_length=255,
        description="Explicit slug; made unique before insert"
    )

    description: str = Field(default="")
    category_id: str | None = Field(default=None)
    location: str = Field(default="")
    start_date: date | None = Field(default=None)
    end_date: date | None = Field(default=None)

    status: bool = Field(
        default=False,
        description="Whether the project is active (publicly listed)"
    )

    amenities: list[Any] = Field(
        default_factory=list,
        description="Amenity records; coerced to {title, description, imageUrl}"
    )

    meta: dict[str, Any] = Field(
        default_factory=dict,
        description="Free-form key/value data (prices, SEO fields, ...)"
    )

    hero_image: str | None = Field(default=None)
    images: list[str] = Field(default_factory=list)
    documents: list[str] = Field(default_factory=list)


class ProjectUpdate(BaseModel):
    """
    Schema for patching a project.

    Only fields that were explicitly set take part in the update. A null
    `hero_image` clears the hero image; null for any other field is ignored.
    `remove_hero` clears the hero image and wins over a replacement sent in
    the same request.

    `images` / `documents`, when set, are the complete desired lists; files
    dropped from them are deleted from storage.
    """

    title: str | None = Field(default=None, min_length=1, max_length=255)
    slug: str | None = Field(default=None, max_length=255)
    description: str | None = None
    category_id: str | None = None
    location: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    status: bool | None = None
    amenities: list[Any] | None = None
    meta: dict[str, Any] | None = None
    hero_image: str | None = None
    images: list[str] | None = None
    documents: list[str] | None = None

    remove_hero: bool = Field(
        default=False,
        description="Clear the hero image (takes precedence over a new one)"
    )
