# =============================================================================
# app/routers/developers.py - Developer Admin Endpoints
# =============================================================================
# CRUD for developers (real-estate companies). Create/update are multipart so
# a logo file can travel with the fields. `cities` may be sent as a JSON
# array or as a comma-separated string.
# =============================================================================

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Body, File, Form, Path, Query, UploadFile
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, Field, ValidationError

from app.config import settings
from app.dependencies import DeveloperServiceDep, StorageDep
from app.exceptions import DeveloperNotFoundError
from app.uploads import read_upload
from core.models.common import DeleteResult, ListResult, MutationResult
from core.models.developer import DeveloperCreate, DeveloperUpdate
from lib.utils import decode_json, to_bool

logger = logging.getLogger(__name__)

router = APIRouter()


class StatusRequest(BaseModel):
    """Set the active flag explicitly; omit it to toggle."""
    active: bool | None = Field(
        default=None,
        description="New active flag. When omitted the current flag is flipped."
    )


# =============================================================================
# Helper Functions
# =============================================================================

def parse_cities(raw: str | None) -> list[str] | None:
    """
    Parse the `cities` form field.

    Accepts a JSON array ('["Dubai", "Sharjah"]') or a comma-separated
    string ("Dubai, Sharjah"). None means the field was not sent.
    """
    if raw is None:
        return None

    decoded = decode_json(raw, None)
    if isinstance(decoded, list):
        return [str(city) for city in decoded if city is not None]
    return [part for part in raw.split(",") if part.strip()]


def _validated(model: type[BaseModel], data: dict[str, Any]) -> Any:
    try:
        return model(**data)
    except ValidationError as e:
        raise RequestValidationError(e.errors())


async def _upload_logo(service, storage, logo: UploadFile | None) -> str | None:
    """Store a logo file and return its URL, or None if no file was sent."""
    if logo is None or not logo.filename:
        return None
    upload = await read_upload(logo)
    return storage.upload(
        service.config.bucket,
        service.config.logo_folder,
        upload.content,
        upload.filename,
        upload.content_type,
    )


# =============================================================================
# Endpoints
# =============================================================================

@router.get("", response_model=ListResult)
async def list_developers(
    service: DeveloperServiceDep,
    name: Annotated[str, Query(description="Case-insensitive name filter")] = "",
    city: Annotated[str, Query(description="Case-insensitive city filter")] = "",
    active: Annotated[bool | None, Query(description="Filter by active flag")] = None,
    page: Annotated[int, Query()] = 1,
    limit: Annotated[int, Query()] = settings.DEFAULT_PAGE_SIZE,
):
    """List developers with filters and pagination."""
    return service.list(
        name=name,
        city=city,
        active=active,
        page=page,
        limit=limit,
    )


@router.get("/{developer_id}")
async def get_developer(
    developer_id: Annotated[str, Path(description="Developer id")],
    service: DeveloperServiceDep,
):
    """Get a developer (with cities) by id."""
    developer = service.get_by_id(developer_id)
    if developer is None:
        raise DeveloperNotFoundError(developer_id)
    return developer


@router.post("", response_model=MutationResult, status_code=201)
async def create_developer(
    service: DeveloperServiceDep,
    storage: StorageDep,
    name: Annotated[str, Form()],
    slug: Annotated[str | None, Form()] = None,
    email: Annotated[str | None, Form()] = None,
    phone: Annotated[str | None, Form()] = None,
    website: Annotated[str | None, Form()] = None,
    about: Annotated[str | None, Form()] = None,
    country: Annotated[str | None, Form()] = None,
    active: Annotated[str | None, Form()] = None,
    cities: Annotated[str | None, Form(description="JSON array or comma-separated list")] = None,
    logo: Annotated[UploadFile | None, File()] = None,
):
    """
    Create a developer (multipart).

    City links are written after the developer; if that fails the
    developer still exists and the failure is listed in `warnings`.
    """
    payload = {
        "name": name,
        "slug": slug or None,
        "email": email,
        "phone": phone,
        "website": website,
        "about": about,
        "country": country,
        "active": True if active is None else to_bool(active),
        "cities": parse_cities(cities) or [],
    }
    _validated(DeveloperCreate, payload)

    payload["logo_url"] = await _upload_logo(service, storage, logo)
    result = service.insert(_validated(DeveloperCreate, payload))
    return result


@router.put("/{developer_id}", response_model=MutationResult)
async def update_developer(
    developer_id: Annotated[str, Path(description="Developer id")],
    service: DeveloperServiceDep,
    storage: StorageDep,
    name: Annotated[str | None, Form()] = None,
    slug: Annotated[str | None, Form()] = None,
    email: Annotated[str | None, Form()] = None,
    phone: Annotated[str | None, Form()] = None,
    website: Annotated[str | None, Form()] = None,
    about: Annotated[str | None, Form()] = None,
    country: Annotated[str | None, Form()] = None,
    active: Annotated[str | None, Form()] = None,
    cities: Annotated[str | None, Form(description="JSON array or comma-separated list")] = None,
    remove_logo: Annotated[str | None, Form(description="'true' clears the logo")] = None,
    logo: Annotated[UploadFile | None, File()] = None,
):
    """
    Update a developer (multipart, partial).

    `cities`, when sent, replaces the whole city list. `remove_logo=true`
    clears the logo and wins over a new `logo` file.
    """
    patch: dict[str, Any] = {
        key: value
        for key, value in {
            "name": name,
            "slug": slug,
            "email": email,
            "phone": phone,
            "website": website,
            "about": about,
            "country": country,
            "cities": parse_cities(cities),
        }.items()
        if value is not None
    }
    if active is not None:
        patch["active"] = to_bool(active)
    patch["remove_logo"] = to_bool(remove_logo)
    _validated(DeveloperUpdate, patch)

    if service.get_by_id(developer_id) is None:
        raise DeveloperNotFoundError(developer_id)

    if not patch["remove_logo"]:
        logo_url = await _upload_logo(service, storage, logo)
        if logo_url:
            patch["logo_url"] = logo_url

    result = service.update(developer_id, _validated(DeveloperUpdate, patch))
    if result is None:
        raise DeveloperNotFoundError(developer_id)
    return result


@router.patch("/{developer_id}/status")
async def update_developer_status(
    developer_id: Annotated[str, Path(description="Developer id")],
    service: DeveloperServiceDep,
    request: Annotated[StatusRequest | None, Body()] = None,
):
    """Set or toggle a developer's active flag."""
    if request is not None and request.active is not None:
        updated = service.set_status(developer_id, request.active)
    else:
        updated = service.toggle_status(developer_id)

    if updated is None:
        raise DeveloperNotFoundError(developer_id)
    return updated


@router.delete("/{developer_id}", response_model=DeleteResult)
async def delete_developer(
    developer_id: Annotated[str, Path(description="Developer id")],
    service: DeveloperServiceDep,
):
    """Delete a developer, its logo and its city links."""
    result = service.remove(developer_id)
    if result is None:
        raise DeveloperNotFoundError(developer_id)
    return result
