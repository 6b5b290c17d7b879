# =============================================================================
# app/routers/projects.py - Project Admin Endpoints
# =============================================================================
# CRUD for projects. Create/update take multipart forms so files can be sent
# with the fields; structured fields (amenities, meta, existing_images,
# existing_documents) are JSON strings inside the form.
#
# Files are uploaded before the repository is called. An upload failure
# aborts the request.
# =============================================================================

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Body, File, Form, Path, Query, UploadFile
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, Field, ValidationError

from app.config import settings
from app.dependencies import ProjectServiceDep, StorageDep
from app.exceptions import InvalidPayloadError, NoFileUploadedError, ProjectNotFoundError
from app.uploads import read_upload, read_uploads
from core.models.common import DeleteResult, ListResult, MutationResult
from core.models.project import ProjectCreate, ProjectUpdate
from lib.utils import decode_json, to_bool

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Request Models
# =============================================================================

class StatusRequest(BaseModel):
    """Set the status explicitly; omit it to toggle."""
    status: bool | None = Field(
        default=None,
        description="New status. When omitted the current status is flipped."
    )


# =============================================================================
# Helper Functions
# =============================================================================

def _blank_to_none(value: str | None) -> str | None:
    return value if value not in (None, "") else None


_UNDECODABLE = object()


def _decode_required(field: str, raw: str) -> Any:
    """
    Decode a JSON form field on update.

    Malformed input raises InvalidPayloadError (422) instead of falling
    back to a default.
    """
    decoded = decode_json(raw, _UNDECODABLE)
    if decoded is _UNDECODABLE:
        raise InvalidPayloadError(field, "not valid JSON")
    return decoded


def _validated(model: type[BaseModel], data: dict[str, Any]) -> Any:
    """Build a model from form data, reporting errors like body validation."""
    try:
        return model(**data)
    except ValidationError as e:
        raise RequestValidationError(e.errors())


# =============================================================================
# Endpoints
# =============================================================================

@router.get("", response_model=ListResult)
async def list_projects(
    service: ProjectServiceDep,
    title: Annotated[str, Query(description="Case-insensitive title filter")] = "",
    status: Annotated[bool | None, Query(description="Filter by active status")] = None,
    page: Annotated[int, Query(description="Page number (values below 1 are treated as 1)")] = 1,
    limit: Annotated[int, Query(description="Items per page (clamped to the configured maximum)")] = settings.DEFAULT_PAGE_SIZE,
):
    """
    List projects with filters and pagination.

    `total` is the number of matching projects across all pages.
    """
    return service.list(title=title, status=status, page=page, limit=limit)


@router.get("/{project_id}")
async def get_project(
    project_id: Annotated[str, Path(description="Project id")],
    service: ProjectServiceDep,
):
    """Get a project by id."""
    project = service.get_by_id(project_id)
    if project is None:
        raise ProjectNotFoundError(project_id)
    return project


@router.post("", response_model=MutationResult, status_code=201)
async def create_project(
    service: ProjectServiceDep,
    storage: StorageDep,
    title: Annotated[str, Form()],
    slug: Annotated[str | None, Form()] = None,
    description: Annotated[str, Form()] = "",
    category_id: Annotated[str | None, Form()] = None,
    location: Annotated[str, Form()] = "",
    start_date: Annotated[str | None, Form()] = None,
    end_date: Annotated[str | None, Form()] = None,
    status: Annotated[str | None, Form()] = None,
    amenities: Annotated[str | None, Form(description="JSON array of amenities")] = None,
    meta: Annotated[str | None, Form(description="JSON object")] = None,
    hero_image: Annotated[UploadFile | None, File()] = None,
    images: Annotated[list[UploadFile] | None, File()] = None,
    documents: Annotated[list[UploadFile] | None, File()] = None,
):
    """
    Create a project (multipart).

    The slug is derived from the title unless `slug` is given, and is made
    unique. Uploaded files are stored before the project is written.
    """
    payload = {
        "title": title,
        "slug": _blank_to_none(slug),
        "description": description,
        "category_id": _blank_to_none(category_id),
        "location": location,
        "start_date": _blank_to_none(start_date),
        "end_date": _blank_to_none(end_date),
        "status": to_bool(status),
        "amenities": decode_json(amenities, []),
        "meta": decode_json(meta, {}),
    }
    # Validate before uploading anything
    _validated(ProjectCreate, payload)

    config = service.config
    hero_files = await read_uploads("hero_image", [hero_image] if hero_image else None)
    image_files = await read_uploads("images", images)
    document_files = await read_uploads("documents", documents)

    if hero_files:
        payload["hero_image"] = storage.upload(
            config.bucket,
            config.hero_folder,
            hero_files[0].content,
            hero_files[0].filename,
            hero_files[0].content_type,
        )
    payload["images"] = storage.upload_many(config.bucket, config.images_folder, image_files)
    payload["documents"] = storage.upload_many(config.bucket, config.documents_folder, document_files)

    result = service.insert(_validated(ProjectCreate, payload))
    return result


@router.put("/{project_id}", response_model=MutationResult)
async def update_project(
    project_id: Annotated[str, Path(description="Project id")],
    service: ProjectServiceDep,
    storage: StorageDep,
    title: Annotated[str | None, Form()] = None,
    slug: Annotated[str | None, Form()] = None,
    description: Annotated[str | None, Form()] = None,
    category_id: Annotated[str | None, Form()] = None,
    location: Annotated[str | None, Form()] = None,
    start_date: Annotated[str | None, Form()] = None,
    end_date: Annotated[str | None, Form()] = None,
    status: Annotated[str | None, Form()] = None,
    amenities: Annotated[str | None, Form(description="JSON array of amenities")] = None,
    meta: Annotated[str | None, Form(description="JSON object")] = None,
    existing_images: Annotated[str | None, Form(description="JSON array of image URLs to keep")] = None,
    existing_documents: Annotated[str | None, Form(description="JSON array of document URLs to keep")] = None,
    remove_hero: Annotated[str | None, Form(description="'true' clears the hero image")] = None,
    hero_image: Annotated[UploadFile | None, File()] = None,
    images: Annotated[list[UploadFile] | None, File()] = None,
    documents: Annotated[list[UploadFile] | None, File()] = None,
):
    """
    Update a project (multipart, partial).

    - Omitted fields are left unchanged.
    - New `images` / `documents` files are appended to the kept lists.
    - `existing_images` / `existing_documents` replace the stored lists;
      files dropped from them are deleted from storage.
    - `remove_hero=true` clears the hero image and wins over a new
      `hero_image` file (which is then not uploaded).
    """
    patch: dict[str, Any] = {
        key: value
        for key, value in {
            "title": title,
            "slug": slug,
            "description": description,
            "category_id": _blank_to_none(category_id),
            "location": location,
            "start_date": _blank_to_none(start_date),
            "end_date": _blank_to_none(end_date),
        }.items()
        if value is not None
    }
    if status is not None:
        patch["status"] = to_bool(status)
    # Empty values mean "not sent"; anything else must decode
    if amenities:
        patch["amenities"] = _decode_required("amenities", amenities)
    if meta:
        patch["meta"] = _decode_required("meta", meta)
    if existing_images:
        patch["images"] = _decode_required("existing_images", existing_images)
    if existing_documents:
        patch["documents"] = _decode_required("existing_documents", existing_documents)
    patch["remove_hero"] = to_bool(remove_hero)
    _validated(ProjectUpdate, patch)

    if service.get_by_id(project_id) is None:
        raise ProjectNotFoundError(project_id)

    config = service.config
    if hero_image is not None and hero_image.filename and not patch["remove_hero"]:
        hero = await read_upload(hero_image)
        patch["hero_image"] = storage.upload(
            config.bucket,
            config.hero_folder,
            hero.content,
            hero.filename,
            hero.content_type,
        )

    append_images = storage.upload_many(
        config.bucket,
        config.images_folder,
        await read_uploads("images", images),
    )
    append_documents = storage.upload_many(
        config.bucket,
        config.documents_folder,
        await read_uploads("documents", documents),
    )

    result = service.update(
        project_id,
        _validated(ProjectUpdate, patch),
        append_images=append_images,
        append_documents=append_documents,
    )
    if result is None:
        raise ProjectNotFoundError(project_id)
    return result


@router.patch("/{project_id}/status")
async def update_project_status(
    project_id: Annotated[str, Path(description="Project id")],
    service: ProjectServiceDep,
    request: Annotated[StatusRequest | None, Body()] = None,
):
    """
    Set or toggle a project's active status.

    Send {"status": true|false} to set it; an empty body flips it.
    """
    if request is not None and request.status is not None:
        updated = service.set_status(project_id, request.status)
    else:
        updated = service.toggle_status(project_id)

    if updated is None:
        raise ProjectNotFoundError(project_id)
    return updated


@router.delete("/{project_id}", response_model=DeleteResult)
async def delete_project(
    project_id: Annotated[str, Path(description="Project id")],
    service: ProjectServiceDep,
):
    """
    Delete a project and its files.

    File cleanup is best-effort; failures are listed in `warnings`.
    """
    result = service.remove(project_id)
    if result is None:
        raise ProjectNotFoundError(project_id)
    return result


# =============================================================================
# Standalone Uploads
# =============================================================================

@router.post("/upload/hero")
async def upload_hero_image(
    service: ProjectServiceDep,
    storage: StorageDep,
    hero_image: Annotated[UploadFile | None, File()] = None,
):
    """Upload a hero image and return its URL."""
    files = await read_uploads("hero_image", [hero_image] if hero_image else None)
    if not files:
        raise NoFileUploadedError("hero_image")

    config = service.config
    url = storage.upload(
        config.bucket,
        config.hero_folder,
        files[0].content,
        files[0].filename,
        files[0].content_type,
    )
    return {"url": url}


@router.post("/upload/images")
async def upload_project_images(
    service: ProjectServiceDep,
    storage: StorageDep,
    images: Annotated[list[UploadFile] | None, File()] = None,
):
    """Upload gallery images and return their URLs."""
    files = await read_uploads("images", images)
    if not files:
        raise NoFileUploadedError("images")
    return {"urls": storage.upload_many(service.config.bucket, service.config.images_folder, files)}


@router.post("/upload/documents")
async def upload_project_documents(
    service: ProjectServiceDep,
    storage: StorageDep,
    documents: Annotated[list[UploadFile] | None, File()] = None,
):
    """Upload documents and return their URLs."""
    files = await read_uploads("documents", documents)
    if not files:
        raise NoFileUploadedError("documents")
    return {"urls": storage.upload_many(service.config.bucket, service.config.documents_folder, files)}
