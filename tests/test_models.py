# =============================================================================
# tests/test_models.py - Pydantic Model Tests
# =============================================================================
# Unit tests for the Pydantic models to ensure:
# - Valid data is accepted and parsed correctly
# - Invalid data raises ValidationError
# - Default values work as expected
# - Patch models remember which fields were explicitly set
#
# Run with: pytest tests/test_models.py -v
# =============================================================================

from datetime import date

import pytest
from pydantic import ValidationError

from core.models import (
    DashboardSummary,
    DeleteResult,
    DeveloperCreate,
    DeveloperStorageConfig,
    DeveloperUpdate,
    ListResult,
    MutationResult,
    ProjectCreate,
    ProjectStorageConfig,
    ProjectUpdate,
)


# =============================================================================
# Project Models
# =============================================================================

class TestProjectCreate:
    """Tests for ProjectCreate model."""

    def test_valid_project(self):
        """Test creating a valid ProjectCreate."""
        # Arrange: Define valid project data
        data = {
            "title": "Lake View",
            "start_date": "2024-05-01",
            "status": True,
            "amenities": [{"title": "Pool"}],
        }

        # Act: Create the model
        project = ProjectCreate(**data)

        # Assert: Values are correct
        assert project.title == "Lake View"
        assert project.start_date == date(2024, 5, 1)
        assert project.status is True

    def test_defaults(self):
        """Test that defaults are applied correctly."""
        project = ProjectCreate(title="Lake View")

        assert project.slug is None
        assert project.status is False
        assert project.description == ""
        assert project.images == []
        assert project.documents == []
        assert project.meta == {}
        assert project.hero_image is None

    def test_title_required(self):
        with pytest.raises(ValidationError):
            ProjectCreate()

        with pytest.raises(ValidationError):
            ProjectCreate(title="")

    def test_invalid_date(self):
        with pytest.raises(ValidationError):
            ProjectCreate(title="Lake View", start_date="not-a-date")


class TestProjectUpdate:
    """Tests for ProjectUpdate model."""

    def test_empty_patch(self):
        patch = ProjectUpdate()

        assert patch.model_fields_set == set()
        assert patch.remove_hero is False

    def test_explicit_null_is_tracked(self):
        """Test that an explicit null is distinguishable from an absent field."""
        patch = ProjectUpdate(hero_image=None)

        assert "hero_image" in patch.model_fields_set
        assert patch.model_dump(exclude_unset=True) == {"hero_image": None}

    def test_lists_must_hold_strings(self):
        with pytest.raises(ValidationError):
            ProjectUpdate(images=[{"url": "a.jpg"}])


# =============================================================================
# Developer Models
# =============================================================================

class TestDeveloperModels:
    def test_create_defaults(self):
        developer = DeveloperCreate(name="Emaar")

        assert developer.active is True
        assert developer.cities == []
        assert developer.logo_url is None

    def test_name_required(self):
        with pytest.raises(ValidationError):
            DeveloperCreate(name="")

    def test_update_tracks_cities(self):
        assert DeveloperUpdate().cities is None
        assert DeveloperUpdate(cities=[]).cities == []


# =============================================================================
# Common Models
# =============================================================================

class TestStorageConfig:
    def test_defaults(self):
        config = ProjectStorageConfig()

        assert config.bucket == "project-files"
        assert config.hero_folder == "hero-images"
        assert DeveloperStorageConfig().logo_folder == "developers"

    def test_frozen(self):
        config = ProjectStorageConfig()

        with pytest.raises(ValidationError):
            config.bucket = "other"

    def test_empty_bucket_rejected(self):
        with pytest.raises(ValidationError):
            ProjectStorageConfig(bucket="")


class TestResults:
    def test_list_result(self):
        result = ListResult(rows=[{"id": "1"}], total=10, page=2, limit=1)

        assert result.model_dump()["total"] == 10

    def test_list_result_rejects_negative_total(self):
        with pytest.raises(ValidationError):
            ListResult(total=-1)

    def test_mutation_result_defaults(self):
        result = MutationResult(record={"id": "1"})

        assert result.warnings == []
        assert result.deleted_files == []

    def test_delete_result(self):
        result = DeleteResult(id="1", deleted=True, deleted_files=3)

        assert result.model_dump() == {
            "id": "1",
            "deleted": True,
            "deleted_files": 3,
            "warnings": [],
        }

    def test_dashboard_summary(self):
        assert DashboardSummary().total_projects == 0
