# =============================================================================
# lib/normalize.py - Array Field Normalization
# =============================================================================
# Shapes array-valued columns before they are written:
# - amenities: always a list of {"title", "description", "imageUrl"}
# - images/documents: duplicate-free reference lists (see lib/file_sync.py)
# - cities: trimmed, duplicate-free labels
# =============================================================================

from typing import Any, Iterable

AMENITY_FIELDS = ("title", "description", "imageUrl")


def normalize_amenity(item: Any) -> dict[str, str]:
    """
    Coerce one amenity record to the fixed three-field shape.

    Missing or null fields become "". Unknown keys are dropped.

    Raises:
        ValueError: If the record is not a mapping
    """
    if not isinstance(item, dict):
        raise ValueError(f"Amenity must be an object, got {type(item).__name__}")

    normalized = {}
    for key in AMENITY_FIELDS:
        value = item.get(key)
        normalized[key] = "" if value is None else str(value)
    return normalized


def normalize_amenities(items: Any) -> list[dict[str, str]]:
    """
    Normalize a list of amenity records.

    Example:
        normalize_amenities([{"title": "Pool"}])
        # [{"title": "Pool", "description": "", "imageUrl": ""}]

    Raises:
        ValueError: If `items` is not a list or contains a non-object entry
    """
    if items is None:
        return []
    if not isinstance(items, list):
        raise ValueError(f"Amenities must be a list, got {type(items).__name__}")
    return [normalize_amenity(item) for item in items]


def normalize_labels(labels: Iterable[Any] | None) -> list[str]:
    """
    Trim labels and drop blanks and duplicates, keeping first-seen order.

    Example:
        normalize_labels([" Dubai", "Dubai", "", "Abu Dhabi"])  # ["Dubai", "Abu Dhabi"]
    """
    seen: set[str] = set()
    result: list[str] = []
    for label in labels or []:
        text = str(label).strip() if label is not None else ""
        if not text or text in seen:
            continue
        seen.add(text)
        result.append(text)
    return result
