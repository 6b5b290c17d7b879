# =============================================================================
# lib/slugs.py - URL Slug Generation
# =============================================================================
# Turns human-readable names into URL-safe identifiers and resolves
# collisions against an existing collection.
#
# The uniqueness check is injected as an "existence oracle" so this module
# never talks to the database itself:
#
#   slug = generate_unique_slug(
#       "Sunrise Towers",
#       is_taken=lambda candidate, exclude_id: store.exists(...),
#       default_base="project",
#   )
#   # -> "sunrise-towers", "sunrise-towers-1", "sunrise-towers-2", ...
# =============================================================================

from __future__ import annotations

import logging
import re
import time
from typing import Callable

logger = logging.getLogger(__name__)

# Maximum number of candidates probed before falling back to a timestamp
MAX_SLUG_ATTEMPTS = 50

# Straight and curly quotes are dropped entirely ("Joe's" -> "joes")
_QUOTES_PATTERN = re.compile("['\"‘’“”]")
_NON_ALNUM_PATTERN = re.compile(r"[^a-z0-9]+")

# (candidate, exclude_id) -> True if another row already uses the candidate
SlugOracle = Callable[[str, str | None], bool]


def slugify(value: str | None) -> str:
    """
    Normalize a string into a URL-safe slug.

    Lowercases, drops quote characters, collapses every run of characters
    outside [a-z0-9] into a single hyphen and trims hyphens from both ends.
    May return an empty string (e.g. for "!!!").

    Example:
        slugify("  Sunrise Towers (Phase 2) ")  # "sunrise-towers-phase-2"
        slugify("Joe's “Place”")                # "joes-place"
    """
    text = str(value or "").strip().lower()
    text = _QUOTES_PATTERN.sub("", text)
    text = _NON_ALNUM_PATTERN.sub("-", text)
    return text.strip("-")


def generate_unique_slug(
    base: str | None,
    is_taken: SlugOracle,
    exclude_id: str | None = None,
    default_base: str = "item",
    max_attempts: int = MAX_SLUG_ATTEMPTS,
) -> str:
    """
    Produce a slug that the oracle reports as free.

    Probes the normalized seed first, then seed-1, seed-2, ... for at most
    `max_attempts` candidates. When every candidate is taken, returns
    seed-<epoch millis> without a final check.

    Args:
        base: Proposed text (title, name or an explicit slug)
        is_taken: Existence oracle, called once per candidate
        exclude_id: Row id to ignore while probing (the row being updated)
        default_base: Seed used when `base` normalizes to an empty string
        max_attempts: Upper bound on oracle calls

    Returns:
        The resolved slug

    Raises:
        Whatever the oracle raises; there is no retry here.
    """
    seed = slugify(base) or slugify(default_base) or "item"

    candidate = seed
    for attempt in range(max_attempts):
        if not is_taken(candidate, exclude_id):
            return candidate
        candidate = f"{seed}-{attempt + 1}"

    fallback = f"{seed}-{int(time.time() * 1000)}"
    logger.warning(
        f"Slug candidates exhausted for '{seed}' after {max_attempts} attempts, "
        f"using '{fallback}'"
    )
    return fallback
