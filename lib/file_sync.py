# =============================================================================
# lib/file_sync.py - File Reference Reconciliation
# =============================================================================
# Decides which stored files become orphans when an entity's file references
# change. Works purely on references (public URLs); uploading and deleting
# the actual blobs is done by the caller.
#
# Two shapes are supported:
# - reconcile():        sets of references (gallery images, documents)
# - reconcile_single(): a 0..1 reference (hero image, developer logo)
#
# Removal policy for single references: an explicit remove flag always wins
# over a replacement sent in the same request.
# =============================================================================

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable


def unique_refs(refs: Iterable[str | None] | None) -> list[str]:
    """
    Drop empty values and duplicates, keeping first-seen order.

    Example:
        unique_refs(["a.jpg", "a.jpg", None, "b.jpg"])  # ["a.jpg", "b.jpg"]
    """
    seen: set[str] = set()
    result: list[str] = []
    for ref in refs or []:
        if not ref or ref in seen:
            continue
        seen.add(ref)
        result.append(ref)
    return result


@dataclass(frozen=True)
class FileReconciliation:
    """Outcome of reconciling a reference set."""

    to_delete: list[str] = field(default_factory=list)
    to_keep: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.to_delete)


@dataclass(frozen=True)
class SingleFileReconciliation:
    """Outcome of reconciling a single optional reference."""

    value: str | None = None
    to_delete: list[str] = field(default_factory=list)
    changed: bool = False


def reconcile(
    old_refs: Iterable[str | None] | None,
    desired_refs: Iterable[str | None] | None,
) -> FileReconciliation:
    """
    Compute the cleanup needed to move from `old_refs` to `desired_refs`.

    `to_delete` is the set difference old - desired. `to_keep` is the desired
    set as given (deduplicated); references that are new are assumed to have
    been uploaded already.

    Example:
        result = reconcile(["a", "b", "c"], ["b", "c", "d"])
        result.to_delete  # ["a"]
        result.to_keep    # ["b", "c", "d"]
    """
    keep = unique_refs(desired_refs)
    keep_set = set(keep)
    to_delete = [ref for ref in unique_refs(old_refs) if ref not in keep_set]
    return FileReconciliation(to_delete=to_delete, to_keep=keep)


def reconcile_single(
    current: str | None,
    replacement: str | None = None,
    remove: bool = False,
) -> SingleFileReconciliation:
    """
    Reconcile a 0..1 file reference.

    Args:
        current: Reference stored on the row today
        replacement: Newly uploaded reference, if any
        remove: Explicit request to clear the field

    Returns:
        SingleFileReconciliation with the value to persist and the
        references that are no longer used. When `remove` is set the
        replacement (if one was uploaded anyway) is scheduled for deletion
        as well.
    """
    if remove:
        to_delete = unique_refs([current, replacement])
        return SingleFileReconciliation(
            value=None,
            to_delete=to_delete,
            changed=current is not None,
        )

    if replacement and replacement != current:
        return SingleFileReconciliation(
            value=replacement,
            to_delete=unique_refs([current]),
            changed=True,
        )

    return SingleFileReconciliation(value=current)
