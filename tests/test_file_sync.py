# =============================================================================
# tests/test_file_sync.py - File Reconciliation Tests
# =============================================================================
# Tests for lib/file_sync.py:
# - unique_refs() ordering and filtering
# - reconcile() set law and idempotence
# - reconcile_single() removal/replacement precedence
#
# Run with: pytest tests/test_file_sync.py -v
# =============================================================================

from hypothesis import given
from hypothesis import strategies as st

from lib.file_sync import reconcile, reconcile_single, unique_refs

refs = st.lists(st.sampled_from(["a", "b", "c", "d", "e", "f"]), max_size=8)


class TestUniqueRefs:
    """Tests for reference de-duplication."""

    def test_keeps_first_seen_order(self):
        assert unique_refs(["b.jpg", "a.jpg", "b.jpg", "c.jpg"]) == ["b.jpg", "a.jpg", "c.jpg"]

    def test_drops_empty_values(self):
        assert unique_refs([None, "", "a.jpg", None]) == ["a.jpg"]

    def test_none_input(self):
        assert unique_refs(None) == []


class TestReconcile:
    """Tests for reference-set reconciliation."""

    def test_replaced_gallery(self):
        """Test moving from [a, b, c] to [b, c, d]."""
        result = reconcile(["a", "b", "c"], ["b", "c", "d"])

        assert result.to_delete == ["a"]
        assert set(result.to_keep) == {"b", "c", "d"}
        assert result.changed

    def test_unchanged_set(self):
        result = reconcile(["a", "b"], ["b", "a"])

        assert result.to_delete == []
        assert not result.changed

    def test_everything_removed(self):
        result = reconcile(["a", "b"], [])

        assert result.to_delete == ["a", "b"]
        assert result.to_keep == []

    def test_from_nothing(self):
        result = reconcile(None, ["a", "a", "b"])

        assert result.to_delete == []
        assert result.to_keep == ["a", "b"]

    @given(refs, refs)
    def test_to_delete_is_set_difference(self, old, desired):
        """to_delete == old - desired, for any inputs."""
        result = reconcile(old, desired)

        assert set(result.to_delete) == set(old) - set(desired)
        assert set(result.to_keep) == set(desired)
        assert len(result.to_delete) == len(set(result.to_delete))

    @given(refs, refs)
    def test_idempotent(self, old, desired):
        """Reconciling the result again deletes nothing new."""
        first = reconcile(old, desired)
        second = reconcile(first.to_keep, desired)

        assert second.to_delete == []
        assert second.to_keep == first.to_keep


class TestReconcileSingle:
    """Tests for 0..1 reference reconciliation."""

    def test_remove_without_replacement(self):
        result = reconcile_single("blobA", remove=True)

        assert result.value is None
        assert result.to_delete == ["blobA"]
        assert result.changed

    def test_remove_wins_over_replacement(self):
        """Test that the removal flag beats a same-request upload."""
        result = reconcile_single("blobA", replacement="blobB", remove=True)

        assert result.value is None
        assert set(result.to_delete) == {"blobA", "blobB"}

    def test_remove_when_nothing_stored(self):
        result = reconcile_single(None, remove=True)

        assert result.value is None
        assert result.to_delete == []
        assert not result.changed

    def test_replacement_deletes_previous(self):
        result = reconcile_single("blobA", replacement="blobB")

        assert result.value == "blobB"
        assert result.to_delete == ["blobA"]
        assert result.changed

    def test_first_upload(self):
        result = reconcile_single(None, replacement="blobB")

        assert result.value == "blobB"
        assert result.to_delete == []
        assert result.changed

    def test_same_reference_is_noop(self):
        result = reconcile_single("blobA", replacement="blobA")

        assert result.value == "blobA"
        assert result.to_delete == []
        assert not result.changed

    def test_nothing_requested(self):
        result = reconcile_single("blobA")

        assert result.value == "blobA"
        assert not result.changed
