"""Tests for version planning and metadata resolution."""

import io

import pytest

from gridstore.version_resolver import FileMetadataResolver, VersionPlan, plan_version


class TestPlanVersion:
    """Test the pure version -> (sort, skip) translation."""

    def test_zero_is_unordered(self):
        plan = plan_version(0)
        assert plan.unordered
        assert plan == VersionPlan(sort=None, skip=0)

    @pytest.mark.parametrize("version,skip", [(1, 0), (2, 1), (5, 4)])
    def test_positive_versions_sort_ascending(self, version, skip):
        plan = plan_version(version)
        assert plan.sort == (("uploadDate", 1),)
        assert plan.skip == skip
        assert not plan.unordered

    @pytest.mark.parametrize("version,skip", [(-1, 0), (-2, 1), (-5, 4)])
    def test_negative_versions_sort_descending(self, version, skip):
        plan = plan_version(version)
        assert plan.sort == (("uploadDate", -1),)
        assert plan.skip == skip


@pytest.fixture
def three_versions(store, clock):
    """
    Upload three versions of the same filename at increasing timestamps.
    """
    uploaded = []
    for content in (b"first", b"second", b"third"):
        uploaded.append(store.upload(io.BytesIO(content), "report.txt"))
        clock.advance(60)
    return uploaded


class TestFileMetadataResolver:
    """Test resolution against a populated files collection."""

    def test_newest_and_oldest(self, store, three_versions):
        t1, t2, t3 = three_versions
        resolver = FileMetadataResolver(store.files)

        assert resolver.resolve({"filename": "report.txt"}, -1).id == t3.id
        assert resolver.resolve({"filename": "report.txt"}, 1).id == t1.id
        assert resolver.resolve({"filename": "report.txt"}, 2).id == t2.id
        assert resolver.resolve({"filename": "report.txt"}, -2).id == t2.id
        assert resolver.resolve({"filename": "report.txt"}, 3).id == t3.id

    def test_version_zero_returns_some_match(self, store, three_versions):
        resolver = FileMetadataResolver(store.files)
        resolved = resolver.resolve({"filename": "report.txt"}, 0)
        assert resolved.id in {v.id for v in three_versions}

    def test_offset_past_end_is_absent(self, store, three_versions):
        resolver = FileMetadataResolver(store.files)
        assert resolver.resolve({"filename": "report.txt"}, 4) is None
        assert resolver.resolve({"filename": "report.txt"}, -4) is None

    def test_unknown_name_is_absent(self, store, three_versions):
        resolver = FileMetadataResolver(store.files)
        assert resolver.resolve({"filename": "other.txt"}, -1) is None
        assert resolver.resolve({"filename": "other.txt"}, 0) is None

    def test_resolve_by_id(self, store, three_versions):
        resolver = FileMetadataResolver(store.files)
        t2 = three_versions[1]
        assert resolver.resolve_by_id(t2.id) == t2

    def test_find_all(self, store, three_versions):
        resolver = FileMetadataResolver(store.files)
        assert {f.id for f in resolver.find_all({"filename": "report.txt"})} == {v.id for v in three_versions}
        assert list(resolver.find_all({"filename": "missing"})) == []
