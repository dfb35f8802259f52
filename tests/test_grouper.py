"""Tests for treefold.grouper module."""

from unittest.mock import patch

from conftest import write_file
from treefold import scanner
from treefold.grouper import duplicate_groups, group_by_hash
from treefold.models import FileRecord
from treefold.scanner import scan_tree


class TestGroupByHash:
    """Tests for group_by_hash function."""

    def test_groups_by_content(self, dupe_tree):
        records = scan_tree(dupe_tree, show_progress=False)

        groups = group_by_hash(records, show_progress=False)

        assert len(groups) == 3
        sizes = sorted(len(files) for files in groups.values())
        assert sizes == [1, 1, 3]

    def test_every_file_hashed_once(self, dupe_tree):
        records = scan_tree(dupe_tree, show_progress=False)

        with patch("treefold.scanner.compute_file_hash",
                   wraps=scanner.compute_file_hash) as hash_mock:
            group_by_hash(records, show_progress=False)

        assert hash_mock.call_count == len(records) == 5
        assert all(r.hash is not None for r in records)

    def test_keeps_insertion_order(self, temp_dir):
        paths = [write_file(temp_dir / name, "same") for name in ("z.txt", "a.txt", "m.txt")]
        records = [FileRecord(str(p), 4, 0.0) for p in paths]

        groups = group_by_hash(records, show_progress=False)

        (files,) = groups.values()
        assert [f.path for f in files] == [str(p) for p in paths]

    def test_trusts_equal_hashes(self, temp_dir):
        a = write_file(temp_dir / "a.txt", "one")
        b = write_file(temp_dir / "b.txt", "two")
        records = [FileRecord(str(a), 3, 0.0, hash="h"), FileRecord(str(b), 3, 0.0, hash="h")]

        groups = group_by_hash(records, show_progress=False)

        assert list(groups) == ["h"]

    def test_xxhash_grouping(self, dupe_tree):
        records = scan_tree(dupe_tree, show_progress=False)
        groups = group_by_hash(records, algorithm="xxh128", show_progress=False)
        assert sorted(len(files) for files in groups.values()) == [1, 1, 3]

    def test_empty_input(self):
        assert group_by_hash([], show_progress=False) == {}


class TestDuplicateGroups:
    """Tests for duplicate_groups function."""

    def test_drops_singletons(self):
        a = FileRecord("/a", 1, 0.0, hash="h1")
        b = FileRecord("/b", 1, 0.0, hash="h1")
        c = FileRecord("/c", 2, 0.0, hash="h2")

        groups = duplicate_groups({"h1": [a, b], "h2": [c]})

        assert len(groups) == 1
        assert groups[0].hash == "h1"
        assert groups[0].files == [a, b]

    def test_no_file_in_two_groups(self, dupe_tree):
        records = scan_tree(dupe_tree, show_progress=False)
        groups = duplicate_groups(group_by_hash(records, show_progress=False))

        seen = [f.path for g in groups for f in g.files]
        assert len(seen) == len(set(seen))
