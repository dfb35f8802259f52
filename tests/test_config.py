"""Tests for treefold.config module."""

import pytest

from treefold.config import COMPARE_THRESHOLD, DedupeConfig, MergeConfig, PathFilter
from treefold.models import ConfigError, KeepPolicy


class TestPathFilter:
    """Tests for PathFilter predicate."""

    def test_no_patterns_accepts_everything(self):
        path_filter = PathFilter()
        assert path_filter.is_noop
        assert path_filter("/any/path.txt")

    def test_match_only(self):
        path_filter = PathFilter(match=r"\.jpg$")
        assert path_filter("/photos/a.jpg")
        assert not path_filter("/photos/a.png")

    def test_exclude_only(self):
        path_filter = PathFilter(exclude="cache")
        assert path_filter("/data/file")
        assert not path_filter("/data/cache/file")

    def test_exclude_wins_over_match(self):
        path_filter = PathFilter(match=r"\.jpg$", exclude="thumbs")
        assert path_filter("/photos/a.jpg")
        assert not path_filter("/photos/thumbs/a.jpg")
        assert not path_filter("/photos/thumbs/a.png")

    def test_patterns_are_case_insensitive(self):
        path_filter = PathFilter(match=r"\.JPG$", exclude="TMP")
        assert path_filter("/p/a.jpg")
        assert not path_filter("/tmp/a.jpg")

    def test_invalid_pattern_raises_config_error(self):
        with pytest.raises(ConfigError, match="Invalid match pattern"):
            PathFilter(match="(unclosed")


class TestDedupeConfig:
    """Tests for DedupeConfig validation."""

    def test_defaults(self, temp_dir):
        config = DedupeConfig(root=temp_dir)
        assert config.keep is KeepPolicy.OLDEST
        assert config.report_only
        config.validate()

    def test_backup_and_delete_conflict(self, temp_dir):
        config = DedupeConfig(root=temp_dir, backup_dir=temp_dir, delete=True)
        with pytest.raises(ConfigError, match="Only one of"):
            config.validate()

    def test_missing_backup_dir(self, temp_dir):
        config = DedupeConfig(root=temp_dir, backup_dir=temp_dir / "missing")
        with pytest.raises(ConfigError, match="Backup directory"):
            config.validate()

    def test_root_must_be_directory(self, temp_dir):
        config = DedupeConfig(root=temp_dir / "missing")
        with pytest.raises(ConfigError, match="not a directory"):
            config.validate()

    def test_unknown_hash(self, temp_dir):
        config = DedupeConfig(root=temp_dir, hash_algorithm="md4000")
        with pytest.raises(ConfigError, match="Unknown hash"):
            config.validate()

    def test_xxhash_allowed(self, temp_dir):
        DedupeConfig(root=temp_dir, hash_algorithm="xxh128").validate()

    def test_delete_is_not_report_only(self, temp_dir):
        assert not DedupeConfig(root=temp_dir, delete=True).report_only

    def test_backup_dir_equal_to_root_rejected(self, temp_dir):
        config = DedupeConfig(root=temp_dir, backup_dir=temp_dir)
        with pytest.raises(ConfigError, match="must not be the scanned root"):
            config.validate()

    def test_backup_dir_spelled_differently_from_root_rejected(self, temp_dir):
        (temp_dir / "tree").mkdir()
        config = DedupeConfig(root=temp_dir / "tree", backup_dir=temp_dir / "tree" / ".." / "tree")
        with pytest.raises(ConfigError, match="must not be the scanned root"):
            config.validate()

    def test_backup_dir_inside_root_allowed(self, temp_dir):
        (temp_dir / "backup").mkdir()
        DedupeConfig(root=temp_dir, backup_dir=temp_dir / "backup").validate()


class TestMergeConfig:
    """Tests for MergeConfig validation."""

    def test_valid(self, sample_trees):
        source, dest = sample_trees
        config = MergeConfig(source=source, destination=dest)
        assert config.threshold == COMPARE_THRESHOLD == 1_000_000
        config.validate()

    def test_missing_destination_is_allowed(self, sample_trees, temp_dir):
        source, _ = sample_trees
        MergeConfig(source=source, destination=temp_dir / "new").validate()

    def test_source_missing(self, temp_dir):
        config = MergeConfig(source=temp_dir / "missing", destination=temp_dir)
        with pytest.raises(ConfigError, match="does not exist"):
            config.validate()

    def test_source_is_file(self, temp_dir):
        (temp_dir / "file.txt").write_text("x")
        config = MergeConfig(source=temp_dir / "file.txt", destination=temp_dir / "d")
        with pytest.raises(ConfigError, match="not a directory"):
            config.validate()

    def test_destination_is_file(self, sample_trees, temp_dir):
        source, _ = sample_trees
        (temp_dir / "file.txt").write_text("x")
        config = MergeConfig(source=source, destination=temp_dir / "file.txt")
        with pytest.raises(ConfigError, match="Destination is not a directory"):
            config.validate()

    def test_nested_trees_rejected(self, sample_trees):
        source, _ = sample_trees
        config = MergeConfig(source=source, destination=source / "subdir")
        with pytest.raises(ConfigError, match="must not contain"):
            config.validate()

    def test_same_tree_rejected(self, sample_trees):
        source, _ = sample_trees
        with pytest.raises(ConfigError):
            MergeConfig(source=source, destination=source).validate()

    def test_non_cryptographic_hash_rejected(self, sample_trees):
        source, dest = sample_trees
        config = MergeConfig(source=source, destination=dest, hash_algorithm="xxh64")
        with pytest.raises(ConfigError, match="cryptographic"):
            config.validate()
