"""
Detection tests for Facebook export archives.

Tests verify that the importer finds the data root under the various wrapper
layouts, resolves media references against it, and recognises Facebook
archives while rejecting other inputs.
"""

import zipfile

import pytest

from processors.facebook.archive import ArchiveIndex, find_root_prefix, resolve_media_path
from processors.facebook.processor import FacebookImportProcessor
from tests.fixtures.generators import build_zip, create_facebook_export


def index_of(tmp_path, names, archive_name="export.zip"):
    path = build_zip(tmp_path / archive_name, {name: None for name in names})
    return ArchiveIndex.open(path)


class TestFindRootPrefix:
    """Tests for locating the export's data root."""

    def test_root_level_archive(self):
        """Should return the empty prefix when documents sit at the archive root."""
        names = [
            "posts/album/0.json",
            "posts/media/Summer/1.jpg",
            "comments_and_reactions/comments.json",
        ]
        assert find_root_prefix(names) == ""

    def test_root_level_archive_with_only_posts(self):
        """Should not mistake a lone posts/ folder for a wrapper."""
        names = ["posts/album/0.json", "posts/media/Summer/1.jpg"]
        assert find_root_prefix(names) == ""

    def test_root_level_archive_with_only_photos_and_videos(self):
        """Should not mistake a lone photos_and_videos/ folder for a wrapper."""
        names = ["photos_and_videos/album/0.json", "photos_and_videos/Summer/1.jpg"]
        assert find_root_prefix(names) == ""

    def test_single_wrapper_directory(self):
        """Should return the wrapper when all entries share one top directory."""
        names = [
            "facebook-jane/posts/album/0.json",
            "facebook-jane/comments_and_reactions/comments.json",
        ]
        assert find_root_prefix(names) == "facebook-jane/"

    def test_activity_root_under_wrapper(self):
        """Should descend into your_facebook_activity under the wrapper."""
        names = [
            "facebook-jane/your_facebook_activity/posts/album/0.json",
            "facebook-jane/personal_information/profile.json",
        ]
        assert find_root_prefix(names) == "facebook-jane/your_facebook_activity/"

    def test_activity_root_marker_is_case_and_space_insensitive(self):
        """Should match 'Your Activity' style folder names."""
        names = [
            "export/Your Activity/posts/album/0.json",
            "export/other/readme.txt",
        ]
        assert find_root_prefix(names) == "export/Your Activity/"

    def test_activity_root_without_wrapper(self):
        """Should find the activity root at top level next to other folders."""
        names = [
            "your_facebook_activity/posts/album/0.json",
            "personal_information/profile.json",
        ]
        assert find_root_prefix(names) == "your_facebook_activity/"

    def test_second_level_directory_with_data_folders(self):
        """Should pick the second-level directory that holds posts/."""
        names = [
            "wrapper/export_2024/posts/album/0.json",
            "wrapper/misc/readme.txt",
        ]
        assert find_root_prefix(names) == "wrapper/export_2024/"

    def test_empty_archive(self):
        """Should return the empty prefix for an archive without entries."""
        assert find_root_prefix([]) == ""


class TestResolveMediaPath:
    """Tests for resolving media references to archive entries."""

    def test_uri_under_prefix(self, tmp_path):
        """Should resolve a URI relative to the data root."""
        with index_of(tmp_path, ["root/posts/media/A/1.jpg"]) as index:
            assert resolve_media_path(index, "root/", "posts/media/A/1.jpg") == "root/posts/media/A/1.jpg"

    def test_bare_uri(self, tmp_path):
        """Should resolve a URI that is already a full archive path."""
        with index_of(tmp_path, ["posts/media/A/1.jpg"]) as index:
            assert resolve_media_path(index, "", "posts/media/A/1.jpg") == "posts/media/A/1.jpg"

    def test_export_root_fallback(self, tmp_path):
        """Should resolve URIs written relative to the wrapper, not the activity root."""
        entry = "facebook-jane/your_facebook_activity/posts/media/A/1.jpg"
        with index_of(tmp_path, [entry]) as index:
            resolved = resolve_media_path(
                index,
                "facebook-jane/your_facebook_activity/",
                "your_facebook_activity/posts/media/A/1.jpg",
            )
            assert resolved == entry

    def test_filename_in_conventional_directory(self, tmp_path):
        """Should find a bare filename inside posts/media/."""
        with index_of(tmp_path, ["root/posts/media/1.jpg"]) as index:
            assert resolve_media_path(index, "root/", "1.jpg") == "root/posts/media/1.jpg"

    def test_filename_in_photos_and_videos(self, tmp_path):
        """Should find a bare filename inside photos_and_videos/."""
        with index_of(tmp_path, ["photos_and_videos/2.jpg"]) as index:
            assert resolve_media_path(index, "", "somewhere/else/2.jpg") == "photos_and_videos/2.jpg"

    def test_unresolvable(self, tmp_path):
        """Should return None when nothing matches."""
        with index_of(tmp_path, ["posts/media/A/1.jpg"]) as index:
            assert resolve_media_path(index, "", "posts/media/B/9.jpg") is None
            assert resolve_media_path(index, "", None) is None
            assert resolve_media_path(index, "", "") is None

    @pytest.mark.parametrize(
        "uri",
        [
            "your_facebook_activity/posts/media/Summer/1.jpg",
            "posts/media/Summer/1.jpg",
        ],
    )
    def test_resolution_survives_rewrapping(self, tmp_path, uri):
        """A reference resolved in an unwrapped export still resolves once wrapped."""
        relative = "your_facebook_activity/posts/media/Summer/1.jpg"
        names = [relative, "your_facebook_activity/posts/album/0.json"]

        with index_of(tmp_path, names, "plain.zip") as index:
            prefix = find_root_prefix(index.names)
            assert prefix == "your_facebook_activity/"
            assert resolve_media_path(index, prefix, uri) == relative

        rewrapped = [f"facebook-jane/{name}" for name in names]
        with index_of(tmp_path, rewrapped, "wrapped.zip") as index:
            prefix = find_root_prefix(index.names)
            assert prefix == "facebook-jane/your_facebook_activity/"
            assert resolve_media_path(index, prefix, uri) == f"facebook-jane/{relative}"


class TestArchiveIndex:
    """Tests for opening archives."""

    def test_missing_archive(self, tmp_path):
        """Should raise ArchiveError for a missing file."""
        from common.exceptions import ArchiveError

        with pytest.raises(ArchiveError):
            ArchiveIndex.open(tmp_path / "missing.zip")

    def test_corrupt_archive(self, tmp_path):
        """Should raise ArchiveError for a file that is not a zip."""
        from common.exceptions import ArchiveError

        path = tmp_path / "broken.zip"
        path.write_bytes(b"not a zip at all")
        with pytest.raises(ArchiveError):
            ArchiveIndex.open(path)

    def test_directory_entries_are_skipped(self, tmp_path):
        """Should list file entries only."""
        path = tmp_path / "dirs.zip"
        with zipfile.ZipFile(path, "w") as archive:
            archive.writestr("posts/", b"")
            archive.writestr("posts/a.json", b"{}")
        with ArchiveIndex.open(path) as index:
            assert index.names == ["posts/a.json"]
            assert "posts/a.json" in index
            assert len(index) == 1


class TestFacebookProcessorDetection:
    """Tests for Facebook processor detection."""

    def test_detect_valid_export(self, minimal_facebook_export):
        """Should detect a Facebook export archive."""
        assert FacebookImportProcessor.detect(minimal_facebook_export) is True

    def test_detect_root_level_export(self, temp_export_dir):
        """Should detect an export without any wrapper."""
        path = create_facebook_export(
            temp_export_dir, {"photos_and_videos/1.jpg": None}, root=""
        )
        assert FacebookImportProcessor.detect(path) is True

    def test_reject_non_zip(self, temp_export_dir):
        """Should reject a file that is not a zip."""
        path = temp_export_dir / "notes.txt"
        path.write_text("hello")
        assert FacebookImportProcessor.detect(path) is False

    def test_reject_unrelated_zip(self, temp_export_dir):
        """Should reject a zip with no Facebook folders."""
        path = build_zip(temp_export_dir / "other.zip", {"Google Photos/album/1.jpg": None})
        assert FacebookImportProcessor.detect(path) is False

    def test_reject_directory(self, temp_export_dir):
        """Should reject a directory."""
        assert FacebookImportProcessor.detect(temp_export_dir) is False
