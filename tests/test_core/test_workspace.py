"""Tests for session workspace allocation and photo persistence."""

from pathlib import Path

import pytest

from photomesh.core.errors import FilesystemError
from photomesh.core.workspace import cleanup_session, create_session, persist_photos, photo_filename


class TestPhotoFilename:
    def test_zero_padded(self):
        assert photo_filename(0) == "photo_000.jpg"
        assert photo_filename(42) == "photo_042.jpg"

    def test_wider_than_padding(self):
        assert photo_filename(1234) == "photo_1234.jpg"

    def test_custom_layout(self):
        assert photo_filename(7, prefix="img", extension="png", padding=5) == "img_00007.png"


class TestCreateSession:
    def test_creates_photo_and_output_dirs(self, work_root: Path):
        session = create_session(work_root)
        assert session.photos_dir.is_dir()
        assert session.output_dir.is_dir()
        assert session.work_dir == work_root.resolve() / session.session_id
        assert session.photos_dir.parent == session.work_dir

    def test_sessions_are_isolated(self, work_root: Path):
        a = create_session(work_root)
        b = create_session(work_root)
        assert a.session_id != b.session_id
        assert a.work_dir != b.work_dir

    def test_unwritable_root(self, tmp_path: Path):
        blocker = tmp_path / "not_a_dir"
        blocker.write_text("file in the way")
        with pytest.raises(FilesystemError) as exc_info:
            create_session(blocker)
        assert exc_info.value.status_code == 500


class TestPersistPhotos:
    def test_bytes_round_trip_in_order(self, work_root: Path, jpeg_blobs: list[bytes]):
        session = create_session(work_root)
        paths = persist_photos(session, jpeg_blobs)

        assert [p.name for p in paths] == ["photo_000.jpg", "photo_001.jpg", "photo_002.jpg"]
        for path, blob in zip(paths, jpeg_blobs):
            assert path.read_bytes() == blob
        assert sorted(p.name for p in session.photos_dir.iterdir()) == [p.name for p in paths]


class TestCleanupSession:
    def test_disabled_keeps_tree(self, work_root: Path):
        session = create_session(work_root)
        assert cleanup_session(session) is False
        assert session.work_dir.exists()

    def test_enabled_removes_tree(self, work_root: Path):
        session = create_session(work_root)
        assert cleanup_session(session, enabled=True) is True
        assert not session.work_dir.exists()
