"""Per-request workspace allocation, photo persistence and cleanup."""

from __future__ import annotations

import logging
import shutil
import uuid
from pathlib import Path
from typing import Sequence

from .contracts import Session
from .errors import FilesystemError

logger = logging.getLogger(__name__)


def photo_filename(index: int, prefix: str = "photo", extension: str = "jpg", padding: int = 3) -> str:
    """Zero-padded sequential name, e.g. photo_007.jpg."""
    return f"{prefix}_{index:0{padding}d}.{extension}"


def create_session(tmp_root: Path) -> Session:
    """Create ``<tmp_root>/<uuid>/{photos,output}`` for a fresh session."""
    session_id = str(uuid.uuid4())
    work_dir = Path(tmp_root).resolve() / session_id
    photos_dir = work_dir / "photos"
    output_dir = work_dir / "output"
    try:
        photos_dir.mkdir(parents=True, exist_ok=False)
        output_dir.mkdir(parents=True, exist_ok=False)
    except OSError as e:
        raise FilesystemError(details=f"Cannot create workspace {work_dir}: {e}") from e

    logger.info(f"Session {session_id} workspace at {work_dir}")
    return Session(
        session_id=session_id,
        work_dir=work_dir,
        photos_dir=photos_dir,
        output_dir=output_dir,
    )


def persist_photos(
    session: Session,
    photos: Sequence[bytes],
    prefix: str = "photo",
    extension: str = "jpg",
    padding: int = 3,
) -> list[Path]:
    """Write photos in upload order; returns their paths in the same order."""
    paths = []
    for i, data in enumerate(photos):
        path = session.photos_dir / photo_filename(i, prefix, extension, padding)
        try:
            path.write_bytes(data)
        except OSError as e:
            raise FilesystemError(details=f"Cannot write {path}: {e}") from e
        paths.append(path)

    logger.info(f"Photos saved to {session.photos_dir} ({len(paths)} files)")
    return paths


def cleanup_session(session: Session, enabled: bool = False) -> bool:
    """Remove the session tree when ``enabled``. Returns True if removed."""
    if not enabled:
        logger.debug(f"Keeping workspace {session.work_dir}")
        return False
    shutil.rmtree(session.work_dir, ignore_errors=True)
    logger.info(f"Removed workspace {session.work_dir}")
    return True
