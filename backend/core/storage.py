"""Local filesystem storage for assignment attachments."""

import logging
import uuid
from pathlib import Path

from fastapi import UploadFile

from backend.core import config

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


class AttachmentTooLargeError(ValueError):
    pass


def _safe_filename(filename: str | None) -> str:
    name = Path(filename or '').name.strip()
    return name or 'attachment'


def save_attachment(assignment_id: int, upload: UploadFile) -> str:
    """Write ``upload`` under ``UPLOAD_DIR/<assignment_id>/`` and return its path.

    Raises ``AttachmentTooLargeError`` as soon as more than ``MAX_UPLOAD_BYTES``
    have been read; the partial file is removed.
    """
    target_dir = Path(config.UPLOAD_DIR) / str(assignment_id)
    target_dir.mkdir(parents=True, exist_ok=True)
    target = target_dir / f'{uuid.uuid4().hex}_{_safe_filename(upload.filename)}'

    limit = config.MAX_UPLOAD_BYTES
    written = 0
    upload.file.seek(0)
    with target.open('wb') as handle:
        while True:
            chunk = upload.file.read(min(CHUNK_SIZE, limit + 1 - written))
            if not chunk:
                break
            written += len(chunk)
            if written > limit:
                break
            handle.write(chunk)

    if written > limit:
        target.unlink()
        raise AttachmentTooLargeError(f'Attachments must be {limit} bytes or smaller.')

    logger.info('Stored attachment for assignment %s at %s', assignment_id, target)
    return target.as_posix()


def discard_attachment(file_path: str) -> None:
    Path(file_path).unlink(missing_ok=True)
    logger.info('Discarded attachment %s', file_path)
