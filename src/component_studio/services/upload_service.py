"""
Upload Service
==============

Stores files attached to a generation request on local disk. The whole
batch is validated (count, extension, MIME type, size) before anything is
written. Cleaning up orphaned files is not handled here.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Sequence

from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from ..constants import ALLOWED_UPLOAD_EXTENSIONS, ALLOWED_UPLOAD_MIMETYPES, MAX_UPLOAD_BYTES, MAX_UPLOAD_FILES
from ..utils.time import epoch_millis
from .service_base import ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredFile:
    filename: str
    original_name: str
    mimetype: str
    size: int

    @property
    def url(self) -> str:
        return f"/uploads/{self.filename}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'filename': self.filename,
            'originalName': self.original_name,
            'mimetype': self.mimetype,
            'size': self.size,
            'url': self.url,
        }


def _extension(name: str) -> str:
    return name.rsplit('.', 1)[-1].lower() if '.' in name else ''


def _stream_size(upload: FileStorage) -> int:
    stream = upload.stream
    position = stream.tell()
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(position)
    return size


def _validate(upload: FileStorage) -> int:
    name = upload.filename or ''
    mimetype = (upload.mimetype or '').lower()
    if _extension(name) not in ALLOWED_UPLOAD_EXTENSIONS or mimetype not in ALLOWED_UPLOAD_MIMETYPES:
        raise ValidationError(f"Invalid file type: {name or 'unnamed file'}")
    size = _stream_size(upload)
    if size > MAX_UPLOAD_BYTES:
        raise ValidationError(f"File too large: {name} (limit {MAX_UPLOAD_BYTES // (1024 * 1024)}MB)")
    return size


def storage_name(original_name: str) -> str:
    safe = secure_filename(original_name) or f"upload.{_extension(original_name) or 'bin'}"
    return f"{epoch_millis()}-{safe}"


def save_uploads(uploads: Sequence[FileStorage], upload_dir: str) -> List[StoredFile]:
    uploads = [u for u in uploads if u and u.filename]
    if not uploads:
        raise ValidationError('No files uploaded')
    if len(uploads) > MAX_UPLOAD_FILES:
        raise ValidationError(f'Too many files (maximum {MAX_UPLOAD_FILES})')

    sizes = [_validate(upload) for upload in uploads]

    target_dir = Path(upload_dir)
    target_dir.mkdir(parents=True, exist_ok=True)

    stored = []
    for upload, size in zip(uploads, sizes):
        name = storage_name(upload.filename)
        upload.save(target_dir / name)
        stored.append(StoredFile(filename=name, original_name=upload.filename,
                                 mimetype=upload.mimetype, size=size))
    logger.info(f"Stored {len(stored)} upload(s) in {target_dir}")
    return stored
