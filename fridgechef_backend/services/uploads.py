"""Helpers for handling uploaded fridge photos."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from werkzeug.datastructures import FileStorage

from fridgechef_backend.config.uploads import (
    ALLOWED_FILE_TYPES,
    FILE_TOO_LARGE_MESSAGE,
    INVALID_FILE_TYPE_MESSAGE,
    MAX_FILE_SIZE,
    NO_IMAGE_MESSAGE,
)


@dataclass(slots=True, frozen=True)
class UploadedImage:
    """An image part read from a multipart request."""

    data: bytes
    content_type: str
    filename: str = ""

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(slots=True, frozen=True)
class FileValidation:
    is_valid: bool
    error: str | None = None


def validate_file_input(
    files: Sequence[UploadedImage],
    *,
    max_size: int = MAX_FILE_SIZE,
    allowed_types: Iterable[str] = ALLOWED_FILE_TYPES,
) -> FileValidation:
    """Check that an image was supplied and that it is small enough and supported."""

    if not files:
        return FileValidation(is_valid=False, error=NO_IMAGE_MESSAGE)

    image = files[0]
    if image.size > max_size:
        return FileValidation(is_valid=False, error=FILE_TOO_LARGE_MESSAGE)

    if image.content_type not in set(allowed_types):
        return FileValidation(is_valid=False, error=INVALID_FILE_TYPE_MESSAGE)

    return FileValidation(is_valid=True)


def read_uploaded_images(file_storages: Iterable[FileStorage]) -> list[UploadedImage]:
    """Read Werkzeug uploads into immutable ``UploadedImage`` values."""

    images: list[UploadedImage] = []
    for storage in file_storages:
        data = storage.read()
        # Browsers post an empty part when the file input was left blank.
        if not storage.filename and not data:
            continue
        images.append(
            UploadedImage(
                data=data,
                content_type=(storage.mimetype or "").strip().lower(),
                filename=storage.filename or "",
            )
        )
    return images
