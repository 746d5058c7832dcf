"""Client-side staging of vehicle documents and photos.

Files are validated and previewed locally; nothing is uploaded until the
wizard submits. Validation problems are recorded per slot and returned,
never raised, so one bad file never blocks the other slots.
"""

from __future__ import annotations

import asyncio
import base64
import mimetypes
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pickandgo.core.errors import StagingError
from pickandgo.core.logging import get_logger

_logger = get_logger(__name__)

DOCUMENT_TYPES = ("insurance", "registration", "emissionTest")
PHOTO_SIDES = ("front", "back")

MAX_FILE_BYTES = 10 * 1024 * 1024

DOCUMENT_MIME_TYPES = {
    "image/jpeg": "JPEG",
    "image/jpg": "JPG",
    "image/png": "PNG",
    "application/pdf": "PDF",
}
PHOTO_MIME_TYPES = {
    "image/jpeg": "JPEG",
    "image/jpg": "JPG",
    "image/png": "PNG",
}


@dataclass(frozen=True)
class FileRef:
    """A file selected by the user, held in memory until upload."""

    filename: str
    content_type: str
    content: bytes = field(repr=False)

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def is_image(self) -> bool:
        return self.content_type.startswith("image/")

    @classmethod
    def from_path(cls, path: Path | str, content_type: str | None = None) -> FileRef:
        p = Path(path)
        guessed, _enc = mimetypes.guess_type(p.name)
        return cls(
            filename=p.name,
            content_type=content_type or guessed or "application/octet-stream",
            content=p.read_bytes(),
        )

    def as_upload(self) -> tuple[str, bytes, str]:
        """(filename, content, content type) for a multipart field."""
        return (self.filename, self.content, self.content_type)


@dataclass
class StagedFile:
    file: FileRef | None = None
    preview: str | None = None
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "filename": self.file.filename if self.file else None,
            "content_type": self.file.content_type if self.file else None,
            "size": self.file.size if self.file else 0,
            "preview": self.preview,
            "errors": list(self.errors),
        }


def _data_url(file: FileRef) -> str:
    encoded = base64.b64encode(file.content).decode("ascii")
    return f"data:{file.content_type};base64,{encoded}"


async def build_preview(file: FileRef) -> str:
    """Encode the whole file as a base64 data URL, off the event loop."""
    return await asyncio.to_thread(_data_url, file)


def validate_file(file: FileRef, allowed: dict[str, str], type_message: str) -> list[str]:
    errors: list[str] = []
    if file.content_type.lower() not in allowed:
        errors.append(type_message)
    if file.size > MAX_FILE_BYTES:
        errors.append("File size must be less than 10MB")
    return errors


class _Staging:
    slot_names: tuple[str, ...] = ()
    allowed_types: dict[str, str] = {}
    type_message = ""
    kind = "file"

    def __init__(self) -> None:
        self._slots: dict[str, StagedFile] = {name: StagedFile() for name in self.slot_names}

    def slot(self, name: str) -> StagedFile:
        try:
            return self._slots[name]
        except KeyError:
            allowed = ", ".join(self.slot_names)
            raise StagingError(
                f"Unknown {self.kind} type '{name}'", f"Expected one of: {allowed}"
            ) from None

    def has_file(self, name: str) -> bool:
        return self.slot(name).file is not None

    async def _stage(self, name: str, file: FileRef) -> tuple[str | None, list[str]]:
        slot = self.slot(name)
        slot.errors = []

        errors = validate_file(file, self.allowed_types, self.type_message)
        if errors:
            slot.errors = errors
            _logger.verbose(f"Rejected {self.kind} '{name}' ({file.filename}): {'; '.join(errors)}")
            return None, list(errors)

        preview = await build_preview(file) if file.is_image else None
        self._slots[name] = StagedFile(file=file, preview=preview)
        _logger.debug(f"Staged {self.kind} '{name}': {file.filename} ({file.size} bytes)")
        return preview, []

    def _remove(self, name: str) -> None:
        self.slot(name)
        self._slots[name] = StagedFile()

    def staged(self) -> list[tuple[str, FileRef]]:
        """Slots holding a file, in canonical slot order."""
        return [
            (n, self._slots[n].file) for n in self.slot_names if self._slots[n].file is not None
        ]

    def errors(self) -> dict[str, list[str]]:
        return {n: list(s.errors) for n, s in self._slots.items() if s.errors}

    def reset(self) -> None:
        self._slots = {name: StagedFile() for name in self.slot_names}

    def to_dict(self) -> dict[str, dict[str, Any]]:
        return {n: self._slots[n].to_dict() for n in self.slot_names}


class DocumentStaging(_Staging):
    """Insurance, registration and emission test documents."""

    slot_names = DOCUMENT_TYPES
    allowed_types = DOCUMENT_MIME_TYPES
    type_message = "Please select an image (JPEG, PNG) or PDF file"
    kind = "document"

    async def stage_document(self, doc_type: str, file: FileRef) -> tuple[str | None, list[str]]:
        """Validate and stage a document.

        Returns:
            (preview data URL or None, validation errors)
        """
        return await self._stage(doc_type, file)

    def remove_document(self, doc_type: str) -> None:
        self._remove(doc_type)


class PhotoStaging(_Staging):
    """Optional front/back vehicle photos."""

    slot_names = PHOTO_SIDES
    allowed_types = PHOTO_MIME_TYPES
    type_message = "Please select an image (JPEG, PNG) file"
    kind = "photo"

    async def stage_photo(self, side: str, file: FileRef) -> tuple[str | None, list[str]]:
        return await self._stage(side, file)

    def remove_photo(self, side: str) -> None:
        self._remove(side)
