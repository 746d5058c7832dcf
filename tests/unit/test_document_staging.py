"""Unit tests for vehicles.staging."""

import asyncio
import base64

import pytest

from pickandgo.core.errors import StagingError
from pickandgo.vehicles.staging import (
    MAX_FILE_BYTES,
    DocumentStaging,
    FileRef,
    PhotoStaging,
)


def _stage(staging: DocumentStaging, doc_type: str, file: FileRef):
    return asyncio.run(staging.stage_document(doc_type, file))


def test_image_document_gets_data_url_preview(jpeg_file):
    staging = DocumentStaging()

    preview, errors = _stage(staging, "insurance", jpeg_file)

    assert errors == []
    expected = base64.b64encode(jpeg_file.content).decode("ascii")
    assert preview == f"data:image/jpeg;base64,{expected}"
    assert staging.slot("insurance").file is jpeg_file
    assert staging.has_file("insurance")


def test_pdf_is_kept_without_preview(pdf_file):
    staging = DocumentStaging()

    preview, errors = _stage(staging, "registration", pdf_file)

    assert preview is None
    assert errors == []
    assert staging.has_file("registration")
    assert staging.slot("registration").preview is None


def test_text_file_is_rejected_and_other_slots_untouched(jpeg_file):
    staging = DocumentStaging()
    _stage(staging, "emissionTest", jpeg_file)
    text = FileRef("notes.txt", "text/plain", b"hello")

    preview, errors = _stage(staging, "insurance", text)

    assert preview is None
    assert errors == ["Please select an image (JPEG, PNG) or PDF file"]
    assert not staging.has_file("insurance")
    assert staging.errors() == {"insurance": errors}
    assert staging.has_file("emissionTest")
    assert staging.slot("emissionTest").errors == []


def test_oversized_file_is_rejected():
    staging = DocumentStaging()
    big = FileRef("scan.pdf", "application/pdf", b"0" * (MAX_FILE_BYTES + 1))

    _preview, errors = _stage(staging, "insurance", big)

    assert errors == ["File size must be less than 10MB"]
    assert not staging.has_file("insurance")


def test_file_at_size_limit_is_accepted():
    staging = DocumentStaging()
    exact = FileRef("scan.pdf", "application/pdf", b"0" * MAX_FILE_BYTES)

    _preview, errors = _stage(staging, "insurance", exact)

    assert errors == []


def test_wrong_type_and_oversized_report_both():
    staging = DocumentStaging()
    big = FileRef("movie.mp4", "video/mp4", b"0" * (MAX_FILE_BYTES + 1))

    _preview, errors = _stage(staging, "insurance", big)

    assert len(errors) == 2


def test_rejected_file_keeps_previous_file(jpeg_file):
    """A bad replacement does not clear the file already staged."""
    staging = DocumentStaging()
    _stage(staging, "insurance", jpeg_file)

    _stage(staging, "insurance", FileRef("x.exe", "application/x-msdownload", b"MZ"))

    assert staging.slot("insurance").file is jpeg_file
    assert staging.slot("insurance").preview is not None
    assert staging.slot("insurance").errors


def test_successful_stage_clears_slot_errors(pdf_file):
    staging = DocumentStaging()
    _stage(staging, "insurance", FileRef("a.txt", "text/plain", b"a"))

    _stage(staging, "insurance", pdf_file)

    assert staging.errors() == {}


def test_remove_document_clears_slot(jpeg_file):
    staging = DocumentStaging()
    _stage(staging, "insurance", jpeg_file)

    staging.remove_document("insurance")

    slot = staging.slot("insurance")
    assert slot.file is None
    assert slot.preview is None
    assert slot.errors == []


def test_unknown_document_type_raises(pdf_file):
    staging = DocumentStaging()
    with pytest.raises(StagingError):
        _stage(staging, "passport", pdf_file)
    with pytest.raises(StagingError):
        staging.remove_document("passport")


def test_staged_is_in_canonical_order(pdf_file, jpeg_file):
    staging = DocumentStaging()
    _stage(staging, "emissionTest", pdf_file)
    _stage(staging, "insurance", jpeg_file)

    assert [name for name, _file in staging.staged()] == ["insurance", "emissionTest"]


def test_reset_clears_everything(pdf_file):
    staging = DocumentStaging()
    _stage(staging, "insurance", pdf_file)
    _stage(staging, "registration", FileRef("a.txt", "text/plain", b"a"))

    staging.reset()

    assert staging.staged() == []
    assert staging.errors() == {}


class TestPhotoStaging:
    """Tests for PhotoStaging."""

    def test_stage_front_and_back(self, jpeg_file, png_file):
        photos = PhotoStaging()

        front, _ = asyncio.run(photos.stage_photo("front", jpeg_file))
        back, _ = asyncio.run(photos.stage_photo("back", png_file))

        assert front.startswith("data:image/jpeg;base64,")
        assert back.startswith("data:image/png;base64,")
        assert [side for side, _f in photos.staged()] == ["front", "back"]

    def test_pdf_photo_is_rejected(self, pdf_file):
        photos = PhotoStaging()

        preview, errors = asyncio.run(photos.stage_photo("front", pdf_file))

        assert preview is None
        assert errors == ["Please select an image (JPEG, PNG) file"]

    def test_remove_photo(self, jpeg_file):
        photos = PhotoStaging()
        asyncio.run(photos.stage_photo("back", jpeg_file))

        photos.remove_photo("back")

        assert photos.staged() == []

    def test_unknown_side_raises(self, jpeg_file):
        with pytest.raises(StagingError):
            asyncio.run(PhotoStaging().stage_photo("left", jpeg_file))


def test_file_ref_from_path(tmp_path):
    path = tmp_path / "policy.pdf"
    path.write_bytes(b"%PDF-1.4")

    ref = FileRef.from_path(path)

    assert ref.filename == "policy.pdf"
    assert ref.content_type == "application/pdf"
    assert ref.size == 8
    assert ref.as_upload() == ("policy.pdf", b"%PDF-1.4", "application/pdf")
