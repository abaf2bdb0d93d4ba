import base64

import pytest

from house_notes.errors import AttachmentLimitError
from house_notes.services.attachment_service import FileInput, format_file_size

ONE_MB = 1024 * 1024


@pytest.fixture
def attachments(services):
    return services["attachment_service"]


def test_bytes_become_data_uris(attachments):
    batch = attachments.prepare_uploads(
        [FileInput(name="receipt.pdf", data=b"%PDF-1.4")], description="Receipt"
    )

    (upload,) = batch.accepted
    assert batch.rejected == []
    assert upload.file_type == "application/pdf"
    assert upload.file_size == 8
    assert upload.description == "Receipt"
    assert upload.file_url == "data:application/pdf;base64," + base64.b64encode(
        b"%PDF-1.4"
    ).decode()


def test_unknown_extension_defaults_to_octet_stream(attachments):
    (upload,) = attachments.prepare_uploads([FileInput("blob", b"x")]).accepted

    assert upload.file_type == "application/octet-stream"


def test_paths_are_read_from_disk(attachments, tmp_path):
    photo = tmp_path / "photo.png"
    photo.write_bytes(b"\x89PNG")

    (upload,) = attachments.prepare_uploads([photo]).accepted

    assert upload.file_name == "photo.png"
    assert upload.file_type == "image/png"


def test_oversized_file_is_skipped_and_rest_accepted(attachments, tmp_path):
    big = tmp_path / "scan.tif"
    big.write_bytes(b"0" * (ONE_MB + 1))

    batch = attachments.prepare_uploads([big, FileInput("ok.txt", b"fine")])

    assert [u.file_name for u in batch.accepted] == ["ok.txt"]
    assert batch.rejected == ["File scan.tif exceeds 1MB limit"]


def test_missing_file_is_reported(attachments, tmp_path):
    batch = attachments.prepare_uploads([tmp_path / "gone.pdf"])

    assert batch.accepted == []
    assert batch.rejected == ["Failed to upload gone.pdf"]


def test_count_cap_rejects_whole_batch(attachments):
    with pytest.raises(AttachmentLimitError) as info:
        attachments.prepare_uploads([FileInput("a", b"1"), FileInput("b", b"2")], existing_count=2)

    assert info.value.message == "Maximum 3 files allowed"


@pytest.mark.parametrize(
    "size, expected",
    [(0, "0 Bytes"), (512, "512 Bytes"), (1024, "1 KB"), (1536, "1.5 KB"), (2 * ONE_MB, "2 MB"), (1234567, "1.18 MB")],
)
def test_format_file_size(size, expected):
    assert format_file_size(size) == expected
