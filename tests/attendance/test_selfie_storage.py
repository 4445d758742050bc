from __future__ import annotations

import base64
from datetime import datetime
from pathlib import Path

import pytest

from src.timekeeping.timekeeping.attendance.images import LocalSelfieStorage, is_data_uri
from src.timekeeping.timekeeping.core.exceptions import ValidationError

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


def data_uri(kind: str, raw: bytes) -> str:
    return f"data:image/{kind};base64," + base64.b64encode(raw).decode("ascii")


def test_save_writes_decoded_bytes(tmp_path):
    storage = LocalSelfieStorage(tmp_path)
    path = storage.save(
        data_uri("png", PNG), employee_id=7, session_type="morning_in", taken_at=datetime(2026, 3, 2, 8, 0, 1)
    )

    assert path.endswith("selfie_7_morning_in_2026-03-02T08-00-01-000000.png")
    assert Path(path).read_bytes() == PNG


def test_jpeg_is_stored_as_jpg(tmp_path):
    extension, _ = LocalSelfieStorage(tmp_path).decode(data_uri("jpeg", b"\xff\xd8\xff"))
    assert extension == "jpg"


@pytest.mark.parametrize(
    "value",
    [
        "not-an-image",
        "data:image/gif;base64,R0lGODlh",
        "data:image/png;base64,@@@",
    ],
)
def test_rejects_bad_payloads(tmp_path, value):
    with pytest.raises(ValidationError):
        LocalSelfieStorage(tmp_path).decode(value)


def test_rejects_oversized_image(tmp_path):
    with pytest.raises(ValidationError):
        LocalSelfieStorage(tmp_path, max_bytes=4).decode(data_uri("png", PNG))


def test_is_data_uri():
    assert is_data_uri("data:image/png;base64,AAAA")
    assert not is_data_uri("uploads/selfie.png")
    assert not is_data_uri(None)
