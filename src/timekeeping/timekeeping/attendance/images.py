from __future__ import annotations

import base64
import binascii
import re
from datetime import datetime
from pathlib import Path
from typing import Protocol

from ..core.constants import DEFAULT_MAX_SELFIE_BYTES
from ..core.exceptions import ValidationError

_DATA_URI = re.compile(r"^data:image/(?P<kind>[a-zA-Z]+);base64,(?P<payload>.+)$", re.DOTALL)
_ALLOWED_KINDS = {"jpeg", "jpg", "png", "webp"}


def is_data_uri(value: str | None) -> bool:
    return bool(value) and value.startswith("data:image/")


class SelfieStorage(Protocol):
    """Durable storage for clock-event selfies: data-URI in, file path out."""

    def save(self, data_uri: str, *, employee_id: int, session_type: str, taken_at: datetime) -> str:
        raise NotImplementedError


class LocalSelfieStorage(SelfieStorage):
    """Writes decoded selfies under ``upload_dir``."""

    def __init__(self, upload_dir: str | Path, *, max_bytes: int = DEFAULT_MAX_SELFIE_BYTES):
        self._upload_dir = Path(upload_dir)
        self._max_bytes = int(max_bytes)

    @staticmethod
    def filename_for(*, employee_id: int, session_type: str, taken_at: datetime, extension: str) -> str:
        stamp = taken_at.strftime("%Y-%m-%dT%H-%M-%S-%f")
        return f"selfie_{employee_id}_{session_type}_{stamp}.{extension}"

    def decode(self, data_uri: str) -> tuple[str, bytes]:
        m = _DATA_URI.match(data_uri or "")
        if not m:
            raise ValidationError("Invalid base64 image format")

        kind = m.group("kind").lower()
        if kind not in _ALLOWED_KINDS:
            raise ValidationError(f"Unsupported image type: image/{kind}")

        try:
            raw = base64.b64decode(m.group("payload"), validate=True)
        except (binascii.Error, ValueError):
            raise ValidationError("Invalid base64 image data")

        if len(raw) > self._max_bytes:
            raise ValidationError(f"Image size exceeds maximum allowed size of {self._max_bytes} bytes")

        extension = "jpg" if kind == "jpeg" else kind
        return extension, raw

    def save(self, data_uri: str, *, employee_id: int, session_type: str, taken_at: datetime) -> str:
        extension, raw = self.decode(data_uri)
        self._upload_dir.mkdir(parents=True, exist_ok=True)
        path = self._upload_dir / self.filename_for(
            employee_id=employee_id,
            session_type=session_type,
            taken_at=taken_at,
            extension=extension,
        )
        path.write_bytes(raw)
        return str(path)
