from __future__ import annotations

import base64
import binascii
import re
from pathlib import Path

from linenguard.core.errors import InvalidSubmissionError

DEFAULT_MIME_TYPE = "image/jpeg"

_DATA_URL = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?P<params>(;[^,;]*)*?),(?P<data>.*)$", re.DOTALL)

_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
}


def detect_mime_type(data: bytes, fallback: str | None = None) -> str:
    """Guess the image type from its magic bytes."""

    if data.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if data.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if data[:6] in (b"GIF87a", b"GIF89a"):
        return "image/gif"
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    if fallback and fallback.startswith("image/"):
        return fallback
    return DEFAULT_MIME_TYPE


def decode_data_url(value: str) -> tuple[bytes, str]:
    """Decode a ``data:`` URL (or bare base64 text) into bytes and a mime type."""

    text = (value or "").strip()
    declared: str | None = None
    match = _DATA_URL.match(text)
    if match:
        if ";base64" not in (match.group("params") or ""):
            raise InvalidSubmissionError("image data URL must be base64 encoded")
        declared = match.group("mime")
        text = match.group("data")

    try:
        data = base64.b64decode("".join(text.split()), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidSubmissionError("image data is not valid base64") from exc
    if not data:
        raise InvalidSubmissionError("image data is empty")
    return data, detect_mime_type(data, declared)


def extension_for(mime_type: str) -> str:
    return _EXTENSIONS.get(mime_type, "jpg")


def save_image(root: Path, record_id: str, data: bytes, mime_type: str) -> Path:
    """Persist a captured photo under ``<root>/images``."""

    directory = root / "images"
    directory.mkdir(parents=True, exist_ok=True)
    target = directory / f"{Path(record_id).name}.{extension_for(mime_type)}"
    target.write_bytes(data)
    return target


def find_image(root: Path, record_id: str) -> Path | None:
    directory = root / "images"
    if not directory.is_dir():
        return None
    for candidate in sorted(directory.glob(f"{Path(record_id).name}.*")):
        if candidate.is_file():
            return candidate
    return None
