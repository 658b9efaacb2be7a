"""
Profile image storage on the local filesystem.
Files live under <upload_dir>/<profile_dir> and are served at /images.
"""
import base64
from pathlib import Path

from app.config import settings
from app.core.security import generate_token

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
JPEG_SIGNATURE = b"\xff\xd8\xff"


def profile_folder() -> Path:
    return Path(settings.upload_dir) / settings.profile_dir


def ensure_folders() -> None:
    profile_folder().mkdir(parents=True, exist_ok=True)


def is_supported_image(data: bytes) -> bool:
    """Only JPEG and PNG are accepted, detected by their leading magic bytes."""
    return data.startswith(PNG_SIGNATURE) or data.startswith(JPEG_SIGNATURE)


def save_profile_image(image_base64: str) -> str:
    """Decode and store the image under a fresh random name; returns the filename."""
    filename = generate_token(32)
    ensure_folders()
    (profile_folder() / filename).write_bytes(base64.b64decode(image_base64, validate=True))
    return filename


def delete_profile_image(filename: str | None) -> None:
    if not filename:
        return
    # A file removed out of band is not an error
    (profile_folder() / filename).unlink(missing_ok=True)
