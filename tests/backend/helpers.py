"""
Shared test data and header builders.
"""
import base64

PASSWORD = "P4ssword"

# Smallest payloads the image check accepts/rejects by signature
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 64
GIF_BYTES = b"GIF89a" + b"\x00" * 64


def as_base64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def basic_header(email: str, password: str) -> dict[str, str]:
    encoded = base64.b64encode(f"{email}:{password}".encode("utf-8")).decode("ascii")
    return {"Authorization": f"Basic {encoded}"}


def bearer_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
