"""Validate and store uploaded product images under UPLOAD_DIR."""

import uuid
from pathlib import Path

ALLOWED_IMAGE_EXTENSIONS = frozenset({"jpg", "jpeg", "png", "gif", "webp"})


class ImageValidationError(Exception):
    """Raised when an upload has a disallowed extension or exceeds the size limit."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


def image_extension(filename: str) -> str:
    """Lower-cased extension of filename without the dot ('' when absent)."""
    return Path(filename).suffix.lstrip(".").lower()


def validate_image(filename: str, size: int, max_bytes: int) -> str:
    """Return the normalized extension, or raise ImageValidationError."""
    ext = image_extension(filename or "")
    if ext not in ALLOWED_IMAGE_EXTENSIONS:
        allowed = ", ".join(sorted(ALLOWED_IMAGE_EXTENSIONS))
        raise ImageValidationError(f"Invalid image extension, should be one of: {allowed}")
    if size > max_bytes:
        raise ImageValidationError(
            f"Image size should be less than {max_bytes // (1024 * 1024) or 1} MB"
        )
    return ext


def store_image(content: bytes, filename: str, upload_dir: str, max_bytes: int) -> str:
    """
    Write content under upload_dir with a random name keeping the validated extension.

    Returns the relative path (upload_dir/name) stored as the product's image_url.
    """
    ext = validate_image(filename, len(content), max_bytes)
    target_dir = Path(upload_dir)
    target_dir.mkdir(parents=True, exist_ok=True)
    name = f"{uuid.uuid4().hex}.{ext}"
    (target_dir / name).write_bytes(content)
    return f"{target_dir.as_posix()}/{name}"
