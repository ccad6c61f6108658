"""Validation helpers for issue image uploads."""

ALLOWED_MIME_TYPES: dict[str, str] = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
}

ALLOWED_EXTENSIONS: dict[str, str] = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
}


def validate_image_content_type(content_type: str | None) -> bool:
    """Check whether a MIME type is an accepted image type.

    Args:
        content_type: The MIME type string, possibly with parameters.

    Returns:
        True if the content type is allowed, False otherwise.
    """
    if not content_type:
        return False
    return content_type.split(";")[0].strip().lower() in ALLOWED_MIME_TYPES


def validate_image_extension(filename: str | None) -> bool:
    """Check whether a filename carries an accepted image extension."""
    if not filename:
        return False
    return extract_extension(filename) in ALLOWED_EXTENSIONS


def extract_extension(filename: str) -> str:
    """Return the lowercase extension including the dot, or an empty string."""
    dot_idx = filename.rfind(".")
    if dot_idx == -1:
        return ""
    return filename[dot_idx:].lower()


def get_allowed_extensions_display() -> str:
    return ", ".join(sorted(ALLOWED_EXTENSIONS))
