"""Issue image uploads: file validation and storage.

Public API:
    - ``validate_image_content_type``: Check if a MIME type is an accepted image
    - ``validate_image_extension``: Check if a filename extension is an accepted image
    - ``get_allowed_extensions_display``: Human-readable list of allowed extensions
    - ``FileStorage``: Protocol for file storage backends
    - ``LocalFileStorage``: Local filesystem storage implementation
"""

from people_center_api.lib.uploads.storage import FileStorage, LocalFileStorage
from people_center_api.lib.uploads.validators import (
    ALLOWED_EXTENSIONS,
    ALLOWED_MIME_TYPES,
    get_allowed_extensions_display,
    validate_image_content_type,
    validate_image_extension,
)

__all__ = [
    "ALLOWED_EXTENSIONS",
    "ALLOWED_MIME_TYPES",
    "FileStorage",
    "LocalFileStorage",
    "get_allowed_extensions_display",
    "validate_image_content_type",
    "validate_image_extension",
]
