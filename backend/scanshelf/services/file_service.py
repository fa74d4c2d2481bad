"""
ScanShelf Backend: Import Upload Validation
============================================

What:  Checks an uploaded inventory file before its bytes reach the parser.
How:   Extension check, then declared size, then actual size.
Who:   Called by InventoryService.import_upload() for POST /api/inventory/import.

Content is not inspected here: whether the bytes are an inventory document
is decided by parse_inventory(), which raises FormatError.
"""

import logging
from pathlib import Path
from typing import Optional

from scanshelf.config import settings
from scanshelf.exceptions import ValidationError

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".json"}


class FileService:
    """Validates inventory files chosen by the user for import."""

    def __init__(self, max_size: Optional[int] = None):
        self.max_size = max_size or settings.max_import_size

    def validate_extension(self, filename: Optional[str]) -> None:
        """
        Reject files whose name does not end in .json.

        An upload without a filename is let through; some share targets
        strip it.
        """
        if not filename:
            return
        ext = Path(filename).suffix.lower()
        if ext not in ALLOWED_EXTENSIONS:
            raise ValidationError(
                message=(
                    f"File type '{ext or filename}' is not supported. "
                    f"Choose an exported inventory file ({', '.join(sorted(ALLOWED_EXTENSIONS))})"
                ),
                field="file",
                context={"extension": ext, "allowed": sorted(ALLOWED_EXTENSIONS)},
            )

    def validate_size(self, content_length: Optional[int], actual_size: int) -> None:
        """
        Reject empty files and files above max_size.

        Both the client-declared length and the received byte count are checked.
        """
        max_mb = self.max_size / (1024 * 1024)

        if actual_size == 0:
            raise ValidationError(message="The uploaded file is empty", field="file")

        if content_length and content_length > self.max_size:
            raise ValidationError(
                message=f"File is too large. The maximum import size is {max_mb:.1f}MB.",
                field="file",
                context={"max_size_mb": max_mb, "reported_size": content_length},
            )

        if actual_size > self.max_size:
            raise ValidationError(
                message=(
                    f"File is too large ({actual_size / (1024 * 1024):.1f}MB). "
                    f"The maximum import size is {max_mb:.1f}MB."
                ),
                field="file",
                context={"max_size_mb": max_mb, "actual_size": actual_size},
            )

    def validate_upload(
        self,
        filename: Optional[str],
        content: bytes,
        content_length: Optional[int] = None,
    ) -> bytes:
        """Run all upload checks and return the content unchanged."""
        self.validate_extension(filename)
        self.validate_size(content_length, len(content))
        logger.debug("Import upload accepted: %s (%d bytes)", filename or "<unnamed>", len(content))
        return content
