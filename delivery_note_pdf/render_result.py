"""Render Result Dataclasses

Outputs of the delivery note renderer and the request handler.
"""
import os
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from .config import PDF_MEDIA_TYPE
from .models import DocumentVariant


@dataclass(frozen=True)
class RenderedDocument:
    """A rendered delivery note.

    Attributes:
        content: PDF bytes
        media_type: Always "application/pdf"
        filename: Suggested download filename
        page_count: Number of pages in the PDF
        variant: Variant the document was rendered in
        warnings: Data-quality notes (fields rendered as placeholders)
    """

    content: bytes = field(repr=False)
    media_type: str = PDF_MEDIA_TYPE
    filename: str = "surat-jalan.pdf"
    page_count: int = 1
    variant: DocumentVariant = DocumentVariant.STANDARD
    warnings: Tuple[str, ...] = ()

    def __len__(self) -> int:
        return len(self.content)


@dataclass
class RenderResult:
    """Result from the render request handler.

    Attributes:
        status: "completed" or "failed"
        status_message: Human-readable status message
        status_code: HTTP-style status (200, 400, 404, 500)
        document: Rendered document (None if rendering failed)
        download: True to serve as an attachment instead of inline
        error: Error message if rendering failed (None otherwise)
    """

    status: str  # "completed", "failed"
    status_message: str
    status_code: int = 200
    document: Optional[RenderedDocument] = None
    download: bool = False
    error: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        """True if rendering completed and produced a document."""
        return self.status == "completed" and self.document is not None

    @property
    def is_failed(self) -> bool:
        """True if rendering failed with an error."""
        return self.status == "failed"

    def headers(self) -> Dict[str, str]:
        """Response headers for serving the document.

        Returns:
            Content-Type, Content-Disposition and Cache-Control for a completed
            result, an empty dict otherwise
        """
        if not self.is_complete:
            return {}

        disposition = "attachment" if self.download else "inline"
        return {
            "Content-Type": self.document.media_type,
            "Content-Disposition": f'{disposition}; filename="{self.document.filename}"',
            "Cache-Control": "no-store",
        }

    def write_to(self, directory: str) -> str:
        """Write the PDF into `directory` under its suggested filename.

        Returns:
            Path of the written file

        Raises:
            ValueError: If the result holds no document
        """
        if not self.is_complete:
            raise ValueError(f"No document to write: {self.status_message}")

        os.makedirs(directory, exist_ok=True)
        path = os.path.join(directory, self.document.filename)
        with open(path, "wb") as f:
            f.write(self.document.content)
        return path
