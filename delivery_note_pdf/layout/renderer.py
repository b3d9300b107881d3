"""Document Renderer

Orchestrates delivery note rendering by coordinating the layout components:
- order_items / chunk_items: print order and page boundaries
- PageComposer: one ComposedPage per chunk (variant visual rules)
- PagePainter: paints composed pages onto a ReportLab canvas

The canvas is created with ReportLab's invariant mode and fixed metadata, so
rendering the same input twice gives byte-identical PDFs.
"""
import io
import logging
from typing import List, Optional, Sequence

from reportlab.pdfgen import canvas as pdfcanvas

from ..config import DOCUMENT_TITLE, PDF_CREATOR, PDF_MEDIA_TYPE
from ..models import DocumentHeader, DocumentVariant, ItemRow, SignatureParty
from ..render_result import RenderedDocument
from ..utils import probe_image, safe_text, suggest_filename
from .chunker import chunk_items, order_items
from .composer import get_composer
from .font_manager import FontManager
from .layout_config import LayoutConfig, get_layout
from .painter import PagePainter
from .primitives import ComposedPage

logger = logging.getLogger(__name__)


class DocumentRenderer:
    """Render delivery notes for one layout variant.

    Attributes:
        layout: Immutable layout configuration
        composer: Page composer for the layout's variant
    """

    def __init__(self, layout: LayoutConfig, fonts: Optional[FontManager] = None):
        """
        Initialize renderer.

        Args:
            layout: Layout configuration of the variant
            fonts: Optional font manager (defaults to the variant's family)
        """
        self.layout = layout
        self.composer = get_composer(layout, fonts)

    def compose_pages(self, items: Sequence[ItemRow], header: DocumentHeader,
                      parties: Optional[Sequence[SignatureParty]] = None) -> List[ComposedPage]:
        """
        Order, chunk and compose every page of a document.

        Args:
            items: Item rows in retrieval order
            header: Document identity
            parties: Signing roles; defaults to the variant's template

        Returns:
            Composed pages in order (at least one)
        """
        if parties is None:
            parties = self.layout.signature_parties
        parties = tuple(parties)

        ordered = order_items(items)
        chunks = chunk_items(ordered, self.layout.capacity)
        total_pages = len(chunks)

        return [
            self.composer.compose(chunk, header, parties, total_pages)
            for chunk in chunks
        ]

    def paint(self, pages: Sequence[ComposedPage], header: DocumentHeader) -> bytes:
        """
        Paint composed pages into one PDF buffer.

        Args:
            pages: Composed pages in order
            header: Document identity (used for PDF metadata)

        Returns:
            PDF bytes
        """
        buffer = io.BytesIO()
        pdf = pdfcanvas.Canvas(
            buffer,
            pagesize=self.layout.page_size,
            invariant=1,
            pageCompression=1,
        )

        number = safe_text(header.document_number)
        pdf.setTitle(f"{DOCUMENT_TITLE} {number}".strip())
        pdf.setAuthor(safe_text(header.organization.name))
        pdf.setSubject(safe_text(header.source_reference))
        pdf.setCreator(PDF_CREATOR)

        painter = PagePainter(pdf)
        for page in pages:
            painter.paint(page)

        pdf.save()
        return buffer.getvalue()

    def render(self, items: Sequence[ItemRow], header: DocumentHeader,
               parties: Optional[Sequence[SignatureParty]] = None) -> bytes:
        """
        Render a delivery note to PDF bytes.

        Args:
            items: Item rows in retrieval order
            header: Document identity
            parties: Signing roles; defaults to the variant's template

        Returns:
            PDF bytes
        """
        pages = self.compose_pages(items, header, parties)
        return self.paint(pages, header)


def collect_warnings(items: Sequence[ItemRow], header: DocumentHeader) -> List[str]:
    """
    Describe data-quality gaps that were rendered as placeholders.

    Args:
        items: Item rows
        header: Document identity

    Returns:
        Human-readable notes, empty when nothing is missing
    """
    warnings = [f"missing header field: {name}" for name in header.missing_fields()]

    logo = header.organization.logo
    if logo and probe_image(logo) is None:
        warnings.append("organization logo is not a readable image")

    unnamed = sum(1 for item in items if not safe_text(item.name))
    if unnamed:
        warnings.append(f"{unnamed} item(s) without a name")

    return warnings


def render_delivery_note(items: Sequence[ItemRow], header: DocumentHeader,
                         variant=DocumentVariant.STANDARD,
                         parties: Optional[Sequence[SignatureParty]] = None) -> RenderedDocument:
    """
    Render a delivery note in the requested variant.

    Args:
        items: Item rows in retrieval order
        header: Document identity (organization logo already resolved to bytes)
        variant: DocumentVariant or tag ("standard", "dot-matrix")
        parties: Signing roles; defaults to the variant's template

    Returns:
        RenderedDocument with PDF bytes, media type and suggested filename

    Raises:
        UnsupportedVariantError: If the variant is unknown
        ContractViolationError: If the layout contract is broken
    """
    layout = get_layout(variant)
    items = list(items or ())

    warnings = collect_warnings(items, header)
    for warning in warnings:
        logger.warning("Delivery note %s: %s", safe_text(header.document_number) or "?", warning)

    renderer = DocumentRenderer(layout)
    pages = renderer.compose_pages(items, header, parties)
    content = renderer.paint(pages, header)

    logger.info(
        "Rendered %s delivery note %s: %d items on %d pages (%d bytes)",
        layout.variant.value, safe_text(header.document_number) or "?",
        len(items), len(pages), len(content),
    )

    return RenderedDocument(
        content=content,
        media_type=PDF_MEDIA_TYPE,
        filename=suggest_filename(header.document_number,
                                  dot_matrix=layout.variant is DocumentVariant.DOT_MATRIX),
        page_count=len(pages),
        variant=layout.variant,
        warnings=tuple(warnings),
    )
