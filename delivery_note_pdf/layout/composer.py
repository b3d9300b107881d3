"""Page Composer

Turns one page chunk plus the document header into a ComposedPage.

Every page carries the same header block and a page indicator, so pages stay
self-identifying when separated. The signature block is composed only for the
last page. The item table always reserves the full capacity of the page's
position, so the header and signature areas never move.
"""
import logging
from typing import List, Optional, Sequence

from ..config import (
    ACCENT,
    CARD_BORDER,
    FAINT,
    INK,
    MUTED,
    PAGE_LABEL,
    PLACEHOLDER,
    ROW_RULE,
    TABLE_HEAD_FILL,
)
from ..exceptions import ChunkOverflowError, MalformedChunkError, PageSequenceError
from ..models import DocumentHeader, DocumentVariant, ItemRow, PageChunk, SignatureParty
from ..utils import format_document_date, format_quantity, probe_image, safe_text, text_or_placeholder
from . import coordinate_utils
from .font_manager import FontManager
from .layout_config import LayoutConfig
from .primitives import (
    REGION_DELIVERY_INFO,
    REGION_FOOTER,
    REGION_HEADER,
    REGION_ITEM_TABLE,
    REGION_PAGE_INDICATOR,
    REGION_SIGNATURE,
    ComposedPage,
    DrawOp,
    ImageOp,
    LineOp,
    RectOp,
    Region,
    TextOp,
)
from .signature import SignatureBlockBuilder

logger = logging.getLogger(__name__)


class PageComposer:
    """Shared composition rules; subclasses supply the variant's visual rules.

    Attributes:
        layout: Immutable layout configuration of the variant
        fonts: Font manager for the variant's font family
        signature_builder: Builds the last-page signature block
    """

    def __init__(self, layout: LayoutConfig, fonts: Optional[FontManager] = None):
        self.layout = layout
        self.fonts = fonts or FontManager(monospace=layout.monospace)
        self.signature_builder = SignatureBlockBuilder(layout, self.fonts)

    # ---------- Public API ----------------------------------------------------

    def compose(self, chunk: PageChunk, header: DocumentHeader,
                parties: Sequence[SignatureParty], total_pages: int) -> ComposedPage:
        """
        Compose one page.

        Args:
            chunk: Rows for this page and its position flags
            header: Document identity (repeated on every page)
            parties: Signing roles (used only on the last page)
            total_pages: Number of pages in the document

        Returns:
            ComposedPage with header, page indicator, item table and, on the
            last page only, the signature block

        Raises:
            MalformedChunkError: Negative page index or too many rows
            PageSequenceError: Index or first/last flags out of sequence
        """
        self._validate_chunk(chunk, total_pages)

        regions = [
            self._header_region(header),
            self._page_indicator_region(chunk.page_index, total_pages),
        ]

        if chunk.is_first_page:
            regions.append(self._delivery_info_region(header))

        regions.append(self._table_region(chunk))

        if chunk.is_last_page:
            block = self.signature_builder.build(parties)
            regions.append(Region(REGION_SIGNATURE, block.top, block.height, block.ops))

        footer = self._footer_region(chunk.page_index, total_pages)
        if footer is not None:
            regions.append(footer)

        logger.debug("Composed %s page %d/%d with %d rows", self.layout.variant.value,
                     chunk.page_index + 1, total_pages, len(chunk))
        return ComposedPage(
            page_index=chunk.page_index,
            total_pages=total_pages,
            width=self.layout.page_width,
            height=self.layout.page_height,
            regions=tuple(regions),
        )

    def page_indicator(self, page_index: int, total_pages: int) -> str:
        return f"{PAGE_LABEL} {page_index + 1}/{total_pages}"

    # ---------- Validation ----------------------------------------------------

    def _validate_chunk(self, chunk: PageChunk, total_pages: int):
        if chunk.page_index < 0:
            raise MalformedChunkError(f"Negative page index: {chunk.page_index}")

        if total_pages < 1:
            raise PageSequenceError(f"Document must have at least one page, got {total_pages}")

        if chunk.page_index >= total_pages:
            raise PageSequenceError(
                f"Page index {chunk.page_index} is outside a {total_pages}-page document"
            )

        if chunk.is_first_page != (chunk.page_index == 0):
            raise PageSequenceError(
                f"Page {chunk.page_index} has is_first_page={chunk.is_first_page}"
            )

        if chunk.is_last_page != (chunk.page_index == total_pages - 1):
            raise PageSequenceError(
                f"Page {chunk.page_index} of {total_pages} has is_last_page={chunk.is_last_page}"
            )

        capacity = self.layout.capacity.for_page(chunk.is_first_page, chunk.is_last_page)
        if len(chunk) > capacity:
            raise ChunkOverflowError(chunk.page_index, len(chunk), capacity)

    # ---------- Shared building blocks ---------------------------------------

    def _text(self, x: float, y: float, text: str, size: float, bold: bool = False,
              color: str = INK, max_width: Optional[float] = None,
              align: str = "left", width: float = 0.0) -> TextOp:
        if max_width is not None:
            text = self.fonts.fit_text(text, max_width, size, bold)
        return TextOp(x, y, text, self.fonts.get_font_name(bold), size,
                      align=align, color=color, width=width)

    def _org_name(self, header: DocumentHeader) -> str:
        return safe_text(header.organization.name) or self.layout.org_placeholder

    def _document_date(self, header: DocumentHeader) -> str:
        return format_document_date(header.document_date, self.layout.date_style)

    def _logo_ops(self, header: DocumentHeader, x: float, y: float, box: float,
                  placeholder_radius: float) -> List[DrawOp]:
        """Logo scaled into a square box, or an empty placeholder frame."""
        logo = header.organization.logo
        size = probe_image(logo)
        if size is None:
            stroke = INK if self.layout.monospace else CARD_BORDER
            return [RectOp(x, y, box, box, stroke=stroke, radius=placeholder_radius)]

        width, height = coordinate_utils.fit_within(size[0], size[1], box, box)
        return [ImageOp(x + (box - width) / 2, y + (box - height) / 2, width, height,
                        data=logo, name="logo")]

    def _cell_text(self, column_key: str, item: ItemRow, number: int) -> str:
        if column_key == "no":
            return str(number)
        if column_key == "name":
            return text_or_placeholder(item.name)
        if column_key == "unit":
            return text_or_placeholder(item.unit)
        if column_key == "quantity":
            return format_quantity(item.quantity)
        return PLACEHOLDER

    def _table_cells(self, top: float, height: float, texts: Sequence[str],
                     bold: bool, color: str) -> List[TextOp]:
        """One row of fixed-width cells with text baselines centered in `height`."""
        layout = self.layout
        size = layout.small_font_size if not bold else layout.font_size
        baseline = top + (height + size * 0.7) / 2
        ops = []
        x = layout.content_left
        for column, text in zip(layout.columns, texts):
            inner_x = x + layout.cell_padding if column.align != "right" else x
            inner_width = column.width - layout.cell_padding
            if layout.monospace and column.align == "right":
                # Keep one blank character between right-aligned numbers and the next column
                inner_width -= coordinate_utils.chars_to_points(1, layout.chars_per_inch)
            fitted = self.fonts.fit_text(text, inner_width, size, bold)
            ops.append(TextOp(inner_x, baseline, fitted, self.fonts.get_font_name(bold), size,
                              align=column.align, color=color, width=inner_width))
            x += column.width
        return ops

    # ---------- Variant hooks -------------------------------------------------

    def _header_region(self, header: DocumentHeader) -> Region:
        raise NotImplementedError

    def _page_indicator_region(self, page_index: int, total_pages: int) -> Region:
        raise NotImplementedError

    def _delivery_info_region(self, header: DocumentHeader) -> Region:
        raise NotImplementedError

    def _table_region(self, chunk: PageChunk) -> Region:
        raise NotImplementedError

    def _footer_region(self, page_index: int, total_pages: int) -> Optional[Region]:
        return None


class StandardPageComposer(PageComposer):
    """Laser layout: accent bar, rounded cards, tinted table header."""

    LOGO_BOX = 44.0
    CARD_PADDING = 12.0
    CARD_RADIUS = 12.0

    def _header_region(self, header: DocumentHeader) -> Region:
        layout = self.layout
        top = layout.header_top
        left = layout.content_left
        right = layout.content_right
        pad = self.CARD_PADDING
        small = layout.small_font_size

        ops: List[DrawOp] = [
            # Accent bar above the card
            RectOp(left, layout.margin_top, layout.content_width, 5, stroke=None,
                   fill=ACCENT, radius=2.5),
            RectOp(left, top, layout.content_width, layout.header_height,
                   stroke=CARD_BORDER, radius=self.CARD_RADIUS),
        ]
        ops.extend(self._logo_ops(header, left + pad, top + 10, self.LOGO_BOX, 10))

        # Left column: organization identity and counterpart reference
        text_x = left + pad + self.LOGO_BOX + 10
        text_width = layout.content_width * 0.6 - (text_x - left)
        org = header.organization
        phone = safe_text(org.phone)
        email = safe_text(org.email)

        ops.append(self._text(text_x, top + 20, self._org_name(header), layout.title_font_size,
                              bold=True, max_width=text_width))
        ops.append(self._text(text_x, top + 32, text_or_placeholder(org.address), small,
                              color=MUTED, max_width=text_width))
        ops.append(self._text(text_x, top + 43,
                              f"Tel: {phone or PLACEHOLDER}  •  Email: {email or PLACEHOLDER}",
                              small, color=MUTED, max_width=text_width))
        ops.append(self._text(text_x, top + 55,
                              f"Invoice: {text_or_placeholder(header.source_reference)}  •  "
                              f"Kepada: {text_or_placeholder(header.counterpart_name)}",
                              small, color=MUTED, max_width=text_width))

        # Right column: document type, number and date
        right_x = right - pad
        right_width = layout.content_width * 0.4 - 2 * pad
        ops.append(self._text(right_x, top + 18, layout.document_title, layout.font_size,
                              bold=True, color=ACCENT, align="right"))
        ops.append(self._text(right_x, top + 33, text_or_placeholder(header.document_number),
                              layout.title_font_size, bold=True, align="right",
                              max_width=right_width))
        ops.append(self._text(right_x, top + 45, f"Tanggal: {self._document_date(header)}",
                              small, color=MUTED, align="right"))

        return Region(REGION_HEADER, layout.margin_top, top + layout.header_height - layout.margin_top,
                      tuple(ops))

    def _page_indicator_region(self, page_index: int, total_pages: int) -> Region:
        layout = self.layout
        top = layout.header_top
        y = top + 57
        op = self._text(layout.content_right - self.CARD_PADDING, y,
                        self.page_indicator(page_index, total_pages),
                        layout.small_font_size, color=FAINT, align="right")
        return Region(REGION_PAGE_INDICATOR, y - layout.small_font_size, layout.small_font_size + 2, (op,))

    def _delivery_info_region(self, header: DocumentHeader) -> Region:
        layout = self.layout
        top = layout.info_top
        left = layout.content_left
        pad = self.CARD_PADDING
        width = layout.content_width - 2 * pad
        small = layout.small_font_size

        ops: List[DrawOp] = [
            RectOp(left, top, layout.content_width, layout.info_height,
                   stroke=CARD_BORDER, radius=self.CARD_RADIUS),
            self._text(left + pad, top + 16, "Informasi Pengiriman", layout.font_size,
                       bold=True, color=ACCENT),
            self._text(left + pad, top + 29, text_or_placeholder(header.shipping_address),
                       layout.font_size, bold=True, max_width=width),
            self._text(left + pad, top + 41,
                       f"Penerima: {text_or_placeholder(header.counterpart_name)}  •  "
                       f"Telp: {text_or_placeholder(header.counterpart_phone)}",
                       small, color=MUTED, max_width=width),
            self._text(left + pad, top + 52,
                       f"Driver/Kurir: {text_or_placeholder(header.driver_name)}  •  "
                       f"No. Kendaraan: {text_or_placeholder(header.vehicle_number)}",
                       small, color=MUTED, max_width=width),
        ]
        return Region(REGION_DELIVERY_INFO, top, layout.info_height, tuple(ops))

    def _table_region(self, chunk: PageChunk) -> Region:
        layout = self.layout
        top = layout.table_top_for(chunk.is_first_page)
        height = layout.table_height(chunk.is_first_page, chunk.is_last_page)
        left = layout.content_left
        right = layout.content_right
        head_h = layout.table_header_height

        ops: List[DrawOp] = [
            # Frame reserves the full capacity of this page position
            RectOp(left, top, layout.content_width, height, stroke=CARD_BORDER, radius=self.CARD_RADIUS),
            RectOp(left, top, layout.content_width, head_h, stroke=None, fill=TABLE_HEAD_FILL),
            LineOp(left, top + head_h, right, top + head_h, color=CARD_BORDER),
        ]
        ops.extend(self._table_cells(top, head_h, [col.title for col in layout.columns],
                                     bold=True, color=INK))

        row_top = top + head_h
        for offset, item in enumerate(chunk.items):
            texts = [self._cell_text(col.key, item, chunk.start_number + offset)
                     for col in layout.columns]
            ops.extend(self._table_cells(row_top, layout.row_height, texts, bold=False, color=INK))
            row_top += layout.row_height
            ops.append(LineOp(left, row_top, right, row_top, color=ROW_RULE))

        return Region(REGION_ITEM_TABLE, top, height, tuple(ops))


class DotMatrixPageComposer(PageComposer):
    """Continuous-form layout: fixed pitch, monochrome rules, fixed regions."""

    LOGO_BOX = 28.0
    LINE = 12.0

    def _header_region(self, header: DocumentHeader) -> Region:
        layout = self.layout
        top = layout.header_top
        left = layout.content_left
        right = layout.content_right
        size = layout.font_size
        line = self.LINE

        # Three columns: identity (left), title (center), date (right)
        third = layout.content_width / 3

        ops: List[DrawOp] = self._logo_ops(header, left, top, self.LOGO_BOX, self.LOGO_BOX / 2)
        text_x = left + self.LOGO_BOX + 6
        left_width = left + third - text_x

        org = header.organization
        ops.append(self._text(text_x, top + line, self._org_name(header).lower(), size,
                              bold=True, max_width=left_width))
        ops.append(self._text(text_x, top + 2 * line, text_or_placeholder(org.address), size,
                              max_width=left_width))
        ops.append(self._text(text_x, top + 3 * line, f"Telp {text_or_placeholder(org.phone)}", size,
                              max_width=left_width))

        center_x = left + third
        ops.append(self._text(center_x, top + line, layout.document_title, layout.title_font_size,
                              bold=True, align="center", width=third))
        ops.append(self._text(center_x, top + 2 * line,
                              f"No. Surat Jalan: {text_or_placeholder(header.document_number)}",
                              size, align="center", width=third, max_width=third))
        ops.append(self._text(center_x, top + 3 * line,
                              f"No. Invoice: {text_or_placeholder(header.source_reference)}",
                              size, align="center", width=third, max_width=third))

        ops.append(self._text(right, top + line, f"Tanggal : {self._document_date(header)}", size,
                              align="right", max_width=third))
        ops.append(self._text(right, top + 3 * line,
                              f"Kepada : {text_or_placeholder(header.counterpart_name)}", size,
                              align="right", max_width=third))

        rule_y = top + layout.header_height - 4
        ops.append(LineOp(left, rule_y, right, rule_y, color=INK, line_width=1))
        return Region(REGION_HEADER, top, layout.header_height, tuple(ops))

    def _page_indicator_region(self, page_index: int, total_pages: int) -> Region:
        layout = self.layout
        y = layout.header_top + 2 * self.LINE
        op = self._text(layout.content_right, y, self.page_indicator(page_index, total_pages),
                        layout.font_size, align="right")
        return Region(REGION_PAGE_INDICATOR, y - self.LINE, self.LINE, (op,))

    def _delivery_info_region(self, header: DocumentHeader) -> Region:
        layout = self.layout
        top = layout.info_top
        left = layout.content_left
        size = layout.font_size
        line = self.LINE
        width = layout.content_width

        ops: List[DrawOp] = [
            self._text(left, top + line - 2, "Info Penerima", size, bold=True),
            self._text(left, top + 2 * line - 2,
                       f"Penerima : {text_or_placeholder(header.counterpart_name)}    "
                       f"Telp : {text_or_placeholder(header.counterpart_phone)}",
                       size, max_width=width),
            self._text(left, top + 3 * line - 2,
                       f"Alamat   : {text_or_placeholder(header.shipping_address)}",
                       size, max_width=width),
            self._text(left, top + 4 * line - 2,
                       f"Driver   : {text_or_placeholder(header.driver_name)}    "
                       f"No. Kendaraan : {text_or_placeholder(header.vehicle_number)}",
                       size, max_width=width),
        ]
        return Region(REGION_DELIVERY_INFO, top, layout.info_height, tuple(ops))

    def _table_region(self, chunk: PageChunk) -> Region:
        layout = self.layout
        top = layout.table_top_for(chunk.is_first_page)
        height = layout.table_height(chunk.is_first_page, chunk.is_last_page)
        left = layout.content_left
        right = layout.content_right
        head_h = layout.table_header_height

        ops: List[DrawOp] = [
            LineOp(left, top, right, top, color=INK),
            LineOp(left, top + head_h, right, top + head_h, color=INK),
            # Closing rule at the bottom of the reserved table area
            LineOp(left, top + height, right, top + height, color=INK),
        ]
        ops.extend(self._table_cells(top, head_h, [col.title for col in layout.columns],
                                     bold=True, color=INK))

        row_top = top + head_h
        for offset, item in enumerate(chunk.items):
            texts = [self._cell_text(col.key, item, chunk.start_number + offset)
                     for col in layout.columns]
            ops.extend(self._table_cells(row_top, layout.row_height, texts, bold=False, color=INK))
            row_top += layout.row_height

        return Region(REGION_ITEM_TABLE, top, height, tuple(ops))

    def _footer_region(self, page_index: int, total_pages: int) -> Optional[Region]:
        layout = self.layout
        if not layout.footer_page_indicator:
            return None
        y = layout.content_bottom - 2
        op = self._text(layout.content_right, y, f"{page_index + 1}/{total_pages}",
                        layout.small_font_size, align="right")
        return Region(REGION_FOOTER, y - self.LINE, self.LINE, (op,))


_COMPOSERS = {
    DocumentVariant.STANDARD: StandardPageComposer,
    DocumentVariant.DOT_MATRIX: DotMatrixPageComposer,
}


def get_composer(layout: LayoutConfig, fonts: Optional[FontManager] = None) -> PageComposer:
    """Composer implementing the visual rules of the layout's variant."""
    return _COMPOSERS[layout.variant](layout, fonts)
