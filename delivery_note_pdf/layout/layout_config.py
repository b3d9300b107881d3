"""Layout Configuration

Immutable, per-variant measurement constants: page geometry, margins, font
metrics, row capacity and column widths. A variant is selected by tag
(`get_layout`), never by flags threaded through composition calls.

All vertical positions are points from the top edge of the page.
"""
from dataclasses import dataclass
from types import MappingProxyType
from typing import Tuple

from ..config import (
    DOCUMENT_TITLE,
    DOT_MATRIX_ORG_PLACEHOLDER,
    HALF_LETTER_LANDSCAPE,
    STANDARD_ORG_PLACEHOLDER,
)
from ..exceptions import InvalidCapacityError, InvalidLayoutError, UnsupportedVariantError
from ..models import DocumentVariant, SignatureParty
from . import coordinate_utils


def _is_positive_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


@dataclass(frozen=True)
class PageCapacity:
    """Maximum item rows per page, by the page's position in the document.

    Attributes:
        single: Rows on a page that is both first and last
        first: Rows on the first page of a multi-page document
        middle: Rows on pages between the first and the last
        last: Rows on the last page of a multi-page document
    """

    single: int
    first: int
    middle: int
    last: int

    def __post_init__(self):
        """Validate that every limit is a positive integer."""
        for value in (self.single, self.first, self.middle, self.last):
            if not _is_positive_int(value):
                raise InvalidCapacityError(value)

    @classmethod
    def uniform(cls, rows: int) -> "PageCapacity":
        """Same row limit on every page."""
        return cls(single=rows, first=rows, middle=rows, last=rows)

    @classmethod
    def coerce(cls, value) -> "PageCapacity":
        """Accept a PageCapacity or a positive int (uniform capacity)."""
        if isinstance(value, PageCapacity):
            return value
        if not _is_positive_int(value):
            raise InvalidCapacityError(value)
        return cls.uniform(value)

    @property
    def max_rows(self) -> int:
        return max(self.single, self.first, self.middle, self.last)

    def for_page(self, is_first: bool, is_last: bool) -> int:
        if is_first and is_last:
            return self.single
        if is_first:
            return self.first
        if is_last:
            return self.last
        return self.middle


@dataclass(frozen=True)
class ColumnSpec:
    """Fixed-width item table column."""

    key: str  # "no", "name", "unit" or "quantity"
    title: str
    width: float
    align: str = "left"


@dataclass(frozen=True)
class LayoutConfig:
    """Measurement constants for one document variant.

    Attributes:
        variant: Variant tag this layout belongs to
        page_size: (width, height) in points

        # Typography
        monospace: If True, use the fixed-pitch font family
        chars_per_inch: Printer pitch for fixed-pitch layouts (None otherwise)
        font_size, small_font_size, title_font_size: Font sizes in points
        cell_padding: Horizontal padding inside table cells

        # Regions (top edge and height, points from the top of the page)
        header_top, header_height: Repeated header block
        info_top, info_height: First page delivery info block
        reserve_info_region: If True, non-first pages keep the info area blank
        table_top_first, table_top: Item table top on the first / other pages
        table_header_height, row_height: Table geometry
        signature_top, signature_height: Signature block (last page)
        signature_gap: Minimum space between the last row and the signature block
        footer_page_indicator: If True, also print "i/N" at the bottom right

        # Table and signatures
        columns: Fixed-width columns, left to right
        capacity: Row limits by page position
        signature_parties: Default signing roles for this variant
        signature_slot_width, signature_slot_gap: Slot geometry
        signature_align: "right" (packed at the right margin) or "spread"
        signature_label_align: "left" or "center"

        # Text
        document_title: Document type printed in the header
        org_placeholder: Printed when the organization has no name
        date_style: "iso" or "indonesian"
    """

    variant: DocumentVariant
    page_size: Tuple[float, float]
    margin_top: float
    margin_bottom: float
    margin_left: float
    margin_right: float

    monospace: bool
    chars_per_inch: float
    font_size: float
    small_font_size: float
    title_font_size: float
    cell_padding: float

    header_top: float
    header_height: float
    info_top: float
    info_height: float
    reserve_info_region: bool
    table_top_first: float
    table_top: float
    table_header_height: float
    row_height: float
    signature_top: float
    signature_height: float
    signature_gap: float
    footer_page_indicator: bool

    columns: Tuple[ColumnSpec, ...]
    capacity: PageCapacity
    signature_parties: Tuple[SignatureParty, ...]
    signature_slot_width: float
    signature_slot_gap: float
    signature_align: str
    signature_label_align: str

    document_title: str = DOCUMENT_TITLE
    org_placeholder: str = STANDARD_ORG_PLACEHOLDER
    date_style: str = "iso"

    def __post_init__(self):
        """Validate that columns and every page position fit the page."""
        if sum(col.width for col in self.columns) > self.content_width + 0.01:
            raise InvalidLayoutError(
                f"{self.variant.value}: columns are wider than the content area"
            )

        positions = {
            "single": (True, True),
            "first": (True, False),
            "middle": (False, False),
            "last": (False, True),
        }
        for position, (is_first, is_last) in positions.items():
            rows = self.capacity.for_page(is_first, is_last)
            bottom = self.rows_top(is_first) + rows * self.row_height
            limit = self.rows_limit(is_last)
            if bottom > limit + 0.01:
                raise InvalidLayoutError(
                    f"{self.variant.value}: {rows} rows on the {position} page end at "
                    f"{bottom:.1f}pt, past {limit:.1f}pt"
                )

    @property
    def page_width(self) -> float:
        return self.page_size[0]

    @property
    def page_height(self) -> float:
        return self.page_size[1]

    @property
    def content_left(self) -> float:
        return self.margin_left

    @property
    def content_right(self) -> float:
        return self.page_width - self.margin_right

    @property
    def content_width(self) -> float:
        return self.page_width - self.margin_left - self.margin_right

    @property
    def content_bottom(self) -> float:
        return self.page_height - self.margin_bottom

    def table_top_for(self, is_first: bool) -> float:
        return self.table_top_first if is_first else self.table_top

    def rows_top(self, is_first: bool) -> float:
        return self.table_top_for(is_first) + self.table_header_height

    def rows_limit(self, is_last: bool) -> float:
        """Lowest y the item rows may reach on a page."""
        if is_last:
            return self.signature_top - self.signature_gap
        return self.content_bottom

    def table_height(self, is_first: bool, is_last: bool) -> float:
        """Reserved table height: header plus the page's full row capacity."""
        rows = self.capacity.for_page(is_first, is_last)
        return self.table_header_height + rows * self.row_height


# ====== Standard (laser) layout ======
STANDARD_LAYOUT = LayoutConfig(
    variant=DocumentVariant.STANDARD,
    page_size=HALF_LETTER_LANDSCAPE,
    margin_top=14,
    margin_bottom=12,
    margin_left=16,
    margin_right=16,
    monospace=False,
    chars_per_inch=0,
    font_size=10.5,
    small_font_size=9.5,
    title_font_size=12.5,
    cell_padding=12,
    header_top=25,
    header_height=64,
    info_top=97,
    info_height=58,
    reserve_info_region=False,
    table_top_first=163,
    table_top=97,
    table_header_height=20,
    row_height=20,
    signature_top=306,
    signature_height=78,
    signature_gap=6,
    footer_page_indicator=False,
    columns=(
        ColumnSpec("name", "Barang", 400),
        ColumnSpec("unit", "Unit", 80),
        ColumnSpec("quantity", "Qty", 100, align="right"),
    ),
    capacity=PageCapacity(single=5, first=10, middle=13, last=9),
    signature_parties=(
        SignatureParty("Pengirim", "(Nama jelas)"),
        SignatureParty("Driver/Kurir", "(Nama jelas)"),
        SignatureParty("Penerima", "(Nama jelas)"),
    ),
    signature_slot_width=160,
    signature_slot_gap=10,
    signature_align="right",
    signature_label_align="left",
    org_placeholder=STANDARD_ORG_PLACEHOLDER,
    date_style="iso",
)


# ====== Dot-matrix (continuous form) layout ======
# Elite pitch: 12 characters per inch, Courier 10pt.
_DOT_MATRIX_CPI = 12


def _chars(count: int) -> float:
    return coordinate_utils.chars_to_points(count, _DOT_MATRIX_CPI)


DOT_MATRIX_LAYOUT = LayoutConfig(
    variant=DocumentVariant.DOT_MATRIX,
    page_size=HALF_LETTER_LANDSCAPE,
    margin_top=12,
    margin_bottom=10,
    margin_left=14,
    margin_right=14,
    monospace=True,
    chars_per_inch=_DOT_MATRIX_CPI,
    font_size=coordinate_utils.pitch_font_size(_DOT_MATRIX_CPI),
    small_font_size=coordinate_utils.pitch_font_size(_DOT_MATRIX_CPI),
    title_font_size=12,
    cell_padding=0,
    header_top=12,
    header_height=48,
    info_top=62,
    info_height=50,
    reserve_info_region=True,
    table_top_first=116,
    table_top=116,
    table_header_height=16,
    row_height=16,
    signature_top=316,
    signature_height=56,
    signature_gap=4,
    footer_page_indicator=True,
    columns=(
        ColumnSpec("no", "No", _chars(5)),
        ColumnSpec("name", "Nama Produk", _chars(66)),
        ColumnSpec("quantity", "Kuantitas", _chars(14), align="right"),
        ColumnSpec("unit", "Unit", _chars(12)),
    ),
    # Pre-printed forms keep the same table region on every page
    capacity=PageCapacity.uniform(11),
    signature_parties=(
        SignatureParty("Penerima,", "(             )"),
        SignatureParty("Driver,", "(             )"),
        SignatureParty("Pengirim,", "(             )"),
    ),
    signature_slot_width=160,
    signature_slot_gap=10,
    signature_align="spread",
    signature_label_align="center",
    org_placeholder=DOT_MATRIX_ORG_PLACEHOLDER,
    date_style="indonesian",
)


LAYOUTS = MappingProxyType({
    DocumentVariant.STANDARD: STANDARD_LAYOUT,
    DocumentVariant.DOT_MATRIX: DOT_MATRIX_LAYOUT,
})

_VARIANT_ALIASES = {
    "standard": DocumentVariant.STANDARD,
    "pdf": DocumentVariant.STANDARD,
    "dot-matrix": DocumentVariant.DOT_MATRIX,
    "dotmatrix": DocumentVariant.DOT_MATRIX,
    "dot_matrix": DocumentVariant.DOT_MATRIX,
}


def resolve_variant(value) -> DocumentVariant:
    """
    Resolve a variant tag.

    Args:
        value: DocumentVariant or its name ("standard", "dot-matrix",
               "dotmatrix", "dot_matrix")

    Returns:
        DocumentVariant

    Raises:
        UnsupportedVariantError: If the tag is unknown
    """
    if isinstance(value, DocumentVariant):
        return value
    if isinstance(value, str):
        variant = _VARIANT_ALIASES.get(value.strip().lower())
        if variant is not None:
            return variant
    raise UnsupportedVariantError(value)


def get_layout(variant) -> LayoutConfig:
    """Layout configuration for a variant tag."""
    return LAYOUTS[resolve_variant(variant)]
