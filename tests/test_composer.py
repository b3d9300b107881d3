"""
Tests for page composition invariants.

Run with: pytest tests/test_composer.py -v
"""
import dataclasses

import pytest

from delivery_note_pdf.exceptions import (
    ChunkOverflowError,
    MalformedChunkError,
    PageSequenceError,
)
from delivery_note_pdf.layout.composer import (
    DotMatrixPageComposer,
    StandardPageComposer,
    get_composer,
)
from delivery_note_pdf.layout.layout_config import DOT_MATRIX_LAYOUT, STANDARD_LAYOUT
from delivery_note_pdf.layout.primitives import (
    REGION_DELIVERY_INFO,
    REGION_FOOTER,
    REGION_HEADER,
    REGION_ITEM_TABLE,
    REGION_PAGE_INDICATOR,
    REGION_SIGNATURE,
    ImageOp,
    RectOp,
    TextOp,
)
from delivery_note_pdf.layout.renderer import DocumentRenderer
from delivery_note_pdf.models import DocumentHeader, ItemRow, PageChunk

LAYOUTS = [STANDARD_LAYOUT, DOT_MATRIX_LAYOUT]


def _compose(layout, items, header):
    return DocumentRenderer(layout).compose_pages(items, header)


class TestDocumentInvariants:
    """Invariants that hold for every variant."""

    @pytest.mark.parametrize("layout", LAYOUTS, ids=lambda l: l.variant.value)
    @pytest.mark.parametrize("count", [0, 1, 5, 6, 12, 30])
    def test_signature_only_on_last_page(self, layout, header, make_items, count):
        pages = _compose(layout, make_items(count), header)

        for page in pages[:-1]:
            assert not page.has_region(REGION_SIGNATURE)
        assert pages[-1].has_region(REGION_SIGNATURE)

    @pytest.mark.parametrize("layout", LAYOUTS, ids=lambda l: l.variant.value)
    def test_header_repeats_on_every_page(self, layout, header, make_items):
        pages = _compose(layout, make_items(30), header)
        assert len(pages) > 1

        first = pages[0].region(REGION_HEADER)
        for page in pages:
            region = page.region(REGION_HEADER)
            assert region.ops == first.ops
            assert header.document_number in " ".join(region.texts())

    @pytest.mark.parametrize("layout", LAYOUTS, ids=lambda l: l.variant.value)
    def test_page_indicator(self, layout, header, make_items):
        pages = _compose(layout, make_items(30), header)
        total = len(pages)

        for page in pages:
            texts = page.texts(REGION_PAGE_INDICATOR)
            assert texts == [f"Halaman {page.page_number}/{total}"]

    @pytest.mark.parametrize("layout", LAYOUTS, ids=lambda l: l.variant.value)
    def test_delivery_info_on_first_page_only(self, layout, header, make_items):
        pages = _compose(layout, make_items(30), header)

        assert pages[0].has_region(REGION_DELIVERY_INFO)
        for page in pages[1:]:
            assert not page.has_region(REGION_DELIVERY_INFO)

    @pytest.mark.parametrize("layout", LAYOUTS, ids=lambda l: l.variant.value)
    def test_every_item_printed_once_in_order(self, layout, header, make_items):
        items = list(reversed(make_items(25)))
        pages = _compose(layout, items, header)

        printed = [
            text
            for page in pages
            for text in page.texts(REGION_ITEM_TABLE)
            if text.startswith("Barang ")
        ]
        assert printed == [f"Barang {i}" for i in range(1, 26)]

    @pytest.mark.parametrize("layout", LAYOUTS, ids=lambda l: l.variant.value)
    def test_empty_items_still_print_header_and_signature(self, layout, header):
        pages = _compose(layout, [], header)

        assert len(pages) == 1
        page = pages[0]
        assert page.has_region(REGION_HEADER)
        assert page.has_region(REGION_SIGNATURE)
        assert page.texts(REGION_PAGE_INDICATOR) == ["Halaman 1/1"]

    @pytest.mark.parametrize("layout", LAYOUTS, ids=lambda l: l.variant.value)
    def test_composition_is_deterministic(self, layout, header, make_items):
        items = make_items(17)
        assert _compose(layout, items, header) == _compose(layout, items, header)

    @pytest.mark.parametrize("layout", LAYOUTS, ids=lambda l: l.variant.value)
    def test_signature_below_table(self, layout, header, make_items):
        for count in (1, 5, 6, 30):
            last = _compose(layout, make_items(count), header)[-1]
            assert last.region(REGION_ITEM_TABLE).bottom <= last.region(REGION_SIGNATURE).top


class TestChunkValidation:
    """Contract violations are raised, never patched."""

    @pytest.fixture
    def composer(self):
        return get_composer(STANDARD_LAYOUT)

    def test_negative_page_index(self, composer, header):
        chunk = PageChunk(items=(), page_index=-1, is_first_page=True, is_last_page=True)
        with pytest.raises(MalformedChunkError):
            composer.compose(chunk, header, STANDARD_LAYOUT.signature_parties, 1)

    def test_overflowing_chunk(self, composer, header, make_items):
        chunk = PageChunk(items=tuple(make_items(6)), page_index=0,
                          is_first_page=True, is_last_page=True)
        with pytest.raises(ChunkOverflowError) as exc:
            composer.compose(chunk, header, STANDARD_LAYOUT.signature_parties, 1)
        assert exc.value.capacity == 5
        assert isinstance(exc.value, MalformedChunkError)

    def test_index_outside_document(self, composer, header):
        chunk = PageChunk(items=(), page_index=2, is_first_page=False, is_last_page=True)
        with pytest.raises(PageSequenceError):
            composer.compose(chunk, header, STANDARD_LAYOUT.signature_parties, 2)

    def test_last_flag_on_middle_page(self, composer, header):
        chunk = PageChunk(items=(), page_index=1, is_first_page=False, is_last_page=True)
        with pytest.raises(PageSequenceError):
            composer.compose(chunk, header, STANDARD_LAYOUT.signature_parties, 3)

    def test_first_flag_on_later_page(self, composer, header):
        chunk = PageChunk(items=(), page_index=1, is_first_page=True, is_last_page=True)
        with pytest.raises(PageSequenceError):
            composer.compose(chunk, header, STANDARD_LAYOUT.signature_parties, 2)

    def test_zero_pages(self, composer, header):
        chunk = PageChunk(items=(), page_index=0, is_first_page=True, is_last_page=True)
        with pytest.raises(PageSequenceError):
            composer.compose(chunk, header, STANDARD_LAYOUT.signature_parties, 0)


class TestPlaceholders:
    """Missing data renders as placeholders."""

    def test_standard_placeholders(self):
        pages = _compose(STANDARD_LAYOUT, [ItemRow(name=None)], DocumentHeader())
        texts = pages[0].texts()

        assert "ORGANISASI" in texts
        assert "Tanggal: -" in texts
        # Name, unit and quantity cells
        table = pages[0].texts(REGION_ITEM_TABLE)
        assert table[-3:] == ["-", "-", "-"]

    def test_dot_matrix_placeholders(self):
        pages = _compose(DOT_MATRIX_LAYOUT, [], DocumentHeader())
        texts = pages[0].texts(REGION_HEADER)

        assert "invoiceku" in texts
        assert "Tanggal : -" in texts
        assert "No. Surat Jalan: -" in texts

    def test_missing_logo_draws_placeholder_frame(self, header):
        page = _compose(STANDARD_LAYOUT, [], header)[0]
        header_ops = page.region(REGION_HEADER).ops

        assert not any(isinstance(op, ImageOp) for op in header_ops)
        assert any(isinstance(op, RectOp) and op.width == StandardPageComposer.LOGO_BOX
                   for op in header_ops)

    def test_dot_matrix_missing_logo_draws_round_frame(self, header):
        page = _compose(DOT_MATRIX_LAYOUT, [], header)[0]
        frames = [op for op in page.region(REGION_HEADER).ops
                  if isinstance(op, RectOp) and op.width == DotMatrixPageComposer.LOGO_BOX]

        assert len(frames) == 1
        assert frames[0].radius == DotMatrixPageComposer.LOGO_BOX / 2
        assert not any(isinstance(op, ImageOp) for op in page.ops())

    def test_dot_matrix_header_text_clears_logo_frame(self, header, png_logo):
        org = dataclasses.replace(header.organization, logo=png_logo)
        with_logo = dataclasses.replace(header, organization=org)

        without = _compose(DOT_MATRIX_LAYOUT, [], header)[0].region(REGION_HEADER).ops
        with_image = _compose(DOT_MATRIX_LAYOUT, [], with_logo)[0].region(REGION_HEADER).ops

        def org_name_x(ops):
            return [op.x for op in ops if isinstance(op, TextOp) and op.text == "pt contoh niaga"]

        assert org_name_x(without) == org_name_x(with_image)
        assert org_name_x(without)[0] >= DOT_MATRIX_LAYOUT.content_left + DotMatrixPageComposer.LOGO_BOX

    def test_unreadable_logo_draws_placeholder_frame(self, header):
        org = dataclasses.replace(header.organization, logo=b"not an image")
        bad = dataclasses.replace(header, organization=org)
        page = _compose(STANDARD_LAYOUT, [], bad)[0]

        assert not any(isinstance(op, ImageOp) for op in page.ops())

    def test_logo_is_embedded(self, header, png_logo):
        org = dataclasses.replace(header.organization, logo=png_logo)
        with_logo = dataclasses.replace(header, organization=org)
        page = _compose(STANDARD_LAYOUT, [], with_logo)[0]

        images = [op for op in page.ops() if isinstance(op, ImageOp)]
        assert len(images) == 1
        # 60x30 source scaled into the 44pt box keeps its aspect ratio
        assert images[0].width == pytest.approx(44.0)
        assert images[0].height == pytest.approx(22.0)


class TestStandardVariant:
    """Standard layout specifics."""

    def test_date_is_iso(self, header):
        texts = _compose(STANDARD_LAYOUT, [], header)[0].texts(REGION_HEADER)
        assert "Tanggal: 2026-10-19" in texts

    def test_long_names_are_truncated(self, header):
        items = [ItemRow(name="Kabel " * 80, quantity=1, unit="roll")]
        texts = _compose(STANDARD_LAYOUT, items, header)[0].texts(REGION_ITEM_TABLE)

        name = [text for text in texts if text.startswith("Kabel")][0]
        assert name.endswith("...")
        assert len(name) < len("Kabel " * 80)

    def test_quantities_are_formatted(self, header):
        items = [ItemRow("a", quantity=3.0), ItemRow("b", quantity="2.50")]
        texts = _compose(STANDARD_LAYOUT, items, header)[0].texts(REGION_ITEM_TABLE)
        assert "3" in texts
        assert "2.5" in texts

    def test_no_footer(self, header, make_items):
        for page in _compose(STANDARD_LAYOUT, make_items(30), header):
            assert not page.has_region(REGION_FOOTER)

    def test_uses_proportional_font(self, header):
        page = _compose(STANDARD_LAYOUT, [], header)[0]
        fonts = {op.font for op in page.ops() if isinstance(op, TextOp)}
        assert fonts <= {"Helvetica", "Helvetica-Bold"}

    def test_signature_labels(self, header):
        page = _compose(STANDARD_LAYOUT, [], header)[0]
        texts = page.texts(REGION_SIGNATURE)
        assert [t for t in texts if not t.startswith("(")] == ["Pengirim", "Driver/Kurir", "Penerima"]


class TestDotMatrixVariant:
    """Dot-matrix layout specifics."""

    def test_date_is_indonesian(self, header):
        texts = _compose(DOT_MATRIX_LAYOUT, [], header)[0].texts(REGION_HEADER)
        assert "Tanggal : 19 Okt 2026" in texts

    def test_row_numbers_continue_across_pages(self, header, make_items):
        pages = _compose(DOT_MATRIX_LAYOUT, make_items(15), header)
        assert len(pages) == 2

        second_table = pages[1].texts(REGION_ITEM_TABLE)
        # Column titles first, then No / name / quantity / unit per row
        assert second_table[4:8] == ["12", "Barang 12", "12", "pcs"]

    def test_table_region_is_fixed(self, header, make_items):
        pages = _compose(DOT_MATRIX_LAYOUT, make_items(15), header)
        tables = [page.region(REGION_ITEM_TABLE) for page in pages]
        assert tables[0].top == tables[1].top
        assert tables[0].height == tables[1].height

    def test_footer_page_number(self, header, make_items):
        pages = _compose(DOT_MATRIX_LAYOUT, make_items(15), header)
        assert [page.texts(REGION_FOOTER) for page in pages] == [["1/2"], ["2/2"]]

    def test_uses_fixed_pitch_font(self, header):
        page = _compose(DOT_MATRIX_LAYOUT, [], header)[0]
        fonts = {op.font for op in page.ops() if isinstance(op, TextOp)}
        assert fonts <= {"Courier", "Courier-Bold"}

    def test_composer_type(self):
        assert isinstance(get_composer(DOT_MATRIX_LAYOUT), DotMatrixPageComposer)
        assert isinstance(get_composer(STANDARD_LAYOUT), StandardPageComposer)


class TestVariantIsolation:
    """Both variants print the same data the same way, with their own geometry."""

    def test_same_order_and_signature_labels(self, header, make_items):
        items = list(reversed(make_items(14)))
        parties = DOT_MATRIX_LAYOUT.signature_parties

        def names(pages):
            return [text for page in pages for text in page.texts(REGION_ITEM_TABLE)
                    if text.startswith("Barang ")]

        standard = DocumentRenderer(STANDARD_LAYOUT).compose_pages(items, header, parties)
        dot_matrix = DocumentRenderer(DOT_MATRIX_LAYOUT).compose_pages(items, header, parties)

        assert names(standard) == names(dot_matrix)
        assert standard[-1].texts(REGION_SIGNATURE) == dot_matrix[-1].texts(REGION_SIGNATURE)
        # 14 rows: standard splits 10 + 4, dot-matrix 11 + 3
        assert [len(p.texts(REGION_ITEM_TABLE)) for p in standard] != \
            [len(p.texts(REGION_ITEM_TABLE)) for p in dot_matrix]

    def test_layouts_do_not_share_state(self):
        assert STANDARD_LAYOUT is not DOT_MATRIX_LAYOUT
        assert STANDARD_LAYOUT.capacity != DOT_MATRIX_LAYOUT.capacity
        assert STANDARD_LAYOUT.columns != DOT_MATRIX_LAYOUT.columns
