"""
Tests for the signature block builder.

Run with: pytest tests/test_signature.py -v
"""
import pytest

from delivery_note_pdf.exceptions import InvalidLayoutError
from delivery_note_pdf.layout.font_manager import FontManager
from delivery_note_pdf.layout.layout_config import DOT_MATRIX_LAYOUT, STANDARD_LAYOUT
from delivery_note_pdf.layout.renderer import DocumentRenderer
from delivery_note_pdf.layout.primitives import REGION_SIGNATURE
from delivery_note_pdf.layout.signature import MIN_SLOT_WIDTH, SignatureBlockBuilder
from delivery_note_pdf.models import SignatureParty


def _builder(layout):
    return SignatureBlockBuilder(layout, FontManager(monospace=layout.monospace))


class TestSignatureBlockBuilder:
    """Tests for slot placement and content."""

    def test_labels_keep_party_order(self):
        parties = [SignatureParty("Gudang"), SignatureParty("Penerima")]
        block = _builder(STANDARD_LAYOUT).build(parties)
        assert block.labels == ["Gudang", "Penerima"]

    def test_standard_slots_packed_at_right_margin(self):
        block = _builder(STANDARD_LAYOUT).build(STANDARD_LAYOUT.signature_parties)
        last = block.slots[-1]
        assert last.x + last.width == pytest.approx(STANDARD_LAYOUT.content_right)

    def test_dot_matrix_slots_spread(self):
        block = _builder(DOT_MATRIX_LAYOUT).build(DOT_MATRIX_LAYOUT.signature_parties)
        first, last = block.slots[0], block.slots[-1]

        assert first.x > DOT_MATRIX_LAYOUT.content_left
        assert last.x + last.width < DOT_MATRIX_LAYOUT.content_right
        left_gap = first.x - DOT_MATRIX_LAYOUT.content_left
        right_gap = DOT_MATRIX_LAYOUT.content_right - (last.x + last.width)
        assert left_gap == pytest.approx(right_gap)

    def test_slots_do_not_overlap(self):
        for layout in (STANDARD_LAYOUT, DOT_MATRIX_LAYOUT):
            block = _builder(layout).build(layout.signature_parties)
            for left, right in zip(block.slots, block.slots[1:]):
                assert left.x + left.width <= right.x

    def test_block_sits_at_signature_area(self):
        block = _builder(STANDARD_LAYOUT).build(STANDARD_LAYOUT.signature_parties)
        assert block.top == STANDARD_LAYOUT.signature_top
        assert block.height == STANDARD_LAYOUT.signature_height

    def test_block_does_not_depend_on_items(self, header, make_items):
        renderer = DocumentRenderer(STANDARD_LAYOUT)
        short = renderer.compose_pages(make_items(1), header)[-1]
        long = renderer.compose_pages(make_items(40), header)[-1]
        assert short.region(REGION_SIGNATURE) == long.region(REGION_SIGNATURE)

    def test_custom_parties_on_last_page(self, header, make_items):
        parties = [SignatureParty("Checker"), SignatureParty("Security")]
        pages = DocumentRenderer(STANDARD_LAYOUT).compose_pages(make_items(3), header, parties)
        assert pages[-1].texts(REGION_SIGNATURE) == ["Checker", "Security"]

    def test_empty_party_list(self):
        with pytest.raises(InvalidLayoutError):
            _builder(STANDARD_LAYOUT).build([])

    def test_too_many_parties(self):
        count = int(STANDARD_LAYOUT.content_width // MIN_SLOT_WIDTH) + 1
        parties = [SignatureParty(f"P{i}") for i in range(count)]
        with pytest.raises(InvalidLayoutError):
            _builder(STANDARD_LAYOUT).build(parties)
