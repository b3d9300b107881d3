"""Signature Block Builder

Builds the row of signing slots printed at the bottom of the last page.
The block depends only on the party list and the variant geometry, never on
document content.
"""
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from ..config import ACCENT, CARD_BORDER, FAINT, INK, SIGN_RULE
from ..exceptions import InvalidLayoutError
from ..models import SignatureParty
from .font_manager import FontManager
from .layout_config import LayoutConfig
from .primitives import DrawOp, LineOp, RectOp, TextOp

MIN_SLOT_WIDTH = 60.0
SPREAD_PADDING = 10.0


@dataclass(frozen=True)
class SignatureSlot:
    """Horizontal placement of one party's slot."""

    party: SignatureParty
    x: float
    width: float


@dataclass(frozen=True)
class SignatureBlock:
    """Positioned signature slots and their drawing ops."""

    top: float
    height: float
    slots: Tuple[SignatureSlot, ...]
    ops: Tuple[DrawOp, ...]

    @property
    def labels(self) -> List[str]:
        return [slot.party.label for slot in self.slots]


class SignatureBlockBuilder:
    """Lays out signature slots for one variant."""

    def __init__(self, layout: LayoutConfig, fonts: FontManager):
        self.layout = layout
        self.fonts = fonts

    def build(self, parties: Sequence[SignatureParty]) -> SignatureBlock:
        """
        Build the signature block for an ordered party list.

        Args:
            parties: Signing roles, left to right

        Returns:
            SignatureBlock positioned at the layout's signature area

        Raises:
            InvalidLayoutError: If there are no parties or they do not fit
        """
        parties = tuple(parties)
        if not parties:
            raise InvalidLayoutError("Signature block needs at least one party")

        slots = self._place_slots(parties)

        ops: List[DrawOp] = []
        for slot in slots:
            if self.layout.monospace:
                ops.extend(self._form_slot_ops(slot))
            else:
                ops.extend(self._card_slot_ops(slot))

        return SignatureBlock(
            top=self.layout.signature_top,
            height=self.layout.signature_height,
            slots=tuple(slots),
            ops=tuple(ops),
        )

    def _place_slots(self, parties: Tuple[SignatureParty, ...]) -> List[SignatureSlot]:
        layout = self.layout
        count = len(parties)
        gap = layout.signature_slot_gap

        available = layout.content_width
        if layout.signature_align == "spread":
            available -= 2 * SPREAD_PADDING

        width = min(layout.signature_slot_width, (available - (count - 1) * gap) / count)
        if width < MIN_SLOT_WIDTH:
            raise InvalidLayoutError(
                f"{count} signature slots do not fit on a {layout.variant.value} page"
            )

        if layout.signature_align == "spread":
            left = layout.content_left + SPREAD_PADDING
            if count == 1:
                positions = [left + (available - width) / 2]
            else:
                step = width + (available - count * width) / (count - 1)
                positions = [left + i * step for i in range(count)]
        else:
            total = count * width + (count - 1) * gap
            left = layout.content_right - total
            positions = [left + i * (width + gap) for i in range(count)]

        return [
            SignatureSlot(party=party, x=x, width=width)
            for party, x in zip(parties, positions)
        ]

    def _label_op(self, slot: SignatureSlot, y: float, inset: float, color: str) -> TextOp:
        layout = self.layout
        size = layout.font_size
        text = self.fonts.fit_text(slot.party.label, slot.width - 2 * inset, size, bold=True)
        if layout.signature_label_align == "center":
            return TextOp(slot.x, y, text, self.fonts.get_font_name(bold=True), size,
                          align="center", color=color, width=slot.width)
        return TextOp(slot.x + inset, y, text, self.fonts.get_font_name(bold=True), size, color=color)

    def _hint_op(self, slot: SignatureSlot, y: float, inset: float, color: str) -> TextOp:
        layout = self.layout
        size = layout.small_font_size
        text = self.fonts.fit_text(slot.party.hint, slot.width - 2 * inset, size)
        if layout.signature_label_align == "center":
            return TextOp(slot.x, y, text, self.fonts.get_font_name(), size,
                          align="center", color=color, width=slot.width)
        return TextOp(slot.x + inset, y, text, self.fonts.get_font_name(), size, color=color)

    def _card_slot_ops(self, slot: SignatureSlot) -> List[DrawOp]:
        """Rounded box with a colored label, signing rule and hint."""
        top = self.layout.signature_top
        box_height = self.layout.signature_height - 8
        inset = 10.0

        rule_y = top + 43
        ops: List[DrawOp] = [
            RectOp(slot.x, top, slot.width, box_height, stroke=CARD_BORDER, radius=10),
            self._label_op(slot, top + 19, inset, ACCENT),
            LineOp(slot.x + inset, rule_y, slot.x + slot.width - inset, rule_y,
                   color=SIGN_RULE, line_width=1),
        ]
        if slot.party.hint:
            ops.append(self._hint_op(slot, rule_y + 14, inset, FAINT))
        return ops

    def _form_slot_ops(self, slot: SignatureSlot) -> List[DrawOp]:
        """Centered label, blank signing space, rule and hint (monochrome)."""
        top = self.layout.signature_top
        rule_inset = slot.width * 0.125

        rule_y = top + 42
        ops: List[DrawOp] = [
            self._label_op(slot, top + 10, 0, INK),
            LineOp(slot.x + rule_inset, rule_y, slot.x + slot.width - rule_inset, rule_y,
                   color=INK, line_width=0.5),
        ]
        if slot.party.hint:
            ops.append(self._hint_op(slot, rule_y + 10, 0, INK))
        return ops
