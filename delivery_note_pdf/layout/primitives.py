"""Drawable Page Tree

A composed page is an immutable tree: named regions holding primitive drawing
operations. Coordinates are points from the top-left corner of the page; the
painter flips them when drawing with ReportLab.
"""
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple, Union

from ..config import INK

# Region names
REGION_HEADER = "header"
REGION_PAGE_INDICATOR = "page_indicator"
REGION_DELIVERY_INFO = "delivery_info"
REGION_ITEM_TABLE = "item_table"
REGION_SIGNATURE = "signature"
REGION_FOOTER = "footer"


@dataclass(frozen=True)
class TextOp:
    """Single line of text; `y` is the baseline."""

    x: float
    y: float
    text: str
    font: str
    size: float
    align: str = "left"
    color: str = INK
    width: float = 0.0  # cell width used for center/right alignment


@dataclass(frozen=True)
class LineOp:
    x1: float
    y1: float
    x2: float
    y2: float
    color: str = INK
    line_width: float = 0.5


@dataclass(frozen=True)
class RectOp:
    x: float
    y: float
    width: float
    height: float
    stroke: Optional[str] = INK
    fill: Optional[str] = None
    radius: float = 0.0
    line_width: float = 0.5


@dataclass(frozen=True)
class ImageOp:
    """Raster image scaled into the box; `y` is the top edge."""

    x: float
    y: float
    width: float
    height: float
    data: bytes = field(repr=False)
    name: str = "image"


DrawOp = Union[TextOp, LineOp, RectOp, ImageOp]


@dataclass(frozen=True)
class Region:
    """Named area of a page and the ops drawn inside it."""

    name: str
    top: float
    height: float
    ops: Tuple[DrawOp, ...] = ()

    @property
    def bottom(self) -> float:
        return self.top + self.height

    def texts(self) -> List[str]:
        return [op.text for op in self.ops if isinstance(op, TextOp)]


@dataclass(frozen=True)
class ComposedPage:
    """Fully composed page ready for painting."""

    page_index: int
    total_pages: int
    width: float
    height: float
    regions: Tuple[Region, ...]

    @property
    def page_number(self) -> int:
        return self.page_index + 1

    def region(self, name: str) -> Optional[Region]:
        for region in self.regions:
            if region.name == name:
                return region
        return None

    def has_region(self, name: str) -> bool:
        return self.region(name) is not None

    def ops(self) -> Iterator[DrawOp]:
        for region in self.regions:
            yield from region.ops

    def texts(self, region: Optional[str] = None) -> List[str]:
        """All text strings on the page, or in one region."""
        if region is not None:
            found = self.region(region)
            return found.texts() if found else []
        return [op.text for op in self.ops() if isinstance(op, TextOp)]
