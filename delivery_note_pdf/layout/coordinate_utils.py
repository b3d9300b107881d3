"""Coordinate Conversion Utilities

Pure helpers for converting between the coordinate systems used by the
layout engine:

- Composition coordinates: points with origin at the top-left of the page,
  y growing downward (how forms are measured on paper)
- ReportLab coordinates: points with origin at the bottom-left
- Printer units: inches, characters per inch and lines per inch for the
  fixed-pitch dot-matrix form

All functions are pure (no side effects) and can be tested in isolation.
"""

from typing import Tuple

from ..config import POINTS_PER_INCH


def inches_to_points(inches: float) -> float:
    """
    Convert inches to points.

    Examples:
        >>> inches_to_points(8.5)
        612.0
    """
    return inches * POINTS_PER_INCH


def chars_to_points(chars: int, chars_per_inch: float) -> float:
    """
    Width of a run of fixed-pitch characters in points.

    Args:
        chars: Number of characters
        chars_per_inch: Printer pitch (10 = pica, 12 = elite)

    Returns:
        Width in points

    Examples:
        >>> chars_to_points(12, 12)
        72.0
    """
    return chars * POINTS_PER_INCH / chars_per_inch


def lines_to_points(lines: float, lines_per_inch: float) -> float:
    """
    Height of a number of printer lines in points.

    Examples:
        >>> lines_to_points(6, 6)
        72.0
    """
    return lines * POINTS_PER_INCH / lines_per_inch


def pitch_font_size(chars_per_inch: float) -> float:
    """
    Courier font size whose advance matches a printer pitch.

    Courier glyphs advance 0.6 em, so 12 cpi needs a 10pt font.
    """
    return POINTS_PER_INCH / chars_per_inch / 0.6


def flip_y(top: float, height: float, page_height: float) -> float:
    """
    Convert the top edge of a box in composition coordinates to the
    bottom edge in ReportLab coordinates.

    Args:
        top: Distance from the top of the page to the top of the box
        height: Box height (0 for a baseline or a line)
        page_height: Page height in points

    Returns:
        ReportLab y of the box's bottom edge

    Examples:
        >>> flip_y(10, 20, 396)
        366
    """
    return page_height - top - height


def aligned_x(x: float, width: float, align: str) -> float:
    """
    Anchor x for drawing text inside a cell.

    Args:
        x: Left edge of the cell
        width: Cell width
        align: "left", "center" or "right"

    Returns:
        x to pass to drawString / drawCentredString / drawRightString
    """
    if align == "right":
        return x + width
    if align == "center":
        return x + width / 2
    return x


def fit_within(src_width: float, src_height: float, box_width: float, box_height: float) -> Tuple[float, float]:
    """
    Scale a source size to fit inside a box, preserving aspect ratio.

    Args:
        src_width, src_height: Source size (any unit, must be positive)
        box_width, box_height: Target box in points

    Returns:
        (width, height) in points

    Examples:
        >>> fit_within(200, 100, 44, 44)
        (44.0, 22.0)
    """
    scale = min(box_width / src_width, box_height / src_height)
    return (float(src_width * scale), float(src_height * scale))
