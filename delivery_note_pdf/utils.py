"""Utilities Module

Text, number, date and filename helpers shared by the layout engine and the
request handler.
"""
import io
import re
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional, Tuple

from PIL import Image, UnidentifiedImageError

from .config import (
    DEFAULT_FILENAME_STEM,
    DOT_MATRIX_FILENAME_SUFFIX,
    INDONESIAN_MONTHS,
    PLACEHOLDER,
)

_ISO_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})")

# Quantities beyond this many integer digits print as given
_MAX_QUANTITY_DIGITS = 18


def safe_text(value) -> str:
    """
    Convert a value to single-line printable text.

    Args:
        value: Any value (None becomes "")

    Returns:
        Text with whitespace runs collapsed to one space and trimmed
    """
    if value is None:
        return ""
    return re.sub(r"\s+", " ", str(value)).strip()


def text_or_placeholder(value, placeholder: str = PLACEHOLDER) -> str:
    """Return printable text, or the placeholder when it is blank."""
    return safe_text(value) or placeholder


def format_quantity(value) -> str:
    """
    Format an item quantity for printing.

    Whole numbers print without decimals; fractional numbers keep their
    precision without trailing zeros. Non-numeric input prints as text.

    Args:
        value: int, float, Decimal, numeric string or None

    Returns:
        Formatted quantity, or "-" when blank

    Examples:
        >>> format_quantity(3.0)
        '3'
        >>> format_quantity("2.50")
        '2.5'
    """
    if value is None:
        return PLACEHOLDER

    if isinstance(value, bool):
        return str(value)

    if isinstance(value, float):
        number = Decimal(repr(value))
    else:
        try:
            number = Decimal(safe_text(value))
        except InvalidOperation:
            return text_or_placeholder(value)

    if not number.is_finite() or abs(number.adjusted()) > _MAX_QUANTITY_DIGITS:
        return text_or_placeholder(value)

    if number == number.to_integral_value():
        return str(int(number))

    return format(number.normalize(), "f")


def normalize_document_date(value) -> Optional[str]:
    """
    Truncate an ISO 8601 date or timestamp to its YYYY-MM-DD part.

    Args:
        value: date, ISO string, or None

    Returns:
        "YYYY-MM-DD", the input text if it is not ISO shaped, or None if blank
    """
    if isinstance(value, date):
        return value.strftime("%Y-%m-%d")

    text = safe_text(value)
    if not text:
        return None

    match = _ISO_DATE.match(text)
    if match:
        return match.group(0)
    return text


def format_document_date(value, style: str = "iso") -> str:
    """
    Format a document date for the page header.

    Args:
        value: date, ISO string, or None
        style: "iso" ("2026-10-19") or "indonesian" ("19 Okt 2026")

    Returns:
        Formatted date, or "-" when blank
    """
    normalized = normalize_document_date(value)
    if not normalized:
        return PLACEHOLDER

    if style != "indonesian":
        return normalized

    match = _ISO_DATE.match(normalized)
    if not match:
        return normalized

    year, month, day = (int(part) for part in match.groups())
    try:
        date(year, month, day)
    except ValueError:
        return normalized
    return f"{day:02d} {INDONESIAN_MONTHS[month - 1]} {year}"


def clean_filename(name: str) -> str:
    """
    Clean a document number for use as a filename stem.

    Args:
        name: Document number such as "SJ/2026/0001"

    Returns:
        Cleaned stem ("SJ-2026-0001"), or "" if nothing usable remains
    """
    name = safe_text(name)

    # Path separators and spaces become dashes
    name = re.sub(r"[\\/\s]+", "-", name)

    # Drop anything that is not a word character, dot or dash
    name = re.sub(r"[^\w.-]", "", name)
    name = name.strip(".-")

    # Limit length
    if len(name) > 80:
        name = name[:80]

    return name


def suggest_filename(document_number, dot_matrix: bool = False) -> str:
    """
    Suggest a download filename derived from the document number.

    Args:
        document_number: Delivery note number (may be blank)
        dot_matrix: If True, append the dot-matrix suffix

    Returns:
        Filename with .pdf extension
    """
    stem = clean_filename(document_number or "") or DEFAULT_FILENAME_STEM
    if dot_matrix:
        stem += DOT_MATRIX_FILENAME_SUFFIX
    return f"{stem}.pdf"


def probe_image(data: Optional[bytes]) -> Optional[Tuple[int, int]]:
    """
    Check that image bytes can be decoded.

    Args:
        data: Raw image bytes

    Returns:
        (width, height) in pixels, or None if the data is not a usable image
    """
    if not data:
        return None

    try:
        with Image.open(io.BytesIO(data)) as img:
            img.verify()
        # verify() leaves the image unusable; reopen to read the size
        with Image.open(io.BytesIO(data)) as img:
            width, height = img.size
    except (UnidentifiedImageError, OSError, ValueError, SyntaxError):
        return None

    if width <= 0 or height <= 0:
        return None
    return width, height
