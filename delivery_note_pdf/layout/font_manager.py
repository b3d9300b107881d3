"""Font Manager Module

Handles font registration, fixed-pitch fallbacks and text fitting.
"""
import logging
import os
from typing import Optional

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont, TTFError

from .. import config
from ..exceptions import FontError

logger = logging.getLogger(__name__)

ELLIPSIS = "..."


class FontManager:
    """Provides font names and metrics for one font family.

    This class handles:
    - Optional TrueType registration from configured paths
    - Fallback to the PDF base-14 fonts (Helvetica or Courier)
    - Bold variant selection
    - Measuring and truncating text to a cell width

    Attributes:
        monospace: True for the fixed-pitch family used by dot-matrix forms
        font_name: Name of the registered regular font (e.g., 'Helvetica')
        font_name_bold: Name of the registered bold font (e.g., 'Helvetica-Bold')
    """

    def __init__(self, monospace: bool = False,
                 font_path: Optional[str] = None,
                 bold_font_path: Optional[str] = None):
        """
        Initialize FontManager and register configured fonts.

        Args:
            monospace: If True, use the fixed-pitch family
            font_path: Optional TTF for the regular weight (defaults to config)
            bold_font_path: Optional TTF for the bold weight (defaults to config)
        """
        self.monospace = monospace
        if monospace:
            self.font_name = 'Courier'
            self.font_name_bold = 'Courier-Bold'
            default_path, default_bold = config.MONO_FONT_PATH, config.MONO_FONT_BOLD_PATH
        else:
            self.font_name = 'Helvetica'
            self.font_name_bold = 'Helvetica-Bold'
            default_path, default_bold = config.FONT_PATH, config.FONT_BOLD_PATH

        self._setup_fonts(font_path or default_path, bold_font_path or default_bold)

    def _setup_fonts(self, font_path: str, bold_font_path: str):
        """
        Register TrueType fonts when paths are configured.

        A configured path that does not exist or cannot be parsed is a setup
        error. With nothing configured the base-14 fonts are used, which need
        no embedding and keep output identical across machines.
        """
        prefix = 'DeliveryNoteMono' if self.monospace else 'DeliveryNoteSans'

        if font_path:
            self.font_name = self._register(f'{prefix}', font_path)
            # Without a bold face, bold text uses the regular face
            self.font_name_bold = self.font_name

        if bold_font_path:
            self.font_name_bold = self._register(f'{prefix}-Bold', bold_font_path)

        logger.debug("Fonts in use: %s / %s", self.font_name, self.font_name_bold)

    @staticmethod
    def _register(name: str, path: str) -> str:
        if name in pdfmetrics.getRegisteredFontNames():
            return name

        if not os.path.exists(path):
            raise FontError(f"Font file not found: {path}")

        try:
            pdfmetrics.registerFont(TTFont(name, path))
        except (TTFError, OSError) as e:
            raise FontError(f"Failed to register font {path}: {e}") from e

        logger.info("Registered font %s from %s", name, path)
        return name

    def get_font_name(self, bold: bool = False) -> str:
        """
        Get the registered font name.

        Args:
            bold: If True, return the bold variant; otherwise return regular font

        Returns:
            Font name string suitable for use with ReportLab
        """
        return self.font_name_bold if bold else self.font_name

    def string_width(self, text: str, size: float, bold: bool = False) -> float:
        """Width of `text` in points."""
        return pdfmetrics.stringWidth(text, self.get_font_name(bold), size)

    def fit_text(self, text: str, width: float, size: float, bold: bool = False) -> str:
        """
        Truncate text so it fits in `width` points.

        Over-long text keeps as many leading characters as fit, followed by an
        ellipsis. Rows never wrap, so the row height stays fixed.

        Args:
            text: Single-line text
            width: Available width in points
            size: Font size
            bold: Measure with the bold face

        Returns:
            Text that fits (possibly empty if not even the ellipsis fits)
        """
        if width <= 0:
            return ""
        if self.string_width(text, size, bold) <= width:
            return text

        if self.string_width(ELLIPSIS, size, bold) > width:
            return ""

        # Binary search for the longest prefix that fits with the ellipsis
        low, high = 0, len(text)
        while low < high:
            mid = (low + high + 1) // 2
            if self.string_width(text[:mid].rstrip() + ELLIPSIS, size, bold) <= width:
                low = mid
            else:
                high = mid - 1
        return text[:low].rstrip() + ELLIPSIS
