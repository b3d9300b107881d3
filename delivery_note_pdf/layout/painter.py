"""Page Painter Module

Draws composed pages onto a ReportLab canvas. Composition coordinates have
their origin at the top-left; every op is flipped to ReportLab's bottom-left
origin here and nowhere else.
"""
import io

from reportlab.lib.colors import HexColor
from reportlab.lib.utils import ImageReader

from ..exceptions import ImageRenderingError
from . import coordinate_utils
from .primitives import ComposedPage, ImageOp, LineOp, RectOp, TextOp


class PagePainter:
    """Paints ComposedPage trees, one canvas page each."""

    def __init__(self, canvas):
        """
        Initialize painter.

        Args:
            canvas: ReportLab Canvas the pages are drawn on
        """
        self._canvas = canvas

    def paint(self, page: ComposedPage):
        """
        Draw every op of the page and finish the canvas page.

        Args:
            page: Composed page
        """
        self._canvas.setPageSize((page.width, page.height))

        for op in page.ops():
            if isinstance(op, TextOp):
                self._draw_text(op, page.height)
            elif isinstance(op, LineOp):
                self._draw_line(op, page.height)
            elif isinstance(op, RectOp):
                self._draw_rect(op, page.height)
            elif isinstance(op, ImageOp):
                self._draw_image(op, page.height)

        self._canvas.showPage()

    def _draw_text(self, op: TextOp, page_height: float):
        if not op.text:
            return
        canvas = self._canvas
        canvas.setFillColor(HexColor(op.color))
        canvas.setFont(op.font, op.size)

        x = coordinate_utils.aligned_x(op.x, op.width, op.align)
        y = coordinate_utils.flip_y(op.y, 0, page_height)
        if op.align == "right":
            canvas.drawRightString(x, y, op.text)
        elif op.align == "center":
            canvas.drawCentredString(x, y, op.text)
        else:
            canvas.drawString(x, y, op.text)

    def _draw_line(self, op: LineOp, page_height: float):
        canvas = self._canvas
        canvas.setStrokeColor(HexColor(op.color))
        canvas.setLineWidth(op.line_width)
        canvas.line(
            op.x1, coordinate_utils.flip_y(op.y1, 0, page_height),
            op.x2, coordinate_utils.flip_y(op.y2, 0, page_height),
        )

    def _draw_rect(self, op: RectOp, page_height: float):
        canvas = self._canvas
        stroke = 1 if op.stroke else 0
        fill = 1 if op.fill else 0
        if not (stroke or fill):
            return

        if op.stroke:
            canvas.setStrokeColor(HexColor(op.stroke))
            canvas.setLineWidth(op.line_width)
        if op.fill:
            canvas.setFillColor(HexColor(op.fill))

        y = coordinate_utils.flip_y(op.y, op.height, page_height)
        if op.radius:
            canvas.roundRect(op.x, y, op.width, op.height, op.radius, stroke=stroke, fill=fill)
        else:
            canvas.rect(op.x, y, op.width, op.height, stroke=stroke, fill=fill)

    def _draw_image(self, op: ImageOp, page_height: float):
        y = coordinate_utils.flip_y(op.y, op.height, page_height)
        try:
            reader = ImageReader(io.BytesIO(op.data))
            self._canvas.drawImage(reader, op.x, y, width=op.width, height=op.height,
                                   mask='auto', preserveAspectRatio=True, anchor='c')
        except (OSError, ValueError) as e:
            raise ImageRenderingError(op.name, str(e)) from e
