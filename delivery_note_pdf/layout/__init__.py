"""Layout Package

This package lays out and paints delivery note PDFs:

Core Classes:
- DocumentRenderer: Main orchestrator class (from renderer.py)
- PageComposer: Builds one ComposedPage per chunk (standard / dot-matrix)
- SignatureBlockBuilder: Positions the last-page signature slots
- PagePainter: Paints composed pages onto a ReportLab canvas
- FontManager: Font registration, metrics and truncation

Configuration:
- LayoutConfig, PageCapacity: Immutable per-variant geometry
- STANDARD_LAYOUT, DOT_MATRIX_LAYOUT, get_layout, resolve_variant

Utilities:
- coordinate_utils: Unit and coordinate conversion functions

Helper Functions:
- order_items, chunk_items: Print order and page boundaries
- render_delivery_note: Render a delivery note in one call
"""

# Import core classes
from .renderer import DocumentRenderer, collect_warnings, render_delivery_note
from .composer import (
    DotMatrixPageComposer,
    PageComposer,
    StandardPageComposer,
    get_composer,
)
from .signature import SignatureBlock, SignatureBlockBuilder
from .painter import PagePainter
from .font_manager import FontManager
from .chunker import chunk_items, order_items, page_bounds
from .layout_config import (
    DOT_MATRIX_LAYOUT,
    LAYOUTS,
    STANDARD_LAYOUT,
    ColumnSpec,
    LayoutConfig,
    PageCapacity,
    get_layout,
    resolve_variant,
)
from .primitives import ComposedPage, ImageOp, LineOp, RectOp, Region, TextOp
from . import coordinate_utils

# Expose public API
__all__ = [
    # Main renderer class
    'DocumentRenderer',

    # Helper functions
    'render_delivery_note',
    'collect_warnings',
    'order_items',
    'chunk_items',
    'page_bounds',
    'get_layout',
    'resolve_variant',
    'get_composer',

    # Component classes
    'PageComposer',
    'StandardPageComposer',
    'DotMatrixPageComposer',
    'SignatureBlock',
    'SignatureBlockBuilder',
    'PagePainter',
    'FontManager',

    # Layout configuration
    'LayoutConfig',
    'PageCapacity',
    'ColumnSpec',
    'LAYOUTS',
    'STANDARD_LAYOUT',
    'DOT_MATRIX_LAYOUT',

    # Composed page tree
    'ComposedPage',
    'Region',
    'TextOp',
    'LineOp',
    'RectOp',
    'ImageOp',

    # Utilities module
    'coordinate_utils',
]
