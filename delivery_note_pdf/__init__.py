"""Delivery Note PDF

Paginated delivery note ("Surat Jalan") rendering in two variants: a
half-letter landscape standard layout and a fixed-pitch dot-matrix form.
"""
from .exceptions import DeliveryNotePdfError
from .layout import DocumentRenderer, PageCapacity, chunk_items, order_items, render_delivery_note
from .models import (
    DocumentHeader,
    DocumentVariant,
    ItemRow,
    OrganizationProfile,
    PageChunk,
    SignatureParty,
)
from .pipeline import RenderRequestHandler
from .render_options import RenderRequest
from .render_result import RenderedDocument, RenderResult
from .sources import (
    InMemoryDeliveryNoteSource,
    JsonDeliveryNoteSource,
    LogoResolver,
    parse_delivery_note,
)
from .utils import suggest_filename

__version__ = "0.1.0"

__all__ = [
    'render_delivery_note',
    'suggest_filename',
    'order_items',
    'chunk_items',
    'DocumentRenderer',
    'PageCapacity',
    'DocumentHeader',
    'DocumentVariant',
    'ItemRow',
    'OrganizationProfile',
    'PageChunk',
    'SignatureParty',
    'RenderRequest',
    'RenderRequestHandler',
    'RenderResult',
    'RenderedDocument',
    'InMemoryDeliveryNoteSource',
    'JsonDeliveryNoteSource',
    'LogoResolver',
    'parse_delivery_note',
    'DeliveryNotePdfError',
]
