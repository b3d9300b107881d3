"""Custom Exception Hierarchy

Exception hierarchy for delivery note rendering. Contract violations indicate
a defect in the calling layer and are never patched; data-source errors come
from the collaborator that resolves documents before rendering.
"""


class DeliveryNotePdfError(Exception):
    """Base exception for all delivery note rendering errors.

    Catching this exception will catch every custom exception raised by the
    package.
    """

    status_code = 500


# Contract Violations
class ContractViolationError(DeliveryNotePdfError):
    """Raised when a caller breaks the layout engine's contract."""
    pass


class InvalidCapacityError(ContractViolationError):
    """Raised when a page capacity is not a positive integer."""

    def __init__(self, value):
        self.value = value
        super().__init__(f"Page capacity must be a positive integer, got {value!r}")


class MalformedChunkError(ContractViolationError):
    """Raised when a page chunk is malformed (negative index, too many rows)."""
    pass


class ChunkOverflowError(MalformedChunkError):
    """Raised when a chunk holds more rows than its page can carry."""

    def __init__(self, page_index: int, size: int, capacity: int):
        self.page_index = page_index
        self.size = size
        self.capacity = capacity
        super().__init__(
            f"Chunk for page {page_index} has {size} rows, capacity is {capacity}"
        )


class PageSequenceError(ContractViolationError):
    """Raised when a page index or first/last flag is out of sequence."""
    pass


class InvalidLayoutError(ContractViolationError):
    """Raised when a layout configuration or signature template is unusable."""
    pass


# Caller-facing Errors
class UnsupportedVariantError(DeliveryNotePdfError):
    """Raised when a document variant is not known."""

    status_code = 400

    def __init__(self, variant):
        self.variant = variant
        super().__init__(f"Unsupported document variant: {variant!r}")


class InvalidRequestError(DeliveryNotePdfError):
    """Raised when a render request is missing required values."""

    status_code = 400


# Data Source Errors
class DataSourceError(DeliveryNotePdfError):
    """Base class for errors raised while resolving document data."""
    pass


class DocumentNotFoundError(DataSourceError):
    """Raised when a document key does not resolve to a delivery note."""

    status_code = 404

    def __init__(self, document_key: str):
        self.document_key = document_key
        super().__init__(f"Delivery note '{document_key}' not found")


class PayloadParseError(DataSourceError):
    """Raised when a delivery note payload cannot be mapped to the model."""

    status_code = 400

    def __init__(self, field: str, reason: str):
        self.field = field
        super().__init__(f"Failed to parse delivery note field '{field}': {reason}")


# PDF Rendering Errors
class RenderingError(DeliveryNotePdfError):
    """Base class for PDF rendering errors."""
    pass


class FontError(RenderingError):
    """Raised when font setup or registration fails."""
    pass


class ImageRenderingError(RenderingError):
    """Raised when an embedded image cannot be drawn."""

    def __init__(self, name: str, reason: str):
        self.name = name
        super().__init__(f"Failed to render image '{name}': {reason}")
