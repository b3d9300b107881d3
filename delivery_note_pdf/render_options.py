"""Render Request Dataclass

Options for one delivery note render request.
"""
from dataclasses import dataclass
from typing import Optional, Tuple

from .exceptions import InvalidRequestError
from .layout.layout_config import resolve_variant
from .models import DocumentVariant, SignatureParty


@dataclass
class RenderRequest:
    """Options for rendering one delivery note.

    Attributes:
        document_key: Key the data source resolves to a delivery note
        variant: Document variant tag ("standard", "dot-matrix") or DocumentVariant

        # Output Options
        download: If True, serve as an attachment instead of inline

        # Signature Options
        parties: Signing roles, left to right (None uses the variant's template)
    """

    # Required
    document_key: str
    variant: DocumentVariant = DocumentVariant.STANDARD

    # Output Options
    download: bool = False

    # Signature Options
    parties: Optional[Tuple[SignatureParty, ...]] = None

    def __post_init__(self):
        """Validate request options after initialization."""
        if not isinstance(self.document_key, str) or not self.document_key.strip():
            raise InvalidRequestError("document_key must be a non-empty string")
        self.document_key = self.document_key.strip()

        # Raises UnsupportedVariantError for unknown tags
        self.variant = resolve_variant(self.variant)

        if self.parties is not None:
            self.parties = tuple(self.parties)
            if not self.parties:
                raise InvalidRequestError("parties must not be empty when given")
            for party in self.parties:
                if not isinstance(party, SignatureParty):
                    raise InvalidRequestError(
                        f"parties must be SignatureParty values, got {type(party).__name__}"
                    )
