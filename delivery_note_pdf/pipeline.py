"""Delivery Note Render Pipeline

Request orchestration: resolve the document, load the logo, render, and
convert any failure into a RenderResult.
"""
import dataclasses
import logging
from typing import Optional

from .exceptions import (
    ContractViolationError,
    DeliveryNotePdfError,
    DocumentNotFoundError,
)
from .layout.renderer import render_delivery_note
from .render_options import RenderRequest
from .render_result import RenderResult
from .sources import DeliveryNoteSource, LogoResolver

logger = logging.getLogger(__name__)


class RenderRequestHandler:
    """Delivery note request orchestrator.

    This class runs the complete request workflow:
    1. Fetch - resolve the document key through the data source
    2. Logo - turn the organization's logo reference into bytes
    3. Render - lay out and paint the PDF in the requested variant

    Attributes:
        source: Data-fetch collaborator
        logo_resolver: Logo loader (None renders the logo placeholder)
    """

    def __init__(self, source: DeliveryNoteSource,
                 logo_resolver: Optional[LogoResolver] = None):
        """Initialize handler with a data source and optional logo resolver.

        Args:
            source: Object with fetch(document_key) -> DeliveryNoteData
            logo_resolver: Optional LogoResolver
        """
        self.source = source
        self.logo_resolver = logo_resolver

    def handle(self, request: RenderRequest) -> RenderResult:
        """Render the delivery note a request asks for.

        Args:
            request: Validated render request

        Returns:
            RenderResult with the document or an HTTP-style error status

        Raises:
            Does not raise - all errors are captured in RenderResult.error
        """
        try:
            # Step 1: Fetch
            data = self.source.fetch(request.document_key)

            # Step 2: Logo
            header = data.header
            logo_warning = None
            if self.logo_resolver is not None and data.logo_url:
                logo = self.logo_resolver.resolve(data.logo_url)
                if logo is None:
                    logo_warning = "organization logo could not be loaded"
                else:
                    header = dataclasses.replace(
                        header,
                        organization=dataclasses.replace(header.organization, logo=logo),
                    )

            # Step 3: Render
            document = render_delivery_note(
                data.items, header, variant=request.variant, parties=request.parties,
            )
            if logo_warning:
                document = dataclasses.replace(
                    document, warnings=document.warnings + (logo_warning,),
                )

            return RenderResult(
                status="completed",
                status_message=f"Rendered {document.filename} ({document.page_count} pages)",
                status_code=200,
                document=document,
                download=request.download,
            )

        except DocumentNotFoundError as e:
            logger.info("Render request for %s: %s", request.document_key, e)
            return self._failed(e, request)

        except ContractViolationError as e:
            logger.error("Contract violation rendering %s: %s", request.document_key, e, exc_info=True)
            return self._failed(e, request)

        except DeliveryNotePdfError as e:
            if e.status_code >= 500:
                logger.error("Failed to render %s: %s", request.document_key, e, exc_info=True)
            else:
                logger.warning("Rejected render request for %s: %s", request.document_key, e)
            return self._failed(e, request)

        except Exception as e:
            logger.exception("Unexpected error rendering %s", request.document_key)
            return RenderResult(
                status="failed",
                status_message=f"Rendering failed: {e}",
                status_code=500,
                download=request.download,
                error=str(e),
            )

    def render(self, document_key: str, variant="standard", download: bool = False) -> RenderResult:
        """Build a RenderRequest and handle it.

        Invalid request values (blank key, unknown variant) come back as a
        failed result with status 400.
        """
        try:
            request = RenderRequest(document_key=document_key, variant=variant, download=download)
        except DeliveryNotePdfError as e:
            logger.warning("Invalid render request: %s", e)
            return RenderResult(
                status="failed",
                status_message=f"Rendering failed: {e}",
                status_code=e.status_code,
                download=download,
                error=str(e),
            )
        return self.handle(request)

    @staticmethod
    def _failed(error: DeliveryNotePdfError, request: RenderRequest) -> RenderResult:
        return RenderResult(
            status="failed",
            status_message=f"Rendering failed: {error}",
            status_code=error.status_code,
            download=request.download,
            error=str(error),
        )
