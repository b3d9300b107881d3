"""Delivery Note Data Model

Immutable values handed to the layout engine. Everything here is resolved by
the data-fetch layer before rendering starts (the logo is already bytes).
"""
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import List, Optional, Tuple, Union

Quantity = Union[int, float, Decimal, str, None]


class DocumentVariant(str, Enum):
    """Physical document format."""

    STANDARD = "standard"
    DOT_MATRIX = "dot-matrix"


@dataclass(frozen=True)
class OrganizationProfile:
    """Issuing tenant identity printed in every page header."""

    id: str = ""
    name: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    logo: Optional[bytes] = field(default=None, repr=False)


@dataclass(frozen=True)
class DocumentHeader:
    """Printed identity of one delivery note.

    Attributes:
        document_number: Delivery note number ("SJ/2026/0001")
        document_date: ISO 8601 date or timestamp; only the date part is printed
        organization: Issuing organization profile
        source_reference: Originating invoice number
        counterpart_name: Recipient / customer name

        # Delivery details (first page info block)
        counterpart_phone: Recipient phone
        shipping_address: Delivery address
        driver_name: Driver or courier
        vehicle_number: Vehicle plate number
    """

    document_number: Optional[str] = None
    document_date: Optional[str] = None
    organization: OrganizationProfile = field(default_factory=OrganizationProfile)
    source_reference: Optional[str] = None
    counterpart_name: Optional[str] = None

    counterpart_phone: Optional[str] = None
    shipping_address: Optional[str] = None
    driver_name: Optional[str] = None
    vehicle_number: Optional[str] = None

    REQUIRED_FIELDS = (
        "document_number",
        "document_date",
        "organization.name",
        "organization.address",
        "organization.phone",
        "counterpart_name",
    )

    def missing_fields(self) -> List[str]:
        """Names of required identity fields that are blank."""
        missing = []
        for name in self.REQUIRED_FIELDS:
            if name.startswith("organization."):
                value = getattr(self.organization, name.split(".", 1)[1])
            else:
                value = getattr(self, name)
            if value is None or not str(value).strip():
                missing.append(name)
        return missing


@dataclass(frozen=True)
class ItemRow:
    """One line of a delivery note."""

    name: Optional[str]
    quantity: Quantity = None
    unit: Optional[str] = None
    sort_order: Optional[int] = None


@dataclass(frozen=True)
class SignatureParty:
    """A role that signs the printed document."""

    label: str
    hint: str = ""


@dataclass(frozen=True)
class PageChunk:
    """Contiguous slice of ordered item rows assigned to one page.

    `start_number` is the 1-based running number of the first row, so
    numbered tables continue across pages.
    """

    items: Tuple[ItemRow, ...]
    page_index: int
    is_first_page: bool
    is_last_page: bool
    start_number: int = 1

    def __len__(self) -> int:
        return len(self.items)
