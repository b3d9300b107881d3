"""Shared fixtures for delivery note tests."""
import io
import os
import sys

import pytest
from PIL import Image

# Make the package importable when running pytest from a source checkout
_root_dir = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if _root_dir not in sys.path:
    sys.path.insert(0, _root_dir)

from delivery_note_pdf.models import DocumentHeader, ItemRow, OrganizationProfile


def _png_bytes(size=(60, 30), color=(37, 99, 235)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def png_logo() -> bytes:
    return _png_bytes()


@pytest.fixture
def organization() -> OrganizationProfile:
    return OrganizationProfile(
        id="org-1",
        name="PT Contoh Niaga",
        address="Jl. Asia Afrika No. 1, Bandung",
        phone="022-123456",
        email="halo@contoh.id",
    )


@pytest.fixture
def header(organization) -> DocumentHeader:
    return DocumentHeader(
        document_number="SJ/2026/0001",
        document_date="2026-10-19T08:30:00Z",
        organization=organization,
        source_reference="INV/2026/0042",
        counterpart_name="Toko Sinar Jaya",
        counterpart_phone="0812-3456-7890",
        shipping_address="Jl. Merdeka No. 10, Bandung",
        driver_name="Budi",
        vehicle_number="D 1234 AB",
    )


@pytest.fixture
def make_items():
    """Factory for `count` numbered item rows in sort order."""

    def _make(count, unit="pcs", with_sort_order=True):
        return [
            ItemRow(
                name=f"Barang {i}",
                quantity=i,
                unit=unit,
                sort_order=i if with_sort_order else None,
            )
            for i in range(1, count + 1)
        ]

    return _make


@pytest.fixture
def payload():
    """Delivery note payload in the stored row shape."""
    return {
        "id": "dn-1",
        "sj_number": "SJ/2026/0001",
        "sj_date": "2026-10-19T08:30:00Z",
        "shipping_address": "Jl. Merdeka No. 10, Bandung",
        "driver_name": "Budi",
        "vehicle_number": "D 1234 AB",
        "invoice": {
            "invoice_number": "INV/2026/0042",
            "customer_name": "Toko Sinar Jaya",
            "customer_phone": "0812-3456-7890",
            "customer_address": "Jl. Lain No. 2",
        },
        "org": {
            "id": "org-1",
            "name": "PT Contoh Niaga",
            "address": "Jl. Asia Afrika No. 1, Bandung",
            "phone": "022-123456",
            "email": "halo@contoh.id",
            "logo_url": None,
        },
        "items": [
            {"name": "Semen 50kg", "qty": 10, "unit": "sak", "sort_order": 2},
            {"name": "Pasir", "qty": "1.50", "unit": "m3", "sort_order": 1},
            {"name": "Paku", "qty": 3.0, "unit": "kg", "sort_order": None},
        ],
    }
