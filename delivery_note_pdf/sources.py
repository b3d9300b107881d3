"""Delivery Note Data Sources

Data-fetch collaborators that resolve a document key into the renderer's
input model, and the logo resolver that turns an organization's logo URL into
bytes before rendering.
"""
import base64
import binascii
import json
import logging
import os
import re
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Protocol, Tuple
from urllib.parse import unquote_to_bytes

import requests

from .config import LOGO_CHUNK_SIZE, LOGO_FETCH_TIMEOUT, MAX_LOGO_BYTES
from .exceptions import DocumentNotFoundError, PayloadParseError
from .models import DocumentHeader, ItemRow, OrganizationProfile
from .utils import safe_text

logger = logging.getLogger(__name__)

_DOCUMENT_KEY = re.compile(r"^[\w][\w.\-]*$")
_DATA_URI = re.compile(r"^data:(?P<mime>[\w/+.\-]*)(?P<params>(;[\w\-]+=[\w\-]+)*)(?P<b64>;base64)?,(?P<data>.*)$", re.S)


@dataclass(frozen=True)
class DeliveryNoteData:
    """A delivery note as resolved by a data source.

    Attributes:
        document_key: Key the note was fetched by
        header: Document identity (organization logo not yet resolved)
        items: Item rows in retrieval order
        logo_url: Organization logo reference (data URI, path or http(s) URL)
    """

    document_key: str
    header: DocumentHeader
    items: Tuple[ItemRow, ...] = ()
    logo_url: Optional[str] = None


class DeliveryNoteSource(Protocol):
    """Anything that resolves a document key into delivery note data."""

    def fetch(self, document_key: str) -> DeliveryNoteData:
        """Raises DocumentNotFoundError when the key is unknown."""
        ...


def _optional_text(value) -> Optional[str]:
    text = safe_text(value)
    return text or None


def _mapping(payload: Mapping, key: str) -> Mapping:
    value = payload.get(key)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise PayloadParseError(key, f"expected an object, got {type(value).__name__}")
    return value


def _sort_order(value, field_name: str) -> Optional[int]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, bool):
        raise PayloadParseError(field_name, "expected an integer, got a boolean")
    if isinstance(value, float):
        if not value.is_integer():
            raise PayloadParseError(field_name, f"expected an integer, got {value!r}")
        return int(value)
    try:
        return int(str(value).strip())
    except ValueError:
        raise PayloadParseError(field_name, f"expected an integer, got {value!r}") from None


def parse_items(rows) -> Tuple[ItemRow, ...]:
    """
    Map item payload rows to ItemRow values, keeping retrieval order.

    Args:
        rows: Sequence of objects with name, qty (or quantity), unit, sort_order

    Returns:
        Tuple of ItemRow

    Raises:
        PayloadParseError: If rows is not a list or a row is malformed
    """
    if rows is None:
        return ()
    if not isinstance(rows, (list, tuple)):
        raise PayloadParseError("items", f"expected a list, got {type(rows).__name__}")

    items = []
    for i, row in enumerate(rows):
        if not isinstance(row, Mapping):
            raise PayloadParseError(f"items[{i}]", f"expected an object, got {type(row).__name__}")
        quantity = row.get("qty", row.get("quantity"))
        if isinstance(quantity, (list, dict)):
            raise PayloadParseError(f"items[{i}].qty", "expected a number or text")
        items.append(ItemRow(
            name=_optional_text(row.get("name")),
            quantity=quantity,
            unit=_optional_text(row.get("unit")),
            sort_order=_sort_order(row.get("sort_order"), f"items[{i}].sort_order"),
        ))
    return tuple(items)


def parse_delivery_note(payload: Mapping[str, Any], document_key: Optional[str] = None) -> DeliveryNoteData:
    """
    Map a delivery note payload into the renderer's input model.

    The payload has the stored row shape: sj_number, sj_date,
    shipping_address, driver_name, vehicle_number, a nested `invoice`
    (invoice_number, customer_name, customer_phone, customer_address), a
    nested `org` (id, name, address, phone, email, logo_url) and `items`.

    Args:
        payload: Decoded JSON object
        document_key: Key to record (defaults to payload id or sj_number)

    Returns:
        DeliveryNoteData

    Raises:
        PayloadParseError: If the payload shape is wrong
    """
    if not isinstance(payload, Mapping):
        raise PayloadParseError("payload", f"expected an object, got {type(payload).__name__}")

    invoice = _mapping(payload, "invoice")
    org = _mapping(payload, "org") or _mapping(payload, "organization")

    organization = OrganizationProfile(
        id=safe_text(org.get("id")),
        name=_optional_text(org.get("name")),
        address=_optional_text(org.get("address")),
        phone=_optional_text(org.get("phone")),
        email=_optional_text(org.get("email")),
    )

    header = DocumentHeader(
        document_number=_optional_text(payload.get("sj_number")),
        document_date=_optional_text(payload.get("sj_date")),
        organization=organization,
        source_reference=_optional_text(invoice.get("invoice_number")),
        counterpart_name=_optional_text(invoice.get("customer_name")),
        counterpart_phone=_optional_text(invoice.get("customer_phone")),
        # The delivery address overrides the invoice's customer address
        shipping_address=_optional_text(payload.get("shipping_address"))
        or _optional_text(invoice.get("customer_address")),
        driver_name=_optional_text(payload.get("driver_name")),
        vehicle_number=_optional_text(payload.get("vehicle_number")),
    )

    key = document_key or safe_text(payload.get("id")) or safe_text(payload.get("sj_number"))

    return DeliveryNoteData(
        document_key=key,
        header=header,
        items=parse_items(payload.get("items")),
        logo_url=_optional_text(org.get("logo_url")),
    )


class InMemoryDeliveryNoteSource:
    """Serves delivery notes from payloads held in memory."""

    def __init__(self, payloads: Optional[Mapping[str, Mapping[str, Any]]] = None):
        self._payloads: Dict[str, Mapping[str, Any]] = dict(payloads or {})

    def add(self, document_key: str, payload: Mapping[str, Any]):
        self._payloads[document_key] = payload

    def fetch(self, document_key: str) -> DeliveryNoteData:
        payload = self._payloads.get(document_key)
        if payload is None:
            raise DocumentNotFoundError(document_key)
        return parse_delivery_note(payload, document_key)


class JsonDeliveryNoteSource:
    """Serves delivery notes from `<directory>/<document_key>.json` files.

    Attributes:
        directory: Directory holding one JSON file per delivery note
    """

    def __init__(self, directory: str):
        self.directory = directory

    def path_for(self, document_key: str) -> str:
        """Path of the JSON file for a key (keys never leave the directory)."""
        if not _DOCUMENT_KEY.match(document_key or ""):
            raise DocumentNotFoundError(document_key)
        return os.path.join(self.directory, f"{document_key}.json")

    def fetch(self, document_key: str) -> DeliveryNoteData:
        path = self.path_for(document_key)
        if not os.path.isfile(path):
            raise DocumentNotFoundError(document_key)

        try:
            with open(path, "r", encoding="utf-8") as f:
                payload = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise PayloadParseError("payload", f"invalid JSON in {os.path.basename(path)}: {e}") from e

        logger.debug("Loaded delivery note %s from %s", document_key, path)
        return parse_delivery_note(payload, document_key)


class LogoResolver:
    """Resolves organization logo references into image bytes.

    Supported references:
    - data URIs (`data:image/png;base64,...`)
    - http(s) URLs, fetched with requests
    - relative file paths inside `base_dir` (no base_dir, no local files)

    Any failure is logged as a warning and yields None, which renders as the
    logo placeholder.
    """

    def __init__(self, base_dir: Optional[str] = None,
                 timeout: float = LOGO_FETCH_TIMEOUT,
                 session: Optional[requests.Session] = None):
        self.base_dir = base_dir
        self.timeout = timeout
        self.session = session or requests.Session()

    def resolve(self, logo_url: Optional[str]) -> Optional[bytes]:
        """
        Load logo bytes.

        Args:
            logo_url: Logo reference or None

        Returns:
            Raw image bytes, or None when there is no usable logo
        """
        ref = safe_text(logo_url)
        if not ref:
            return None

        if ref.startswith("data:"):
            data = self._decode_data_uri(ref)
        elif ref.lower().startswith(("http://", "https://")):
            data = self._fetch(ref)
        else:
            data = self._read_file(ref)

        if data is not None and len(data) > MAX_LOGO_BYTES:
            logger.warning("Logo %s is larger than %d bytes, skipping", _describe(ref), MAX_LOGO_BYTES)
            return None
        return data

    def _decode_data_uri(self, ref: str) -> Optional[bytes]:
        match = _DATA_URI.match(ref)
        if not match:
            logger.warning("Malformed logo data URI")
            return None
        if not match.group("b64"):
            return unquote_to_bytes(match.group("data")) or None
        try:
            return base64.b64decode(match.group("data"), validate=True)
        except (binascii.Error, ValueError) as e:
            logger.warning("Failed to decode logo data URI: %s", e)
            return None

    def _fetch(self, url: str) -> Optional[bytes]:
        data = bytearray()
        try:
            response = self.session.get(url, timeout=self.timeout, stream=True)
            try:
                response.raise_for_status()
                for chunk in response.iter_content(chunk_size=LOGO_CHUNK_SIZE):
                    data.extend(chunk)
                    if len(data) > MAX_LOGO_BYTES:
                        logger.warning("Logo %s is larger than %d bytes, skipping",
                                       url, MAX_LOGO_BYTES)
                        return None
            finally:
                response.close()
        except requests.RequestException as e:
            logger.warning("Failed to fetch logo %s: %s", url, e)
            return None
        return bytes(data) or None

    def _read_file(self, ref: str) -> Optional[bytes]:
        """Read a logo file; only paths inside `base_dir` are allowed."""
        if not self.base_dir:
            logger.warning("Logo path %s ignored: no logo directory configured", ref)
            return None
        if os.path.isabs(ref):
            logger.warning("Logo path %s ignored: absolute paths are not allowed", ref)
            return None

        root = os.path.realpath(self.base_dir)
        path = os.path.realpath(os.path.join(root, ref))
        if os.path.commonpath([root, path]) != root:
            logger.warning("Logo path %s ignored: outside the logo directory", ref)
            return None
        try:
            with open(path, "rb") as f:
                return f.read(MAX_LOGO_BYTES + 1) or None
        except OSError as e:
            logger.warning("Failed to read logo file %s: %s", path, e)
            return None


def _describe(ref: str) -> str:
    return "data URI" if ref.startswith("data:") else ref
