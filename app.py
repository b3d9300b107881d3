"""Delivery Note PDF - Preview Application

Gradio application for previewing delivery notes ("Surat Jalan") rendered
from JSON payloads, in the standard or dot-matrix variant.
"""
import json
import logging
import os
import tempfile

import gradio as gr
import pandas as pd
from dotenv import load_dotenv

# Load environment variables before the package reads its config
load_dotenv()

from delivery_note_pdf import (
    InMemoryDeliveryNoteSource,
    JsonDeliveryNoteSource,
    LogoResolver,
    RenderRequestHandler,
    order_items,
    parse_delivery_note,
)
from delivery_note_pdf.config import DATA_DIR
from delivery_note_pdf.exceptions import DeliveryNotePdfError
from delivery_note_pdf.utils import format_quantity, text_or_placeholder

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

ITEM_COLUMNS = ["name", "qty", "unit", "sort_order"]
PREVIEW_HEADERS = ["No", "Barang", "Qty", "Unit", "Urutan"]
PREVIEW_KEY = "preview"


def load_items_csv(csv_path: str) -> list:
    """
    Read item rows from a CSV file.

    Args:
        csv_path: CSV with a `name` column and optional qty, unit, sort_order

    Returns:
        List of item dicts in file order (blank cells become None)
    """
    df = pd.read_csv(csv_path, dtype=str, keep_default_na=False)
    df.columns = [str(col).strip().lower() for col in df.columns]

    if "name" not in df.columns:
        raise gr.Error("Items CSV needs a 'name' column")

    for col in ITEM_COLUMNS:
        if col not in df.columns:
            df[col] = ""

    rows = []
    for record in df[ITEM_COLUMNS].to_dict(orient="records"):
        rows.append({key: (value.strip() or None) for key, value in record.items()})
    return rows


def items_table(data) -> pd.DataFrame:
    """Ordered item rows as they will be printed."""
    rows = [
        [number, text_or_placeholder(item.name), format_quantity(item.quantity),
         text_or_placeholder(item.unit), item.sort_order if item.sort_order is not None else ""]
        for number, item in enumerate(order_items(data.items), start=1)
    ]
    return pd.DataFrame(rows, columns=PREVIEW_HEADERS)


def render_preview(json_file, csv_file, document_key: str, variant: str, download: bool) -> tuple:
    """
    Render a delivery note for preview.

    Args:
        json_file: Uploaded delivery note JSON (filepath) or None
        csv_file: Optional items CSV (filepath) replacing the payload items
        document_key: Key in the data directory, used when no JSON is uploaded
        variant: "standard" or "dot-matrix"
        download: If True, the response headers ask for an attachment

    Returns:
        Tuple of (pdf path or None, status message, items table)
    """
    empty_table = pd.DataFrame([], columns=PREVIEW_HEADERS)

    try:
        if json_file:
            with open(json_file, "r", encoding="utf-8") as f:
                payload = json.load(f)
            if csv_file:
                if not isinstance(payload, dict):
                    return None, "❌ Delivery note JSON must be an object", empty_table
                payload["items"] = load_items_csv(csv_file)
            key = PREVIEW_KEY
            source = InMemoryDeliveryNoteSource({key: payload})
            logo_dir = os.path.dirname(json_file)
        else:
            key = (document_key or "").strip()
            if not key:
                return None, "❌ Upload a delivery note JSON or enter a document key", empty_table
            source = JsonDeliveryNoteSource(DATA_DIR)
            logo_dir = DATA_DIR

        handler = RenderRequestHandler(source, LogoResolver(base_dir=logo_dir))
        result = handler.render(key, variant=variant, download=download)

        if result.is_failed:
            return None, f"❌ [{result.status_code}] {result.status_message}", empty_table

        output_path = result.write_to(tempfile.mkdtemp(prefix="surat-jalan-"))
        table = items_table(source.fetch(key))

        lines = [f"✅ {result.status_message}"]
        lines.extend(f"⚠️ {warning}" for warning in result.document.warnings)
        lines.append(f"Content-Disposition: {result.headers()['Content-Disposition']}")
        return output_path, "\n".join(lines), table

    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        return None, f"❌ Invalid JSON: {e}", empty_table
    except DeliveryNotePdfError as e:
        return None, f"❌ [{e.status_code}] {e}", empty_table
    except (OSError, pd.errors.ParserError) as e:
        logger.exception("Preview failed")
        return None, f"❌ Error: {e}", empty_table


def example_payload() -> str:
    """A small delivery note payload to start from."""
    payload = {
        "sj_number": "SJ/2026/0001",
        "sj_date": "2026-10-19T08:30:00Z",
        "shipping_address": "Jl. Merdeka No. 10, Bandung",
        "driver_name": "Budi",
        "vehicle_number": "D 1234 AB",
        "invoice": {
            "invoice_number": "INV/2026/0042",
            "customer_name": "Toko Sinar Jaya",
            "customer_phone": "0812-3456-7890",
        },
        "org": {
            "name": "PT Contoh Niaga",
            "address": "Jl. Asia Afrika No. 1, Bandung",
            "phone": "022-123456",
            "email": "halo@contoh.id",
            "logo_url": None,
        },
        "items": [
            {"name": f"Barang {i}", "qty": i, "unit": "pcs", "sort_order": i}
            for i in range(1, 8)
        ],
    }
    return json.dumps(payload, indent=2)


# Create Gradio interface
with gr.Blocks(title="Surat Jalan Preview") as app:
    gr.Markdown("# 🚚 Surat Jalan Preview")

    with gr.Row():
        with gr.Column():
            gr.Markdown("## Input")

            json_input = gr.File(
                label="Delivery note JSON",
                file_types=[".json"],
                type="filepath"
            )

            csv_input = gr.File(
                label="Items CSV (optional: name, qty, unit, sort_order)",
                file_types=[".csv"],
                type="filepath"
            )

            document_key = gr.Textbox(
                label="Document key",
                info=f"Used when no JSON is uploaded: loads {DATA_DIR}/<key>.json"
            )

            variant = gr.Radio(
                choices=[("Standard", "standard"), ("Dot-matrix", "dot-matrix")],
                value="standard",
                label="Variant"
            )

            download = gr.Checkbox(
                label="Serve as attachment",
                value=False
            )

            with gr.Accordion("Example payload", open=False):
                gr.Code(value=example_payload(), language="json")

            render_btn = gr.Button(
                "🖨️ Render",
                variant="primary",
                size="lg"
            )

        with gr.Column():
            gr.Markdown("## Output")

            status = gr.Textbox(
                label="Status",
                interactive=False,
                lines=4
            )

            output_file = gr.File(
                label="📥 Download PDF",
                type="filepath"
            )

            items_preview = gr.DataFrame(
                headers=PREVIEW_HEADERS,
                interactive=False,
                wrap=True,
                label="Items in print order"
            )

    render_btn.click(
        fn=render_preview,
        inputs=[json_input, csv_input, document_key, variant, download],
        outputs=[output_file, status, items_preview]
    )


if __name__ == "__main__":
    app.launch()
