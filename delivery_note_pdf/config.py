"""Configuration Constants

Constants for delivery note rendering: page geometry, colors, placeholder text
and environment overrides.
"""
import os

# Page Geometry (points)
# Half Letter LANDSCAPE (8.5 x 5.5 inch)
HALF_LETTER_LANDSCAPE = (612.0, 396.0)
POINTS_PER_INCH = 72.0

# Output
PDF_MEDIA_TYPE = "application/pdf"
DEFAULT_FILENAME_STEM = "surat-jalan"
DOT_MATRIX_FILENAME_SUFFIX = "-dotmatrix"
PDF_CREATOR = "delivery-note-pdf"

# Document Labels
DOCUMENT_TITLE = "SURAT JALAN"
PAGE_LABEL = "Halaman"
PLACEHOLDER = "-"

# Placeholder organization names when the profile has no name
STANDARD_ORG_PLACEHOLDER = "ORGANISASI"
DOT_MATRIX_ORG_PLACEHOLDER = "INVOICEKU"

# Short month names for the dot-matrix date line ("19 Okt 2026")
INDONESIAN_MONTHS = (
    "Jan", "Feb", "Mar", "Apr", "Mei", "Jun",
    "Jul", "Agu", "Sep", "Okt", "Nov", "Des",
)

# Colors
INK = "#111111"
ACCENT = "#2563eb"
MUTED = "#6b7280"
FAINT = "#94a3b8"
CARD_BORDER = "#eaeaea"
TABLE_HEAD_FILL = "#eff6ff"
ROW_RULE = "#f1f5f9"
SIGN_RULE = "#cbd5e1"

# Logo Resolution
LOGO_FETCH_TIMEOUT = float(os.getenv("DELIVERY_NOTE_LOGO_TIMEOUT", "10"))
MAX_LOGO_BYTES = 5 * 1024 * 1024
LOGO_CHUNK_SIZE = 64 * 1024

# Optional TrueType fonts (built-in Helvetica/Courier are used when unset)
FONT_PATH = os.getenv("DELIVERY_NOTE_FONT_PATH", "")
FONT_BOLD_PATH = os.getenv("DELIVERY_NOTE_FONT_BOLD_PATH", "")
MONO_FONT_PATH = os.getenv("DELIVERY_NOTE_MONO_FONT_PATH", "")
MONO_FONT_BOLD_PATH = os.getenv("DELIVERY_NOTE_MONO_FONT_BOLD_PATH", "")

# JSON data directory used by the preview app
DATA_DIR = os.getenv("DELIVERY_NOTE_DATA_DIR", "data")
