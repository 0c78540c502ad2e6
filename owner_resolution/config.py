"""Application configuration."""

import os
from pathlib import Path
from dotenv import load_dotenv

# Base paths
BASE_DIR = Path(__file__).resolve().parent.parent

# Load .env from project root (before any os.getenv calls)
load_dotenv(BASE_DIR / ".env")
OUTPUT_DIR = BASE_DIR / "owners"  # run_owners.py default sink; created on write

# Debug trace mode — set OWNER_TRACE=1 to get per-candidate resolution logs
TRACE_ENABLED = os.getenv("OWNER_TRACE", "").strip().lower() in ("1", "true", "yes")

# Ownership interest precision ("1/3 INT" → 0.333333 / 33.3333)
FRACTION_DECIMAL_PLACES = int(os.getenv("OWNER_FRACTION_DECIMAL_PLACES", "6"))
PERCENTAGE_DECIMAL_PLACES = int(os.getenv("OWNER_PERCENTAGE_DECIMAL_PLACES", "4"))

# Name order for all-uppercase, comma-less person strings.
# Assessor rolls print "SMITH JOHN M"; deed indexes usually print "John M Smith".
NAME_ORDERS = ("last_first", "first_last")
DEFAULT_NAME_ORDER = os.getenv("OWNER_DEFAULT_NAME_ORDER", "last_first").strip().lower()
if DEFAULT_NAME_ORDER not in NAME_ORDERS:
    DEFAULT_NAME_ORDER = "last_first"

# County-specific company keywords, comma separated (e.g. "GROVES,RANCH")
EXTRA_COMPANY_KEYWORDS = tuple(
    kw.strip().upper()
    for kw in os.getenv("OWNER_EXTRA_COMPANY_KEYWORDS", "").split(",")
    if kw.strip()
)

# HTTP surface
CORS_ORIGINS = [
    o.strip()
    for o in os.getenv("OWNER_CORS_ORIGINS", "http://localhost:5173,http://localhost:3000").split(",")
    if o.strip()
]
