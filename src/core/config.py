"""
Configuration constants and environment setup.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# =============================================================================
# PATHS
# =============================================================================

PROJECT_ROOT = Path(__file__).parent.parent.parent
TEMPLATES_DIR = PROJECT_ROOT / "data" / "templates"  # Example template and config

SETTINGS_DIR = Path(os.environ.get("INVOICEGEN_HOME", Path.home() / ".genInvoice"))
DEFAULT_TEMPLATE_PATH = SETTINGS_DIR / "Invoice.html.tmpl"
DEFAULT_CONFIG_PATH = SETTINGS_DIR / "config.yaml"

# =============================================================================
# INVOICE DOCUMENT KEYS
# =============================================================================

TABLE_KEY = "invoice"
DATE_KEY = "date"
HOURLY_RATE_KEY = "hourly_rate"
CURRENCY_KEY = "currency"
RECEIVED_USD_KEY = "received_usd"

GEN_INVOICE_KEY = "gen_invoice"
GEN_DATE_CREATED_KEY = "gen_date_created"
GEN_DATE_DUE_KEY = "gen_date_due"

# =============================================================================
# TABLE CONFIGURATION
# =============================================================================

# Header cells are matched case-insensitively by substring
AMOUNT_HEADER_MATCH = "amount"
HOURS_HEADER_MATCH = "hours"
AMOUNT_HEADER_LABEL = "Amount"
TOTAL_LABEL = "Total"
USD_TOTAL_LABEL = "Total in $USD (with USD/AUD rate = {rate:.4f})"
USD_AMOUNT_LABEL = "$USD {amount}"

ROW_CLASS_HEADING = "heading"
ROW_CLASS_ITEM = "item"
ROW_CLASS_TOTAL = "total"

LINE_BREAK = "<br>"

# =============================================================================
# DATES
# =============================================================================

INPUT_DATE_FORMAT = "%Y-%m-%d"
COMPACT_DATE_FORMAT = "%Y%m%d"
DUE_DAYS = 14  # Payment terms

# =============================================================================
# SAMPLE INVOICE
# =============================================================================

SAMPLE_HEADERS = ["Dates", "Hours worked", "Amount"]
SAMPLE_HOURS_PER_DAY = 8
