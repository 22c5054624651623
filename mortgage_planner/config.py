"""
Configuration for the mortgage planner.

Defaults describe the loan the planner opens with; runtime settings are read
from environment variables.
"""

import logging
import os
from datetime import date
from decimal import Decimal


# =============================================================================
# DEFAULT LOAN
# =============================================================================

DEFAULT_PRINCIPAL = Decimal("315000")
DEFAULT_ANNUAL_RATE = Decimal("3.54")
DEFAULT_TERM_YEARS = 30
DEFAULT_START_MONTH = date(2025, 12, 1)

# Rows shown by the CLI before the table is cut short
MAX_PRINTED_ROWS = 120


# =============================================================================
# ENVIRONMENT
# =============================================================================

LOG_LEVEL = os.environ.get("MORTGAGE_PLANNER_LOG_LEVEL", "INFO").upper()
CURRENCY_SYMBOL = os.environ.get("MORTGAGE_PLANNER_CURRENCY", "€")
SECRET_KEY = os.environ.get("FLASK_SECRET_KEY", "dev-secret-key")
ASSET_VERSION = os.environ.get("ASSET_VERSION", "1")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for the CLI and the web app."""
    logging.basicConfig(
        level=getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO),
        format=LOG_FORMAT,
    )
