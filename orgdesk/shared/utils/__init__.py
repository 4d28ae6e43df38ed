"""Small shared utilities (datetime, identifiers)."""

from orgdesk.shared.utils.datetime import day_bounds_utc, ensure_utc, utc_now
from orgdesk.shared.utils.generators import generate_cuid, generate_token

__all__ = ["day_bounds_utc", "ensure_utc", "generate_cuid", "generate_token", "utc_now"]
