# rirparse/utils/date_detection.py

from __future__ import annotations
from typing import Optional
import re
import pandas as pd
from rirparse.utils.logging import get_logger

log = get_logger(__name__)

# RIR feeds write dates as YYYYMMDD; some registries use all zeros or an
# empty field when the date is unknown.
_RIR_DATE = re.compile(r'^\d{8}$')


def looks_like_rir_date(value: str) -> bool:
    """
    Check whether a feed field is a usable YYYYMMDD date.
    """
    value = value.strip()
    return bool(_RIR_DATE.match(value)) and value != "00000000"


def parse_rir_date(value: str) -> Optional[str]:
    """
    Normalize a YYYYMMDD feed date to ISO format (YYYY-MM-DD).

    Returns:
        The ISO date string, or None if the field is empty, zeroed or not a
        valid calendar date.
    """
    if not looks_like_rir_date(value):
        return None

    parsed = pd.to_datetime(value.strip(), format="%Y%m%d", errors="coerce")
    if pd.isna(parsed):
        log.debug(f"Ignoring invalid feed date {value!r}")
        return None

    return parsed.strftime("%Y-%m-%d")
