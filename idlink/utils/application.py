"""
Application-related utility functions
"""
import time
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from idlink.database.models.application import Application

SUFFIX_MODULUS = 1_000_000


def format_application_code(year: int, suffix: int) -> str:
    return f"APP{year}-{suffix % SUFFIX_MODULUS:06d}"


def generate_application_code(db: Session, now: Optional[float] = None) -> str:
    """
    Generate a display code for a new application.

    Format: APP{YEAR}-{LAST_6_DIGITS_OF_EPOCH_MILLISECONDS}
    Example: APP2026-482913

    The suffix is time-derived, so two creations in the same millisecond
    would produce the same code. When the candidate is already taken the
    suffix is advanced until a free code is found.

    Args:
        db: Database session
        now: Epoch seconds to derive the code from (defaults to the current time)

    Returns:
        Formatted application code string
    """
    if now is None:
        now = time.time()
    year = datetime.fromtimestamp(now).year
    suffix = int(now * 1000) % SUFFIX_MODULUS

    for _ in range(SUFFIX_MODULUS):
        code = format_application_code(year, suffix)
        taken = db.query(Application.id).filter(Application.app_id == code).first()
        if not taken:
            return code
        suffix = (suffix + 1) % SUFFIX_MODULUS

    raise RuntimeError(f"No free application code left for {year}")
