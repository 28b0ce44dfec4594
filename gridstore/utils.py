"""Utility helper functions for gridstore."""

import uuid
from datetime import datetime, timezone


def generate_file_id() -> str:
    """
    Generate a new file identifier.

    Returns:
        UUID4 string
    """
    return str(uuid.uuid4())


def get_current_timestamp() -> datetime:
    """
    Get the current UTC time truncated to millisecond precision.
    """
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)
