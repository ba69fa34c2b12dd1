# file: finedust/utils.py

from datetime import datetime
import pytz

KST = pytz.timezone("Asia/Seoul")


def get_current_time() -> str:
    """Get current UTC time as a formatted string."""
    return datetime.now(pytz.utc).isoformat()


def get_local_time() -> str:
    """Get current Korean local time for human-readable output."""
    return datetime.now(KST).strftime("%Y-%m-%d %H:%M:%S")


def format_value(value: float) -> str:
    """Render a measurement without a trailing '.0' (28.0 -> '28')."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)
