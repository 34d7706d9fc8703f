import math
from datetime import datetime, timezone
from typing import Any, Optional, Union


def utc_now() -> datetime:
    '''Timezone-aware current time in UTC.'''
    return datetime.now(timezone.utc)


def parse_number(value: Any) -> Optional[float]:
    '''
    Parse a query or form value into a finite float.

    Blank strings, booleans, non-numeric text, inf and nan all give None.
    '''
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        if not text or "_" in text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    if not math.isfinite(number):
        return None
    return number


def normalize_number(value: float) -> Union[int, float]:
    '''Collapse integral floats to int so 70000.0 is stored and shown as 70000.'''
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value
