"""Month-year sort keys (``MMYYYY``) and their human-readable labels."""

from datetime import date
from typing import Tuple

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
MONTH_ABBREVIATIONS = tuple(name[:3] for name in MONTH_NAMES)


def parse_sort_key(sk: str) -> Tuple[int, int]:
    """Split a sort key into ``(month, year)``.

    Accepts ``MMYYYY`` and the short ``MMYY`` form; a two-digit year is read
    as ``20YY``.
    """
    if not isinstance(sk, str):
        raise ValueError("Sort key must be a string")
    sk = sk.strip()
    if len(sk) not in (4, 6) or not sk.isdigit():
        raise ValueError(f"Invalid sort key '{sk}': expected MMYYYY")

    month = int(sk[:2])
    year = int(sk[2:])
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid sort key '{sk}': month must be 01-12")
    if len(sk) == 4:
        year += 2000
    return month, year


def to_sort_key(month: int, year: int) -> str:
    if not 1 <= month <= 12:
        raise ValueError("Month must be between 1 and 12")
    if not 1000 <= year <= 9999:
        raise ValueError("Year must have four digits")
    return f"{month:02d}{year:04d}"


def normalize_sort_key(sk: str) -> str:
    """Return the canonical ``MMYYYY`` form of ``sk``."""
    return to_sort_key(*parse_sort_key(sk))


def sort_key_from_date(value: date) -> str:
    return to_sort_key(value.month, value.year)


def sort_key_ordinal(sk: str) -> int:
    """Chronological ordering value: ``year * 12 + month``."""
    month, year = parse_sort_key(sk)
    return year * 12 + month


def month_name(sk: str) -> str:
    month, _ = parse_sort_key(sk)
    return MONTH_NAMES[month - 1]


def format_month_label(sk: str) -> str:
    """``"112024"`` -> ``"Nov 2024"``."""
    month, year = parse_sort_key(sk)
    return f"{MONTH_ABBREVIATIONS[month - 1]} {year}"


def parse_month_label(label: str) -> Tuple[int, int]:
    """Inverse of :func:`format_month_label`; full month names are accepted too."""
    parts = label.split()
    if len(parts) != 2 or not parts[1].isdigit():
        raise ValueError(f"Invalid month label '{label}'")

    name = parts[0].capitalize()
    if name in MONTH_ABBREVIATIONS:
        month = MONTH_ABBREVIATIONS.index(name) + 1
    elif name in MONTH_NAMES:
        month = MONTH_NAMES.index(name) + 1
    else:
        raise ValueError(f"Unknown month '{parts[0]}'")
    return month, int(parts[1])
