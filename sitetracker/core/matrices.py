"""Fixed-width measurement matrices recorded per site per month."""

from typing import Any, Mapping, NamedTuple

UNIT_FIELDS = ("c1", "c2", "c3", "c4", "c5")
"""Generation units per category."""

CHARGE_FIELDS = (
    "c001", "c002", "c003", "c004", "c005",
    "c006", "c007", "c008", "c009", "c010",
)
"""Charge units per category."""


def to_int(value: Any, default: int = 0) -> int:
    """Coerce a stored or posted value to ``int``, falling back to ``default``."""
    if value is None or value == "" or isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        try:
            return int(float(value))
        except (TypeError, ValueError, OverflowError):
            return default


def to_float(value: Any, default: float = 0.0) -> float:
    """Coerce a stored or posted value to ``float``, falling back to ``default``."""
    if value is None or value == "" or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if number == number else default  # NaN


class UnitMatrix(NamedTuple):
    c1: int = 0
    c2: int = 0
    c3: int = 0
    c4: int = 0
    c5: int = 0

    @classmethod
    def from_item(cls, item: Mapping[str, Any]) -> "UnitMatrix":
        return cls(*(to_int(item.get(field)) for field in UNIT_FIELDS))

    @property
    def total(self) -> int:
        return sum(self)

    def to_item(self) -> dict:
        return dict(zip(UNIT_FIELDS, self))


class ChargeMatrix(NamedTuple):
    c001: float = 0.0
    c002: float = 0.0
    c003: float = 0.0
    c004: float = 0.0
    c005: float = 0.0
    c006: float = 0.0
    c007: float = 0.0
    c008: float = 0.0
    c009: float = 0.0
    c010: float = 0.0

    @classmethod
    def from_item(cls, item: Mapping[str, Any]) -> "ChargeMatrix":
        return cls(*(to_float(item.get(field)) for field in CHARGE_FIELDS))

    @property
    def total(self) -> float:
        return round(sum(self), 2)

    def to_item(self) -> dict:
        return dict(zip(CHARGE_FIELDS, self))


def has_charge_values(item: Mapping[str, Any]) -> bool:
    """True when any charge-matrix field is present on ``item``."""
    return any(item.get(field) is not None for field in CHARGE_FIELDS)
