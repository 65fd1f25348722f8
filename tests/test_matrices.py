"""Tests for unit and charge matrices."""

from sitetracker.core.matrices import (
    ChargeMatrix,
    UnitMatrix,
    has_charge_values,
    to_float,
    to_int,
)


def test_unit_matrix_total():
    matrix = UnitMatrix.from_item({"c1": 100, "c2": "200", "c3": 300.0, "c4": 400, "c5": 500})
    assert matrix.total == 1500
    assert matrix.to_item() == {"c1": 100, "c2": 200, "c3": 300, "c4": 400, "c5": 500}


def test_unit_matrix_missing_values_default_to_zero():
    matrix = UnitMatrix.from_item({"c1": 5, "c3": None, "c4": "abc"})
    assert matrix == UnitMatrix(5, 0, 0, 0, 0)


def test_charge_matrix_total_is_rounded():
    matrix = ChargeMatrix.from_item({"c001": 0.1, "c002": 0.2, "c010": "1.005"})
    assert matrix.total == round(0.1 + 0.2 + 1.005, 2)
    assert matrix.c003 == 0.0


def test_has_charge_values():
    assert not has_charge_values({"c1": 1})
    assert has_charge_values({"c005": 0})


def test_coercion_helpers():
    assert to_int("7") == 7
    assert to_int("7.9") == 7
    assert to_int(None) == 0
    assert to_int(True) == 0
    assert to_float("2.5") == 2.5
    assert to_float("nan") == 0.0
    assert to_float("x", default=1.0) == 1.0
