from __future__ import annotations

import pytest

from polyredeem.core.amounts import add_amounts, from_units, to_units
from polyredeem.core.errors import InvalidAmount


def test_to_units_is_exact():
    assert to_units("10") == 10_000_000
    assert to_units("2.5") == 2_500_000
    assert to_units("0.000001") == 1
    assert to_units("0.1") + to_units("0.2") == to_units("0.3")


@pytest.mark.parametrize("bad", ["0", "-1", "abc", "1.0000001", "NaN", "Infinity", ""])
def test_to_units_rejects(bad):
    with pytest.raises(InvalidAmount):
        to_units(bad)


def test_to_units_requires_string():
    with pytest.raises(InvalidAmount):
        to_units(10)  # type: ignore[arg-type]


def test_from_units_formatting():
    assert from_units(0) == "0"
    assert from_units(100_000_000) == "100"
    assert from_units(2_500_000) == "2.5"
    assert from_units(1) == "0.000001"


def test_add_amounts():
    assert add_amounts(["100", "0.5", "0.000001"]) == "100.500001"
    assert add_amounts([]) == "0"
