import math

import pytest

from weighin.core.exceptions import InvalidInputError
from weighin.services.conversions import (
    from_canonical_height,
    from_canonical_weight,
    percentage_change,
    to_canonical_height,
    to_canonical_weight,
)


def test_kilograms_convert_to_pounds():
    assert to_canonical_weight(70, "kg") == pytest.approx(154.3234)
    assert to_canonical_weight(150, "lb") == 150.0


def test_unit_aliases_and_case():
    assert to_canonical_weight(150, "lbs") == 150.0
    assert to_canonical_weight(70, "KG") == pytest.approx(154.3234)


@pytest.mark.parametrize("value", [70.0, 0.5, 123.456])
def test_weight_round_trip(value):
    assert from_canonical_weight(to_canonical_weight(value, "kg"), "kg") == pytest.approx(value)


@pytest.mark.parametrize("value", [0, -1, float("nan"), float("inf"), True, "70"])
def test_bad_weights_are_rejected(value):
    with pytest.raises(InvalidInputError):
        to_canonical_weight(value, "kg")


def test_unknown_unit_is_rejected():
    with pytest.raises(InvalidInputError):
        to_canonical_weight(70, "stone")
    with pytest.raises(InvalidInputError):
        to_canonical_height(170, "m")


def test_height_in_feet_and_inches():
    assert to_canonical_height((5, 10), "ft") == pytest.approx(177.8)
    assert to_canonical_height((6, 0), "ft") == pytest.approx(182.88)


def test_height_back_to_feet_and_inches():
    feet, inches = from_canonical_height(177.8, "ft")
    assert feet == 5.0
    assert inches == pytest.approx(10.0)


def test_centimeter_round_trip():
    assert from_canonical_height(to_canonical_height(172.5, "cm"), "cm") == pytest.approx(172.5)


def test_height_shape_must_match_unit():
    with pytest.raises(InvalidInputError):
        to_canonical_height((5, 10), "cm")
    with pytest.raises(InvalidInputError):
        to_canonical_height(70, "ft")
    with pytest.raises(InvalidInputError):
        to_canonical_height((0, 0), "ft")
    with pytest.raises(InvalidInputError):
        to_canonical_height((5, -1), "ft")


def test_first_entry_has_zero_change():
    assert percentage_change(None, 150.0) == 0.0


def test_change_is_relative_to_fixed_baseline():
    assert percentage_change(150.0, 145.0) == pytest.approx(-3.3333, abs=1e-4)
    assert percentage_change(150.0, 140.0) == pytest.approx(-6.6667, abs=1e-4)
    assert percentage_change(150.0, 165.0) == pytest.approx(10.0)
    assert percentage_change(150.0, 150.0) == 0.0


def test_change_rejects_non_positive_weights():
    with pytest.raises(InvalidInputError):
        percentage_change(150.0, 0)
    with pytest.raises(InvalidInputError):
        percentage_change(-150.0, 140.0)
    assert not math.isnan(percentage_change(None, 1e-6))
