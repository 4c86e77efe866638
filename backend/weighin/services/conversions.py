"""
Unit Conversion and Percentage Change

Pure helpers shared by the weight, profile and aggregation code:
    - Weight conversion between pounds (canonical) and kilograms
    - Height conversion between centimeters (canonical) and feet/inches
    - Percentage change of a weight relative to the user's baseline

Every function validates its input first and raises InvalidInputError for
non-positive or non-finite numbers and unknown units, so callers never get a
half-computed value.

Example:
    pounds = to_canonical_weight(70, "kg")          # 154.3234
    cm = to_canonical_height((5, 10), "ft")         # 177.8
    change = percentage_change(150.0, 145.0)        # -3.333...
"""

import math
from typing import Optional, Tuple, Union

from weighin.core.constants import (
    CM_PER_INCH,
    INCHES_PER_FOOT,
    LBS_PER_KG,
    UNIT_CENTIMETER,
    UNIT_KILOGRAM,
    UNIT_POUND,
    HEIGHT_UNITS,
    WEIGHT_UNITS,
)
from weighin.core.exceptions import InvalidInputError


HeightValue = Union[float, Tuple[float, float]]

# Accepted spellings that map onto a canonical unit key
_UNIT_ALIASES = {"lbs": UNIT_POUND}


def require_positive(value: float, name: str) -> float:
    """Reject bools, non-numbers, NaN, infinities and values <= 0."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidInputError(f"{name} must be a number")
    if not math.isfinite(value) or value <= 0:
        raise InvalidInputError(f"{name} must be a positive finite number, got {value}")
    return float(value)


def normalize_unit(unit: str, allowed) -> str:
    """
    Lowercase a unit string, resolve aliases and check it against allowed.

    Raises:
        InvalidInputError: unit is not one of allowed
    """
    key = (unit or "").strip().lower()
    key = _UNIT_ALIASES.get(key, key)
    if key not in allowed:
        raise InvalidInputError(f"Unsupported unit '{unit}', expected one of {', '.join(allowed)}")
    return key


# ============================================================================
# WEIGHT
# ============================================================================

def to_canonical_weight(value: float, unit: str) -> float:
    """
    Convert a weight to pounds.

    Args:
        value: Weight in the given unit (must be > 0)
        unit: "lb" (alias "lbs") or "kg"

    Returns:
        Weight in pounds
    """
    unit = normalize_unit(unit, WEIGHT_UNITS)
    value = require_positive(value, "weight")
    if unit == UNIT_KILOGRAM:
        return value * LBS_PER_KG
    return value


def from_canonical_weight(pounds: float, unit: str) -> float:
    """Convert a weight in pounds to the requested unit."""
    unit = normalize_unit(unit, WEIGHT_UNITS)
    pounds = require_positive(pounds, "weight")
    if unit == UNIT_KILOGRAM:
        return pounds / LBS_PER_KG
    return pounds


# ============================================================================
# HEIGHT
# ============================================================================

def to_canonical_height(value: HeightValue, unit: str) -> float:
    """
    Convert a height to centimeters.

    Args:
        value: Centimeters as a number when unit is "cm", or a
            (feet, inches) pair when unit is "ft"
        unit: "cm" or "ft"

    Returns:
        Height in centimeters

    Raises:
        InvalidInputError: unknown unit, wrong value shape, or a
            non-positive total height
    """
    unit = normalize_unit(unit, HEIGHT_UNITS)

    if unit == UNIT_CENTIMETER:
        if isinstance(value, (tuple, list)):
            raise InvalidInputError("Height in cm must be a single number")
        return require_positive(value, "height")

    if not isinstance(value, (tuple, list)) or len(value) != 2:
        raise InvalidInputError("Height in ft must be a (feet, inches) pair")
    feet, inches = value
    for part, name in ((feet, "feet"), (inches, "inches")):
        if isinstance(part, bool) or not isinstance(part, (int, float)) or not math.isfinite(part):
            raise InvalidInputError(f"{name} must be a finite number")
        if part < 0:
            raise InvalidInputError(f"{name} cannot be negative")

    total_inches = feet * INCHES_PER_FOOT + inches
    return require_positive(total_inches, "height") * CM_PER_INCH


def from_canonical_height(cm: float, unit: str) -> HeightValue:
    """
    Convert centimeters to the requested unit.

    Returns:
        Centimeters unchanged for "cm", or a (feet, inches) pair for "ft"
        where feet is a whole number and inches keeps the fractional rest.
    """
    unit = normalize_unit(unit, HEIGHT_UNITS)
    cm = require_positive(cm, "height")
    if unit == UNIT_CENTIMETER:
        return cm

    total_inches = cm / CM_PER_INCH
    feet = math.floor(total_inches / INCHES_PER_FOOT)
    inches = total_inches - feet * INCHES_PER_FOOT
    return float(feet), inches


# ============================================================================
# PERCENTAGE CHANGE
# ============================================================================

def percentage_change(baseline: Optional[float], new_weight: float) -> float:
    """
    Signed percent difference of new_weight relative to baseline.

    A missing baseline means this is the user's first entry: the new weight
    becomes the baseline and the result is exactly 0.0.

    Args:
        baseline: Weight of the user's first-ever entry, in pounds, or None
        new_weight: Weight being recorded, in pounds

    Returns:
        (new_weight - baseline) / baseline * 100, negative means loss
    """
    new_weight = require_positive(new_weight, "weight")
    if baseline is None:
        return 0.0
    baseline = require_positive(baseline, "baseline weight")
    return (new_weight - baseline) / baseline * 100
