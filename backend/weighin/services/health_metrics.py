"""
Health Metrics Calculator

Pure functions deriving BMI and calorie estimates from a weight (pounds)
and a height (centimeters):
    - BMI and its category
    - Mifflin-St Jeor maintenance calories with weight loss/gain targets
    - BMI trend between two weights

The summary builder at the bottom combines them for the
GET /users/me/health endpoint.
"""

from typing import Optional, Tuple

from weighin.core.constants import (
    ACTIVITY_FACTOR,
    BMI_CATEGORIES,
    BMI_SEVERELY_OBESE,
    BMI_TREND_THRESHOLD,
    DEFAULT_AGE,
    DEFAULT_SEX,
    LBS_PER_KG,
    SEX_FEMALE,
    SEX_MALE,
    WEIGHT_GAIN_CALORIE_FACTOR,
    WEIGHT_LOSS_CALORIE_FACTOR,
)
from weighin.core.exceptions import InvalidInputError
from weighin.services.conversions import require_positive


TREND_UP = "up"
TREND_DOWN = "down"
TREND_STABLE = "stable"


def bmi(weight_lb: float, height_cm: float) -> float:
    """
    Body mass index: kilograms over squared meters.

    Example:
        bmi(154.3234, 175)  # ~22.86
    """
    weight_lb = require_positive(weight_lb, "weight")
    height_cm = require_positive(height_cm, "height")
    kg = weight_lb / LBS_PER_KG
    meters = height_cm / 100
    return kg / (meters * meters)


def bmi_category(value: float) -> str:
    """Map a BMI to its category; each upper bound is exclusive."""
    value = require_positive(value, "BMI")
    for upper_bound, label in BMI_CATEGORIES:
        if value < upper_bound:
            return label
    return BMI_SEVERELY_OBESE


def daily_calories(
    weight_lb: float,
    height_cm: float,
    age: int = DEFAULT_AGE,
    sex: str = DEFAULT_SEX,
) -> int:
    """
    Estimated maintenance calories (Mifflin-St Jeor BMR times activity factor).

    Args:
        weight_lb: Current weight in pounds
        height_cm: Height in centimeters
        age: Age in years (defaults to 30)
        sex: "male" or "female" (defaults to male)

    Returns:
        Rounded daily calories
    """
    weight_lb = require_positive(weight_lb, "weight")
    height_cm = require_positive(height_cm, "height")
    age = require_positive(age, "age")
    if sex not in (SEX_MALE, SEX_FEMALE):
        raise InvalidInputError(f"sex must be '{SEX_MALE}' or '{SEX_FEMALE}'")

    kg = weight_lb / LBS_PER_KG
    bmr = 10 * kg + 6.25 * height_cm - 5 * age + (5 if sex == SEX_MALE else -161)
    return round(bmr * ACTIVITY_FACTOR)


def calorie_targets(daily: int) -> Tuple[int, int]:
    """Return (weight_loss, weight_gain) calorie targets for a maintenance value."""
    daily = require_positive(daily, "daily calories")
    return round(daily * WEIGHT_LOSS_CALORIE_FACTOR), round(daily * WEIGHT_GAIN_CALORIE_FACTOR)


def bmi_trend(previous_weight_lb: float, current_weight_lb: float, height_cm: float) -> str:
    """Direction of BMI change between two weights; small moves count as stable."""
    delta = bmi(current_weight_lb, height_cm) - bmi(previous_weight_lb, height_cm)
    if abs(delta) < BMI_TREND_THRESHOLD:
        return TREND_STABLE
    return TREND_UP if delta > 0 else TREND_DOWN


def build_health_summary(
    weight_lb: float,
    height_cm: float,
    previous_weight_lb: Optional[float] = None,
) -> dict:
    """
    Assemble every metric for one weight/height pair.

    Returns:
        Dict with bmi (1 decimal), category, daily_calories, the two
        targets and trend (None without a previous weight).
    """
    value = bmi(weight_lb, height_cm)
    daily = daily_calories(weight_lb, height_cm)
    loss_target, gain_target = calorie_targets(daily)
    trend = None
    if previous_weight_lb is not None:
        trend = bmi_trend(previous_weight_lb, weight_lb, height_cm)

    return {
        "weight": weight_lb,
        "height_cm": height_cm,
        "bmi": round(value, 1),
        "category": bmi_category(value),
        "daily_calories": daily,
        "weight_loss_calories": loss_target,
        "weight_gain_calories": gain_target,
        "trend": trend,
    }
