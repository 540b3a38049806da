import math

import pytest

from interior_estimator.measurement.units import (
    CM_PER_FOOT,
    SQ_CM_PER_SQ_FOOT,
    RoundingMode,
    cm_to_feet,
    cm_to_sq_feet,
    round_sq_feet,
    safe_float,
    safe_int,
)


@pytest.mark.parametrize("length, breadth", [(300, 200), (1, 1), (457.2, 91.44), (0.5, 1200)])
def test_cm_to_sq_feet_divides_by_constant(length: float, breadth: float) -> None:
    assert cm_to_sq_feet(length, breadth) == pytest.approx(length * breadth / SQ_CM_PER_SQ_FOOT)


def test_cm_to_sq_feet_zero_dimension_is_zero() -> None:
    assert cm_to_sq_feet(0, 500) == 0
    assert cm_to_sq_feet(500, 0) == 0


@pytest.mark.parametrize("bad", [None, "", "abc", float("nan"), float("inf")])
def test_bad_input_coerces_to_zero(bad) -> None:
    assert cm_to_sq_feet(bad, 100) == 0
    assert cm_to_feet(bad) == 0


def test_cm_to_feet() -> None:
    assert cm_to_feet(1000) == pytest.approx(1000 / CM_PER_FOOT)
    assert cm_to_feet("30.48") == pytest.approx(1.0)


@pytest.mark.parametrize("value, expected", [
    (2.4, 2),
    (2.5, 3),
    (2.49999, 2),
    (2.999, 3),
    (0, 0),
    (64.58, 65),
])
def test_round_sq_feet_whole(value: float, expected: float) -> None:
    assert round_sq_feet(value) == expected


@pytest.mark.parametrize("value, expected", [
    (2.3, 2.5),
    (2.5, 2.5),
    (2.6, 3),
    (2.0, 2),
    (0, 0),
])
def test_round_sq_feet_half(value: float, expected: float) -> None:
    assert round_sq_feet(value, RoundingMode.HALF) == expected


def test_round_sq_feet_accepts_mode_string() -> None:
    assert round_sq_feet(2.3, "half") == 2.5


def test_round_sq_feet_non_finite_is_zero() -> None:
    assert round_sq_feet(float("nan")) == 0
    assert not math.isnan(round_sq_feet("not a number"))


def test_safe_number_coercion() -> None:
    assert safe_float(" 12.5 ") == 12.5
    assert safe_float(True) == 0.0
    assert safe_float(None, default=3.0) == 3.0
    assert safe_int("4.7") == 4
    assert safe_int("") == 0
