"""Unit tests for the expected damage estimate."""

from __future__ import annotations

import pytest

from mathhammer.domain.damage import apply_feel_no_pain, calculate_expected_damage


def test_expected_damage_is_product_of_stages():
    estimate = calculate_expected_damage(10, 4 / 6, 4 / 6, 0.5, 2)
    assert estimate.attacks == 10
    assert estimate.damage_per_hit == 2
    assert estimate.expected_damage == pytest.approx(10 * 4 / 6 * 4 / 6 * 0.5 * 2)


def test_dice_characteristics_use_averages():
    estimate = calculate_expected_damage("D6", 1.0, 1.0, 1.0, "D3")
    assert estimate.attacks == 3.5
    assert estimate.damage_per_hit == 2.0
    assert estimate.expected_damage == pytest.approx(7.0)


def test_unparsable_characteristics_count_as_one():
    estimate = calculate_expected_damage("lots", 1.0, 1.0, 1.0, "?")
    assert estimate.expected_damage == 1.0


@pytest.mark.parametrize(
    ("fnp", "expected"),
    [(None, 3.0), (5, 2.0), (6, 2.5), (7, 3.0), (2, 0.5)],
)
def test_feel_no_pain(fnp, expected):
    assert apply_feel_no_pain(3.0, fnp) == pytest.approx(expected)


def test_feel_no_pain_scales_expected_damage():
    estimate = calculate_expected_damage(6, 0.5, 0.5, 1.0, 1, fnp=4)
    assert estimate.damage_after_fnp == 0.5
    assert estimate.expected_damage == pytest.approx(0.75)
