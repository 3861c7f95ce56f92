import pytest
from durachok.common.util import calculate_chi_square, uniform_expectation


def test_calculate_chi_square():
    observed_values = [10, 20, 30, 40]
    expected_values = [15, 25, 35, 45]
    chi_square_stat = calculate_chi_square(observed_values, expected_values)
    expected_chi_square_stat = sum(
        (o - e) ** 2 / e for o, e in zip(observed_values, expected_values)
    )
    assert chi_square_stat == expected_chi_square_stat

    assert calculate_chi_square([], []) == 0

    with pytest.raises(ValueError) as exc_info:
        calculate_chi_square([10, 20, 30, 40], [15, 25])
    assert (
        str(exc_info.value)
        == "Observed and expected value lists must have the same length."
    )


def test_uniform_expectation():
    assert uniform_expectation(100, 4) == [25.0, 25.0, 25.0, 25.0]
    with pytest.raises(ValueError):
        uniform_expectation(100, 0)
