from typing import List, Sequence


def uniform_expectation(total: float, bins: int) -> List[float]:
    """
    Expected count per bin when `total` observations fall uniformly into `bins` bins.
    """
    if bins <= 0:
        raise ValueError("Number of bins must be positive.")
    return [total / bins] * bins


def calculate_chi_square(
    observed_values: Sequence[float], expected_values: Sequence[float]
) -> float:
    """
    Calculate the chi-square statistic given observed and expected counts.

    :param observed_values: Observed counts
    :param expected_values: Expected counts, all positive
    :return: The calculated chi-square statistic
    :raises ValueError: If the two sequences do not have the same length

    """
    if len(observed_values) != len(expected_values):
        raise ValueError("Observed and expected value lists must have the same length.")

    return sum((o - e) ** 2 / e for o, e in zip(observed_values, expected_values))
