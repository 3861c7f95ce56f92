"""
Statistical validation of deck shuffling.

Game fairness depends on every deck ordering being equally likely. This
module shuffles the card universe many times, counts how often each card
lands in each position and tests those counts against the uniform
distribution with a chi-square goodness-of-fit test per position.
"""

import logging
import random
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

import numpy as np
import scipy.stats as stats

from durachok.common.card import Card
from durachok.common.deck import generate_deck, shuffle_cards
from durachok.common.util import calculate_chi_square, uniform_expectation

logger = logging.getLogger(__name__)

Shuffler = Callable[[List[Card], random.Random], Any]


@dataclass
class ShuffleReport:
    """
    Outcome of a positional-bias analysis.

    Attributes:
        trials: Number of shuffles performed
        counts: Matrix of shape (cards, positions); counts[c, p] is how often
            card c (in generation order) ended in position p
        position_p_values: Chi-square p-value of each position's card counts
        chi_square: Chi-square statistic over the whole matrix
        p_value: P-value of `chi_square`
    """

    trials: int
    counts: np.ndarray
    position_p_values: np.ndarray
    chi_square: float
    p_value: float

    @property
    def expected_per_cell(self) -> float:
        return self.trials / self.counts.shape[0]

    @property
    def max_relative_deviation(self) -> float:
        """Largest relative deviation of any cell from its expected count."""
        expected = self.expected_per_cell
        return float(np.max(np.abs(self.counts - expected)) / expected)

    def biased_positions(self, alpha: float = 0.001) -> List[int]:
        """
        Positions whose counts are inconsistent with uniformity at level `alpha`,
        after a Bonferroni correction for the number of positions.
        """
        threshold = alpha / len(self.position_p_values)
        return [int(i) for i in np.flatnonzero(self.position_p_values < threshold)]

    def is_uniform(self, alpha: float = 0.001) -> bool:
        return self.p_value >= alpha and not self.biased_positions(alpha)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "trials": self.trials,
            "chi_square": self.chi_square,
            "p_value": self.p_value,
            "min_position_p_value": float(np.min(self.position_p_values)),
            "max_relative_deviation": self.max_relative_deviation,
        }


def analyze_shuffle(
    trials: int = 10000,
    rng: Optional[random.Random] = None,
    shuffler: Shuffler = shuffle_cards,
) -> ShuffleReport:
    """
    Shuffle the card universe `trials` times and measure positional bias.

    Args:
        trials: Number of shuffles to perform
        rng: Random source handed to the shuffler
        shuffler: Function shuffling a list of cards in place with a random source

    Returns:
        A ShuffleReport with the count matrix and test results
    """
    if trials <= 0:
        raise ValueError("Number of trials must be positive.")

    rng = rng if rng is not None else random.Random()
    universe = generate_deck()
    index_of = {card: i for i, card in enumerate(universe)}
    size = len(universe)
    counts = np.zeros((size, size), dtype=np.int64)

    for _ in range(trials):
        cards = list(universe)
        shuffler(cards, rng)
        for position, card in enumerate(cards):
            counts[index_of[card], position] += 1

    expected = uniform_expectation(trials, size)
    position_p_values = np.array(
        [stats.chisquare(counts[:, p], expected).pvalue for p in range(size)]
    )

    # Cell counts are binomial, so the statistic has mean size * (size - 1)
    chi_square = calculate_chi_square(counts.ravel().tolist(), expected * size)
    p_value = float(stats.chi2.sf(chi_square, size * (size - 1)))

    report = ShuffleReport(
        trials=trials,
        counts=counts,
        position_p_values=position_p_values,
        chi_square=float(chi_square),
        p_value=p_value,
    )
    logger.debug("Shuffle analysis: %s", report.to_dict())
    return report
