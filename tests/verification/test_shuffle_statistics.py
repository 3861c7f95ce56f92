"""
Tests for the statistical shuffle verification.
"""

import random

import numpy as np
import pytest

from durachok.verification import ShuffleReport, analyze_shuffle


@pytest.fixture(scope="module")
def report():
    return analyze_shuffle(trials=5000, rng=random.Random(2024))


def test_counts_cover_every_trial(report):
    assert report.counts.shape == (52, 52)
    # every position holds exactly one card per shuffle, and vice versa
    assert np.all(report.counts.sum(axis=0) == 5000)
    assert np.all(report.counts.sum(axis=1) == 5000)


def test_fisher_yates_is_uniform(report):
    assert report.is_uniform()
    assert report.biased_positions() == []
    assert report.max_relative_deviation < 0.6


def test_identity_shuffle_is_biased():
    report = analyze_shuffle(trials=200, shuffler=lambda cards, rng: None)
    assert not report.is_uniform()
    assert report.p_value < 1e-9
    assert len(report.biased_positions()) == 52


def test_reversal_is_biased():
    report = analyze_shuffle(trials=200, shuffler=lambda cards, rng: cards.reverse())
    assert not report.is_uniform()
    assert report.counts[0, 51] == 200


def test_report_to_dict(report):
    data = report.to_dict()
    assert set(data) == {
        "trials",
        "chi_square",
        "p_value",
        "min_position_p_value",
        "max_relative_deviation",
    }
    assert data["trials"] == 5000
    assert 0.0 <= data["p_value"] <= 1.0


def test_expected_per_cell():
    report = ShuffleReport(
        trials=104,
        counts=np.full((52, 52), 2),
        position_p_values=np.ones(52),
        chi_square=0.0,
        p_value=1.0,
    )
    assert report.expected_per_cell == 2
    assert report.max_relative_deviation == 0
    assert report.is_uniform()


def test_trials_must_be_positive():
    with pytest.raises(ValueError):
        analyze_shuffle(trials=0)
