"""Tests for nucleotide-wise d-scores."""

import logging
import math

import numpy as np
import pytest

from dstruct.domain.services.dissimilarity_scorer import DissimilarityScorer, calc_dis
from tests.helpers import d_pair


class TestCalcDis:
    """Tests for the d-score of a replicate vector."""

    def test_identical_values_score_zero(self):
        assert calc_dis([2.0, 2.0, 2.0]) == 0.0

    def test_zero_mean_is_unavailable(self):
        assert np.isnan(calc_dis([0.0, 0.0, 0.0]))

    def test_single_value_scores_zero(self):
        assert calc_dis([3.0]) == 0.0

    def test_all_unavailable(self):
        assert np.isnan(calc_dis([np.nan, np.nan]))

    def test_two_values(self):
        expected = 2 * math.atan(math.sqrt(2) / 2) / math.pi
        assert calc_dis([1.0, 3.0]) == pytest.approx(expected)
        assert calc_dis([1.0, 3.0]) == pytest.approx(d_pair(1.0, 3.0))

    def test_unavailable_values_are_dropped(self):
        assert calc_dis([1.0, 3.0, np.nan]) == pytest.approx(calc_dis([1.0, 3.0]))

    def test_sample_standard_deviation(self):
        values = [0.5, 1.0, 2.5]
        expected = 2 * math.atan(np.std(values, ddof=1) / np.mean(values)) / math.pi
        assert calc_dis(values) == pytest.approx(expected)

    def test_monotonic_in_spread(self):
        scores = [calc_dis([1.0 - a, 1.0 + a]) for a in (0.1, 0.2, 0.5, 0.9)]
        assert all(lo < hi for lo, hi in zip(scores, scores[1:]))

    def test_bounded(self):
        rng = np.random.default_rng(7)
        scores = calc_dis(rng.exponential(1.0, size=(200, 4)))
        assert np.all((scores >= 0) & (scores <= 1))

    def test_row_wise(self):
        matrix = np.array([[1.0, 1.0], [1.0, 3.0], [np.nan, np.nan], [0.0, 0.0]])
        scores = calc_dis(matrix)
        assert scores.shape == (4,)
        assert scores[0] == 0.0
        assert scores[1] == pytest.approx(d_pair(1.0, 3.0))
        assert np.isnan(scores[2])
        assert np.isnan(scores[3])


class TestDissimilarityScorer:
    """Tests for the scorer service."""

    def test_score_returns_float(self):
        score = DissimilarityScorer().score([1.0, 3.0])
        assert isinstance(score, float)
        assert score == pytest.approx(d_pair(1.0, 3.0))

    def test_score_rows(self):
        scores = DissimilarityScorer().score_rows(np.array([[1.0, 1.0, 1.0], [2.0, 4.0, np.nan]]))
        assert scores[0] == 0.0
        assert scores[1] == pytest.approx(d_pair(2.0, 4.0))

    def test_row_summary_only_built_for_debug(self, monkeypatch):
        scorer = DissimilarityScorer()
        calls = []
        monkeypatch.setattr(scorer.logger, "log_debug", lambda *args: calls.append(args))
        base = scorer.logger.logger
        level = base.level
        matrix = np.array([[1.0, 3.0], [2.0, 2.0]])
        try:
            base.setLevel(logging.INFO)
            scorer.score_rows(matrix)
            assert calls == []

            base.setLevel(logging.DEBUG)
            scorer.score_rows(matrix)
            assert len(calls) == 1
        finally:
            base.setLevel(level)
