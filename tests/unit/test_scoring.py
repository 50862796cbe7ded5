"""Tests for the composite placement score."""

from __future__ import annotations

import pytest

from nesting.domain.geometry import Rect, split_after_placement
from nesting.domain.services.scoring import FootprintHistogram, score_placement
from nesting.domain.value_objects import ScoreWeights


def _score(free: Rect, width: float, height: float, **kwargs):
    split = split_after_placement(free, width, height, kwargs.pop("kerf", 0.0))
    return score_placement(
        free=free,
        split=split,
        placed_width=width,
        placed_height=height,
        marginal_cut=kwargs.pop("marginal_cut", 0.0),
        histogram=kwargs.pop("histogram", FootprintHistogram()),
        min_offcut_mm=kwargs.pop("min_offcut_mm", 150.0),
        weights=kwargs.pop("weights", ScoreWeights()),
    )


class TestFootprintHistogram:
    """Tests for FootprintHistogram."""

    def test_remaining_counts_units(self) -> None:
        histogram = FootprintHistogram([(300, 600), (300, 600), (100, 100)])
        assert histogram.remaining == 3

        histogram.remove((300, 600))
        assert histogram.remaining == 2

    def test_remove_unknown_raises(self) -> None:
        histogram = FootprintHistogram([(100, 100)])
        with pytest.raises(KeyError):
            histogram.remove((200, 200))

    def test_unusable_fraction(self) -> None:
        histogram = FootprintHistogram([(300, 600), (300, 600), (100, 100)])
        assert histogram.unusable_fraction(Rect(0, 0, 200, 200)) == pytest.approx(2 / 3)

    def test_fit_considers_either_orientation(self) -> None:
        histogram = FootprintHistogram([(300, 600)])
        assert histogram.unusable_fraction(Rect(0, 0, 700, 350)) == 0.0

    def test_empty_histogram_wastes_nothing(self) -> None:
        assert FootprintHistogram().unusable_fraction(Rect(0, 0, 1, 1)) == 0.0


class TestScorePlacement:
    """Tests for score_placement()."""

    def test_exact_fit_scores_zero(self) -> None:
        score = _score(Rect(0, 0, 500, 300), 500, 300)
        assert score.total == 0.0

    def test_leftover_term(self) -> None:
        score = _score(Rect(0, 0, 1000, 1000), 500, 1000)
        assert score.leftover == 500000.0

    def test_sliver_penalised(self) -> None:
        score = _score(Rect(0, 0, 1000, 1000), 1000, 950)
        # One 1000x50 residual: flat penalty plus twice its area
        assert score.fragmentation == 10000.0 + 2.0 * 50000.0

    def test_usable_residual_not_penalised(self) -> None:
        score = _score(Rect(0, 0, 1000, 1000), 1000, 600)
        assert score.fragmentation == 0.0

    def test_aspect_term(self) -> None:
        score = _score(Rect(0, 0, 1000, 1000), 400, 600)
        # Fill ratios 0.4 and 0.6
        assert score.aspect == pytest.approx(0.05 * 0.5 * 240000)

    def test_future_fit_counts_unusable_residual_area(self) -> None:
        histogram = FootprintHistogram([(600, 900)])
        score = _score(Rect(0, 0, 1000, 1000), 1000, 600, histogram=histogram)
        # The 1000x400 residual cannot hold the remaining 600x900 unit
        assert score.future_fit == pytest.approx(0.5 * 400000)

    def test_cut_length_term(self) -> None:
        score = _score(Rect(0, 0, 1000, 1000), 400, 600, marginal_cut=1000.0)
        assert score.cut_length == 10000.0

    def test_zero_weights_zero_score(self) -> None:
        weights = ScoreWeights(
            leftover=0, sliver_penalty=0, sliver_area=0, aspect=0, future_fit=0, cut_length=0
        )
        score = _score(Rect(0, 0, 1000, 1000), 100, 900, weights=weights, marginal_cut=50.0)
        assert score.total == 0.0

    def test_negative_weight_rejected(self) -> None:
        with pytest.raises(ValueError, match="aspect"):
            ScoreWeights(aspect=-1.0)
