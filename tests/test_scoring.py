import pytest

from resume_ranker.models.models import AnalysisResult, ScoringWeights
from resume_ranker.services.scoring import compute_total, rank_results


class TestComputeTotal:
    """Weighted combination of the three sub-scores"""

    @pytest.mark.parametrize("scores,weights", [
        ((80, 70, 60), (40, 40, 20)),
        ((100, 100, 100), (33, 33, 34)),
        ((55.5, 12.25, 99.9), (50, 30, 20)),
        ((90, 90, 90), (60, 60, 60)),      # weights above 100 in total
        ((90, 90, 90), (10, 10, 10)),      # weights below 100 in total
        ((0, 0, 0), (40, 40, 20)),
    ])
    def test_matches_weighted_formula(self, scores, weights):
        s, e, ed = scores
        a, b, c = weights
        expected = round(s * a / 100 + e * b / 100 + ed * c / 100, 2)
        assert compute_total(s, e, ed, ScoringWeights(skills=a, experience=b, education=c)) == expected

    def test_default_weights(self):
        assert compute_total(80, 70, 60, ScoringWeights()) == 72.0

    def test_weights_are_not_normalized(self):
        assert compute_total(100, 100, 100, ScoringWeights(skills=100, experience=100, education=100)) == 300.0

    def test_scores_are_not_clamped(self):
        assert compute_total(150, -20, 0, ScoringWeights(skills=50, experience=50, education=0)) == 65.0

    def test_rounds_to_two_decimals(self):
        assert compute_total(33.333, 33.333, 33.333, ScoringWeights(skills=40, experience=40, education=20)) == 33.33


class TestRankResults:

    def test_descending_and_stable_for_ties(self):
        results = [
            AnalysisResult(candidate_id="a", total_score=50),
            AnalysisResult(candidate_id="b", total_score=80),
            AnalysisResult(candidate_id="c", total_score=50),
            AnalysisResult(candidate_id="d", total_score=80),
        ]
        assert [r.candidate_id for r in rank_results(results)] == ["b", "d", "a", "c"]
