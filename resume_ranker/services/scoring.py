from resume_ranker.models.models import ScoringWeights


def compute_total(
    skills_score: float,
    experience_score: float,
    education_score: float,
    weights: ScoringWeights,
) -> float:
    """Weighted total of the three sub-scores, rounded to 2 decimals.

    Neither the scores nor the result are clamped to [0, 100], and the weights
    are applied as given even when they do not sum to 100.
    """
    total = (
        skills_score * weights.skills / 100
        + experience_score * weights.experience / 100
        + education_score * weights.education / 100
    )
    return round(total, 2)


def rank_results(results):
    """Sort by total score, highest first; ties keep their incoming order."""
    return sorted(results, key=lambda r: r.total_score, reverse=True)
