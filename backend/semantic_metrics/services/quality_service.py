from semantic_metrics.core.config import DEFAULT_CONFIG, MetricsConfig
from semantic_metrics.schemas.analysis import QualityScore


def combined_score(
    grammar_pct: float, ttr: float, config: MetricsConfig = DEFAULT_CONFIG
) -> float:
    """Weighted blend of grammar % and TTR (as a percentage), rounded to 2 decimals.

    Rounding keeps float noise (e.g. 74.99999999999999) from moving a score
    across a threshold.
    """
    score = grammar_pct * config.grammar_weight + (ttr * 100) * config.lexical_weight
    return round(score, 2)


def quality_level(score: float, config: MetricsConfig = DEFAULT_CONFIG) -> str:
    """Maps a combined score to a quality level.

    Thresholds are inclusive lower bounds: a score of exactly 90 is "Excelente".
    """
    for lower_bound, level in config.quality_thresholds:
        if score >= lower_bound:
            return level
    return config.fallback_quality_level


def classify(
    grammar_pct: float, ttr: float, config: MetricsConfig = DEFAULT_CONFIG
) -> QualityScore:
    """Combines a grammar percentage and a TTR into a score and quality level.

    Args:
        grammar_pct (float): Grammatical correctness percentage, 0-100.
        ttr (float): Type-Token Ratio, 0-1.
        config (MetricsConfig): Weights and thresholds.

    Returns:
        QualityScore: The combined score and its quality level.

    Raises:
        ValueError: If either input is outside its range.
    """
    if not 0 <= grammar_pct <= 100:
        raise ValueError(f"Grammar percentage must be between 0 and 100, got {grammar_pct}")
    if not 0 <= ttr <= 1:
        raise ValueError(f"TTR must be between 0 and 1, got {ttr}")

    score = combined_score(grammar_pct, ttr, config)
    return QualityScore(combined_score=score, quality_level=quality_level(score, config))
