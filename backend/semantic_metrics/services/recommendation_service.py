from typing import List
from semantic_metrics.core.config import (
    DEFAULT_CONFIG,
    NO_DATA_LEVEL,
    NO_RESOURCES_LEVEL,
    MetricsConfig,
)
from semantic_metrics.schemas.analysis import BatchSummary, Recommendation


def recommend(
    summary: BatchSummary, config: MetricsConfig = DEFAULT_CONFIG
) -> List[Recommendation]:
    """Derives advisory recommendations from a batch summary.

    Args:
        summary (BatchSummary): Average grammar and TTR of the batch.
        config (MetricsConfig): Recommendation thresholds.

    Returns:
        List[Recommendation]: Grammar and/or vocabulary advice, or a single
            congratulation when both metrics are strong. Empty for summaries
            without data.
    """
    if summary.overall_quality in (NO_DATA_LEVEL, NO_RESOURCES_LEVEL):
        return []

    recommendations = []

    if summary.avg_grammar < config.grammar_warning_below:
        recommendations.append(
            Recommendation(
                type="grammar",
                priority="high",
                message=(
                    f"La corrección gramatical promedio ({summary.avg_grammar:.0f}%) "
                    "es baja. Se recomienda revisar la gramática del contenido generado."
                ),
            )
        )

    if summary.avg_ttr < config.vocabulary_warning_below:
        recommendations.append(
            Recommendation(
                type="vocabulary",
                priority="medium",
                message=(
                    f"La riqueza léxica promedio ({summary.avg_ttr:.2f}) es baja. "
                    "El vocabulario podría ser más variado."
                ),
            )
        )

    if (
        summary.avg_grammar >= config.congratulate_grammar_from
        and summary.avg_ttr >= config.congratulate_ttr_from
    ):
        recommendations.append(
            Recommendation(
                type="congratulations",
                priority="info",
                message=(
                    "¡Excelente trabajo! Tus recursos mantienen una alta calidad "
                    "en gramática y vocabulario."
                ),
            )
        )

    return recommendations
