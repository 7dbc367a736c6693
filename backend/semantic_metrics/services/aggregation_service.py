from collections import Counter
from typing import Dict, List, Sequence
from semantic_metrics.core.config import (
    DEFAULT_CONFIG,
    NO_DATA_LEVEL,
    MetricsConfig,
)
from semantic_metrics.schemas.analysis import (
    AggregatedMetrics,
    BatchAnalysis,
    BatchSummary,
    ResourceAnalysis,
    TypeBreakdown,
)
from semantic_metrics.services.grammar_service import grammatical_percentage
from semantic_metrics.services.quality_service import classify
from semantic_metrics.services.recommendation_service import recommend


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def empty_quality_distribution(config: MetricsConfig = DEFAULT_CONFIG) -> Dict[str, int]:
    levels = [level for _, level in config.quality_thresholds]
    levels.append(config.fallback_quality_level)
    return {level: 0 for level in levels}


def summarize(
    analyses: Sequence[ResourceAnalysis], config: MetricsConfig = DEFAULT_CONFIG
) -> BatchSummary:
    """Arithmetic means of grammar % and TTR across resources.

    An empty list yields the "Sin datos" sentinel instead of a classification.
    """
    if not analyses:
        return BatchSummary(overall_quality=NO_DATA_LEVEL)

    avg_grammar = _mean([a.grammatical_percentage for a in analyses])
    avg_ttr = _mean([a.ttr for a in analyses])
    quality = classify(avg_grammar, avg_ttr, config)

    return BatchSummary(
        avg_grammar=avg_grammar,
        avg_ttr=avg_ttr,
        combined_score=quality.combined_score,
        overall_quality=quality.quality_level,
    )


def pool_metrics(analyses: Sequence[ResourceAnalysis]) -> AggregatedMetrics:
    """Corpus-level metrics from pooled counts.

    Unique types are the union of every resource's vocabulary, so the global
    TTR is not the mean of the per-resource TTRs.
    """
    vocabulary: Counter = Counter()
    for analysis in analyses:
        vocabulary.update(analysis.frequency_map)

    total_sentences = sum(a.total_sentences for a in analyses)
    total_correct = sum(a.correct_sentences for a in analyses)
    total_tokens = sum(a.total_tokens for a in analyses)
    total_unique_types = len(vocabulary)

    return AggregatedMetrics(
        total_texts=sum(a.total_texts for a in analyses),
        total_sentences=total_sentences,
        total_correct_sentences=total_correct,
        total_tokens=total_tokens,
        total_unique_types=total_unique_types,
        global_grammatical_percentage=grammatical_percentage(total_correct, total_sentences),
        global_ttr=total_unique_types / total_tokens if total_tokens else 0.0,
    )


def type_breakdown(analyses: Sequence[ResourceAnalysis]) -> Dict[str, TypeBreakdown]:
    """Per resource type: resource count, average grammar and average TTR."""
    grouped: Dict[str, List[ResourceAnalysis]] = {}
    for analysis in analyses:
        grouped.setdefault(analysis.resource_type, []).append(analysis)

    return {
        resource_type: TypeBreakdown(
            count=len(items),
            avg_grammar=_mean([a.grammatical_percentage for a in items]),
            avg_lexical=_mean([a.ttr for a in items]),
        )
        for resource_type, items in grouped.items()
    }


def quality_distribution(
    analyses: Sequence[ResourceAnalysis], config: MetricsConfig = DEFAULT_CONFIG
) -> Dict[str, int]:
    """Histogram of resources per quality level, every level present."""
    distribution = empty_quality_distribution(config)
    for analysis in analyses:
        distribution[analysis.quality_level] = distribution.get(analysis.quality_level, 0) + 1
    return distribution


def aggregate(
    analyses: Sequence[ResourceAnalysis], config: MetricsConfig = DEFAULT_CONFIG
) -> BatchAnalysis:
    """Folds per-resource analyses into a BatchAnalysis.

    Args:
        analyses (Sequence[ResourceAnalysis]): Successful per-resource analyses.
        config (MetricsConfig): Thresholds for classification and recommendations.

    Returns:
        BatchAnalysis: Summary, pooled metrics, type breakdown, quality
            distribution and recommendations.
    """
    summary = summarize(analyses, config)

    return BatchAnalysis(
        total_resources_analyzed=len(analyses),
        summary=summary,
        aggregated_metrics=pool_metrics(analyses),
        resource_type_breakdown=type_breakdown(analyses),
        quality_distribution=quality_distribution(analyses, config),
        recommendations=recommend(summary, config),
        individual_analyses=list(analyses[: config.individual_analyses_limit]),
    )
