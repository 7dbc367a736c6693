from collections import Counter
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple
from semantic_metrics.core.config import DEFAULT_CONFIG, NO_RESOURCES_LEVEL, MetricsConfig
from semantic_metrics.core.errors import ContentProcessingError
from semantic_metrics.schemas.analysis import (
    BatchFilters,
    BatchSummary,
    ProcessingError,
    ResourceAnalysis,
)
from semantic_metrics.schemas.report import (
    CorpusReport,
    DashboardMetrics,
    Insight,
    MetricInterpretation,
    MetricLevel,
    MetricsReport,
    PeriodMetrics,
    QualityBreakdown,
    QualityLevel,
    ReportPeriod,
    TypeReport,
    UserMetrics,
    UserReport,
)
from semantic_metrics.services.aggregation_service import aggregate, pool_metrics, summarize
from semantic_metrics.services.batch_service import BatchOrchestrator, BatchOutcome, matches

# Dashboard names of the quality levels
BREAKDOWN_FIELDS = {
    "Excelente": "excellent",
    "Buena": "good",
    "Regular": "regular",
    "Deficiente": "poor",
}

VOLUME_INSIGHT_FROM = 100
EXAMPLES_PER_TYPE = 3


def _collect_or_empty(
    orchestrator: BatchOrchestrator, resources: Sequence[Any], filters: BatchFilters
) -> BatchOutcome:
    """Runs a batch, turning an all-failed batch into an outcome without analyses.

    The per-resource errors of an all-failed batch are kept so reports can
    show why nothing was analyzed.
    """
    try:
        return orchestrator.collect(resources, filters)
    except ContentProcessingError as e:
        print(f"No analyzable resources: {e.message}")
        errors = [ProcessingError.model_validate(detail) for detail in e.details]
        return BatchOutcome(analyses=[], errors=errors, notes=[])


def _join_notes(notes: Sequence[str]) -> Optional[str]:
    return " ".join(notes) or None


def _band(value: float, bands: Sequence[Tuple], fallback: Any) -> Any:
    """Returns the payload of the first band whose inclusive lower bound ``value`` reaches."""
    for lower_bound, *payload in bands:
        if value >= lower_bound:
            return payload[0] if len(payload) == 1 else tuple(payload)
    return fallback


def grammar_interpretation(percentage: float, config: MetricsConfig = DEFAULT_CONFIG) -> str:
    return _band(percentage, config.grammar_interpretations, config.fallback_grammar_interpretation)


def lexical_interpretation(ttr_value: float, config: MetricsConfig = DEFAULT_CONFIG) -> str:
    return _band(ttr_value, config.lexical_interpretations, config.fallback_lexical_interpretation)


def grammar_level(percentage: float, config: MetricsConfig = DEFAULT_CONFIG) -> MetricLevel:
    """Dashboard level and color of an average grammar percentage."""
    level, color = _band(percentage, config.grammar_levels, config.fallback_metric_level)
    return MetricLevel(value=round(percentage, 2), level=level, color=color)


def lexical_level(ttr_value: float, config: MetricsConfig = DEFAULT_CONFIG) -> MetricLevel:
    """Dashboard level and color of an average TTR."""
    level, color = _band(ttr_value, config.lexical_levels, config.fallback_metric_level)
    return MetricLevel(value=round(ttr_value, 3), level=level, color=color)


def quality_color(level: str, config: MetricsConfig = DEFAULT_CONFIG) -> str:
    return config.quality_colors.get(level, config.fallback_quality_color)


def build_user_report(
    user_id: int,
    user_name: Optional[str],
    resources: Sequence[Any],
    config: MetricsConfig = DEFAULT_CONFIG,
) -> UserReport:
    """Builds the quality report of every resource owned by a user.

    Args:
        user_id (int): Identifier of the user.
        user_name (Optional[str]): Display name, "Usuario" when unknown.
        resources (Sequence[Any]): The user's resources (records, mappings or ORM rows).
        config (MetricsConfig): Thresholds and batch bounds.

    Returns:
        UserReport: Average metrics, quality breakdown, type distribution and
            the resources that could not be analyzed. A user without resources
            gets the "Sin recursos" level.
    """
    user = user_name or "Usuario"

    if not resources:
        return UserReport(
            user=user,
            user_id=user_id,
            metrics=UserMetrics(overall_quality=NO_RESOURCES_LEVEL),
        )

    orchestrator = BatchOrchestrator(config)
    outcome = _collect_or_empty(orchestrator, resources, BatchFilters())
    batch = aggregate(outcome.analyses, config)

    breakdown = QualityBreakdown()
    for level, count in batch.quality_distribution.items():
        field = BREAKDOWN_FIELDS.get(level)
        if field:
            setattr(breakdown, field, count)

    return UserReport(
        user=user,
        user_id=user_id,
        total_resources=len(resources),
        analyzed_resources=batch.total_resources_analyzed,
        metrics=UserMetrics(
            average_grammar=round(batch.summary.avg_grammar, 2),
            average_ttr=round(batch.summary.avg_ttr, 3),
            overall_quality=batch.summary.overall_quality,
        ),
        breakdown=breakdown,
        type_distribution={t: b.count for t, b in batch.resource_type_breakdown.items()},
        failed_analyses=len(outcome.errors),
        processing_errors=outcome.errors,
        note=_join_notes(outcome.notes),
    )


def generate_insights(
    summary: BatchSummary,
    by_type: Dict[str, TypeReport],
    total_resources: int,
    total_sentences: int,
) -> List[Insight]:
    """Derives corpus-level insights from the global summary and type reports.

    Args:
        summary (BatchSummary): Global averages over every analyzed resource.
        by_type (Dict[str, TypeReport]): Per resource type reports.
        total_resources (int): Resources in the reporting period.
        total_sentences (int): Sentences analyzed across the corpus.

    Returns:
        List[Insight]: Grammar, vocabulary, resource type and volume insights.
    """
    insights = []
    grammar = round(summary.avg_grammar)
    lexical = round(summary.avg_ttr, 2)

    if grammar >= 80:
        insights.append(
            Insight(
                type="positive",
                category="Gramática",
                message=f"Excelente calidad gramatical promedio: {grammar}%",
            )
        )
    elif grammar < 60:
        insights.append(
            Insight(
                type="warning",
                category="Gramática",
                message=f"La calidad gramatical promedio ({grammar}%) necesita mejora",
            )
        )

    if lexical >= 0.6:
        insights.append(
            Insight(
                type="positive",
                category="Vocabulario",
                message=f"Buena riqueza léxica promedio: {lexical}",
            )
        )
    elif lexical < 0.4:
        insights.append(
            Insight(
                type="warning",
                category="Vocabulario",
                message=(
                    f"La riqueza léxica promedio ({lexical}) podría mejorar "
                    "con mayor variedad de vocabulario"
                ),
            )
        )

    scored = {
        resource_type: report.summary.avg_grammar + report.summary.avg_ttr * 100
        for resource_type, report in by_type.items()
        if report.summary.combined_score is not None
    }
    if len(scored) > 1:
        best = max(scored, key=scored.get)
        worst = min(scored, key=scored.get)
        insights.append(
            Insight(
                type="info",
                category="Tipos de recursos",
                message=(
                    f'Mejor rendimiento: "{best}" ({by_type[best].resource_count} recursos). '
                    f'Menor rendimiento: "{worst}" ({by_type[worst].resource_count} recursos)'
                ),
            )
        )

    if total_resources > VOLUME_INSIGHT_FROM:
        insights.append(
            Insight(
                type="positive",
                category="Volumen",
                message=(
                    f"Gran volumen de datos analizados: {total_resources} recursos, "
                    f"{total_sentences} oraciones"
                ),
            )
        )

    return insights


def build_corpus_report(
    resources: Sequence[Any],
    created_from: Optional[datetime] = None,
    created_to: Optional[datetime] = None,
    include_examples: bool = False,
    config: MetricsConfig = DEFAULT_CONFIG,
) -> CorpusReport:
    """Builds a corpus-wide report grouped by resource type.

    Each type is analyzed as its own batch, so the batch cap applies per type.
    A type cut by the cap or the time budget carries a ``note``, and the
    report-level ``note`` lists every such type. The global summary and
    metrics pool every analyzed resource.

    Args:
        resources (Sequence[Any]): Resources of the reporting period.
        created_from (Optional[datetime]): Start of the period, naive means UTC.
        created_to (Optional[datetime]): End of the period, naive means UTC.
        include_examples (bool): Attach the first analyses of each type.
        config (MetricsConfig): Thresholds and batch bounds.

    Returns:
        CorpusReport: Per-type reports, global summary and insights.
    """
    orchestrator = BatchOrchestrator(config)
    filters = BatchFilters(created_from=created_from, created_to=created_to)
    records, invalid = orchestrator.coerce(resources)
    records = [r for r in records if matches(r, filters)]

    type_counts = Counter(r.type for r in records)
    by_type: Dict[str, TypeReport] = {}
    all_analyses: List[ResourceAnalysis] = []
    notes = []

    for resource_type in type_counts:
        outcome = _collect_or_empty(
            orchestrator, records, BatchFilters(type=resource_type)
        )
        batch = aggregate(outcome.analyses, config)
        all_analyses.extend(outcome.analyses)

        type_note = _join_notes(outcome.notes)
        if type_note:
            notes.append(f"{resource_type}: {type_note}")

        by_type[resource_type] = TypeReport(
            resource_count=type_counts[resource_type],
            summary=batch.summary,
            aggregated_metrics=batch.aggregated_metrics,
            failed_analyses=len(outcome.errors),
            processing_errors=outcome.errors,
            note=type_note,
            examples=outcome.analyses[:EXAMPLES_PER_TYPE] if include_examples else None,
        )

    global_summary = summarize(all_analyses, config)
    global_metrics = pool_metrics(all_analyses)

    return CorpusReport(
        report_date=datetime.now(timezone.utc),
        period=ReportPeriod(created_from=filters.created_from, created_to=filters.created_to),
        total_resources=len(records),
        global_summary=global_summary,
        global_metrics=global_metrics,
        by_resource_type=by_type,
        insights=generate_insights(
            global_summary, by_type, len(records), global_metrics.total_sentences
        )
        if all_analyses
        else [],
        failed_analyses=len(invalid) + sum(t.failed_analyses for t in by_type.values()),
        note=_join_notes(notes),
    )


def build_metrics_report(
    resources: Sequence[Any],
    period_days: int,
    config: MetricsConfig = DEFAULT_CONFIG,
) -> MetricsReport:
    """Builds the interpreted metrics report of a user's recent resources.

    Args:
        resources (Sequence[Any]): The user's resources created in the period.
        period_days (int): Length of the look-back period, echoed as text.
        config (MetricsConfig): Thresholds, interpretation texts and batch bounds.

    Returns:
        MetricsReport: Summary, interpreted averages, per type averages and
            recommendations. Without analyzable resources the summary is
            "Sin datos" and ``metrics`` is None.
    """
    orchestrator = BatchOrchestrator(config)
    outcome = _collect_or_empty(orchestrator, resources, BatchFilters())
    batch = aggregate(outcome.analyses, config)
    summary = batch.summary

    metrics = None
    if outcome.analyses:
        metrics = PeriodMetrics(
            grammatical_correctness=MetricInterpretation(
                average=round(summary.avg_grammar, 2),
                description="Porcentaje promedio de oraciones gramaticalmente correctas",
                interpretation=grammar_interpretation(summary.avg_grammar, config),
            ),
            lexical_richness=MetricInterpretation(
                average=round(summary.avg_ttr, 3),
                description="Riqueza léxica promedio (TTR - Type-Token Ratio)",
                interpretation=lexical_interpretation(summary.avg_ttr, config),
            ),
        )

    return MetricsReport(
        period=f"Últimos {period_days} días",
        generated_at=datetime.now(timezone.utc),
        resource_count=len(resources),
        summary=summary,
        metrics=metrics,
        by_resource_type=batch.resource_type_breakdown,
        recommendations=batch.recommendations,
        failed_analyses=len(outcome.errors),
        note=_join_notes(outcome.notes),
    )


def build_dashboard(
    resources: Sequence[Any], config: MetricsConfig = DEFAULT_CONFIG
) -> DashboardMetrics:
    """Summarizes a user's most recent resources for the dashboard.

    Args:
        resources (Sequence[Any]): The user's most recent resources.
        config (MetricsConfig): Dashboard levels, colors and batch bounds.

    Returns:
        DashboardMetrics: Levels and colors of the average grammar, average
            TTR and overall quality, plus text and word totals. ``has_data``
            is False when nothing could be analyzed.
    """
    if not resources:
        return DashboardMetrics(has_data=False, message="No tienes recursos para analizar aún")

    orchestrator = BatchOrchestrator(config)
    outcome = _collect_or_empty(orchestrator, resources, BatchFilters())
    if not outcome.analyses:
        return DashboardMetrics(
            has_data=False,
            message="Ninguno de tus recursos recientes tiene texto analizable",
        )

    batch = aggregate(outcome.analyses, config)
    summary = batch.summary

    return DashboardMetrics(
        has_data=True,
        resources_analyzed=batch.total_resources_analyzed,
        grammatical_correctness=grammar_level(summary.avg_grammar, config),
        lexical_richness=lexical_level(summary.avg_ttr, config),
        overall_quality=QualityLevel(
            level=summary.overall_quality,
            color=quality_color(summary.overall_quality, config),
        ),
        total_texts=batch.aggregated_metrics.total_texts,
        total_words=batch.aggregated_metrics.total_tokens,
    )
