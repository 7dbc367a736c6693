from semantic_metrics.core.config import MetricsConfig
from semantic_metrics.schemas.analysis import ResourceAnalysis
from semantic_metrics.services.aggregation_service import (
    aggregate,
    pool_metrics,
    quality_distribution,
    summarize,
    type_breakdown,
)
from semantic_metrics.services.quality_service import classify


def _analysis(resource_id: int, resource_type: str, words: str, correct: int, total: int):
    tokens = words.split()
    frequencies = {}
    for token in tokens:
        frequencies[token] = frequencies.get(token, 0) + 1
    grammar = 100 * correct / total
    ttr = len(frequencies) / len(tokens)
    quality = classify(grammar, ttr)
    return ResourceAnalysis(
        resource_id=resource_id,
        resource_type=resource_type,
        total_texts=1,
        total_sentences=total,
        correct_sentences=correct,
        grammatical_percentage=grammar,
        total_tokens=len(tokens),
        unique_type_count=len(frequencies),
        ttr=ttr,
        combined_score=quality.combined_score,
        quality_level=quality.quality_level,
        frequency_map=frequencies,
    )


def test_summary_uses_arithmetic_means():
    """Test the summary averages grammar and TTR across resources."""
    analyses = [
        _analysis(1, "oral", "el gato", 4, 4),
        _analysis(2, "oral", "el el", 1, 2),
    ]
    summary = summarize(analyses)
    assert summary.avg_grammar == 75
    assert summary.avg_ttr == 0.75
    assert summary.combined_score == 75
    assert summary.overall_quality == "Buena"


def test_global_ttr_differs_from_mean_ttr():
    """Test the pooled TTR counts each shared type once across resources."""
    analyses = [
        _analysis(1, "oral", "el gato", 1, 1),
        _analysis(2, "oral", "el perro", 1, 1),
    ]
    metrics = pool_metrics(analyses)

    assert metrics.total_tokens == 4
    assert metrics.total_unique_types == 3
    assert metrics.global_ttr == 0.75
    assert summarize(analyses).avg_ttr == 1.0


def test_global_grammar_uses_pooled_sentences():
    """Test the corpus grammar percentage weights resources by sentence count."""
    analyses = [
        _analysis(1, "oral", "uno dos", 1, 1),
        _analysis(2, "oral", "tres cuatro", 0, 3),
    ]
    metrics = pool_metrics(analyses)
    assert metrics.total_sentences == 4
    assert metrics.total_correct_sentences == 1
    assert metrics.global_grammatical_percentage == 25
    assert summarize(analyses).avg_grammar == 50


def test_counts_are_consistent():
    """Test breakdown and distribution counts both sum to the analyzed total."""
    analyses = [
        _analysis(1, "oral", "a b c", 3, 3),
        _analysis(2, "escritura", "a a a", 1, 4),
        _analysis(3, "escritura", "x y", 2, 2),
    ]
    result = aggregate(analyses)

    assert result.total_resources_analyzed == 3
    assert sum(b.count for b in result.resource_type_breakdown.values()) == 3
    assert sum(result.quality_distribution.values()) == 3
    assert result.resource_type_breakdown["escritura"].count == 2
    assert set(result.quality_distribution) == {"Excelente", "Buena", "Regular", "Deficiente"}


def test_type_breakdown_averages():
    """Test per-type averages."""
    breakdown = type_breakdown(
        [
            _analysis(1, "oral", "a b", 1, 1),
            _analysis(2, "oral", "a a", 1, 2),
        ]
    )
    assert breakdown["oral"].avg_grammar == 75
    assert breakdown["oral"].avg_lexical == 0.75


def test_empty_aggregate():
    """Test aggregating nothing gives the no-data sentinel and zero-filled counts."""
    result = aggregate([])

    assert result.total_resources_analyzed == 0
    assert result.summary.overall_quality == "Sin datos"
    assert result.summary.combined_score is None
    assert result.aggregated_metrics.global_ttr == 0
    assert result.quality_distribution == {
        "Excelente": 0,
        "Buena": 0,
        "Regular": 0,
        "Deficiente": 0,
    }
    assert result.recommendations == []


def test_individual_analyses_are_limited():
    """Test only the first per-resource analyses are echoed back."""
    analyses = [_analysis(i, "oral", "a b", 1, 1) for i in range(15)]
    result = aggregate(analyses, MetricsConfig(individual_analyses_limit=5))
    assert [a.resource_id for a in result.individual_analyses] == [0, 1, 2, 3, 4]
    assert quality_distribution(analyses)["Excelente"] == 15
