from semantic_metrics.core.config import NO_DATA_LEVEL, NO_RESOURCES_LEVEL
from semantic_metrics.schemas.analysis import BatchSummary
from semantic_metrics.services.recommendation_service import recommend


def _summary(grammar: float, ttr: float, quality: str = "Regular") -> BatchSummary:
    return BatchSummary(avg_grammar=grammar, avg_ttr=ttr, overall_quality=quality)


def test_low_grammar_and_vocabulary():
    """Test weak grammar and vocabulary both produce advice."""
    recommendations = recommend(_summary(60, 0.4))
    assert [(r.type, r.priority) for r in recommendations] == [
        ("grammar", "high"),
        ("vocabulary", "medium"),
    ]
    assert "60%" in recommendations[0].message


def test_congratulations():
    """Test strong metrics produce a single congratulation."""
    recommendations = recommend(_summary(85, 0.6, "Buena"))
    assert len(recommendations) == 1
    assert recommendations[0].type == "congratulations"
    assert recommendations[0].priority == "info"


def test_middle_ground_has_no_recommendations():
    """Test acceptable but not outstanding metrics produce nothing."""
    assert recommend(_summary(75, 0.55)) == []
    assert recommend(_summary(90, 0.5)) == []


def test_sentinel_summaries():
    """Test summaries without data never produce recommendations."""
    assert recommend(BatchSummary(overall_quality=NO_DATA_LEVEL)) == []
    assert recommend(BatchSummary(overall_quality=NO_RESOURCES_LEVEL)) == []


def test_recommend_is_deterministic():
    """Test the same summary always yields the same recommendations."""
    summary = _summary(50, 0.3)
    assert recommend(summary) == recommend(summary)
