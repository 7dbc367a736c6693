import pytest
from semantic_metrics.core.config import MetricsConfig
from semantic_metrics.services.quality_service import classify, combined_score, quality_level


@pytest.mark.parametrize(
    "grammar, ttr, score, level",
    [
        (95, 0.85, 91, "Excelente"),
        (85, 0.6, 75, "Buena"),
        (70, 0.5, 62, "Regular"),
        (50, 0.2, 38, "Deficiente"),
    ],
)
def test_classification_table(grammar: float, ttr: float, score: float, level: str):
    """Test the weighted score and level of representative inputs."""
    result = classify(grammar, ttr)
    assert result.combined_score == score
    assert result.quality_level == level


def test_thresholds_are_inclusive():
    """Test a score exactly on a threshold gets the higher level."""
    assert quality_level(90) == "Excelente"
    assert quality_level(89.99) == "Buena"
    assert quality_level(75) == "Buena"
    assert quality_level(60) == "Regular"
    assert quality_level(59.99) == "Deficiente"


def test_combined_score_is_rounded():
    """Test float noise cannot move a score across a threshold."""
    assert combined_score(85, 0.6) == 75.0
    assert combined_score(100, 1) == 100.0
    assert combined_score(0, 0) == 0.0


def test_out_of_range_inputs():
    """Test out-of-range grammar or TTR values are rejected."""
    with pytest.raises(ValueError):
        classify(101, 0.5)
    with pytest.raises(ValueError):
        classify(50, 1.5)
    with pytest.raises(ValueError):
        classify(-1, 0.5)


def test_custom_weights():
    """Test weights and thresholds come from the configuration."""
    config = MetricsConfig(grammar_weight=1.0, lexical_weight=0.0)
    result = classify(80, 0.1, config)
    assert result.combined_score == 80
    assert result.quality_level == "Buena"
