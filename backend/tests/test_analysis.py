import pytest
from types import SimpleNamespace
from semantic_metrics.core.errors import ContentProcessingError
from semantic_metrics.schemas.analysis import ResourceRecord
from semantic_metrics.services.analysis_service import ResourceAnalyzer, as_record

SCENARIO_A_TEXT = (
    "El gato subió al árbol. El perro ladró al gato. Los animales son interesantes."
)


def test_analyze_detail():
    """Test the full single-resource result of a reading comprehension resource."""
    resource = {
        "id": 1,
        "type": "comprension",
        "title": "Animales",
        "content": {"texto": SCENARIO_A_TEXT},
    }
    detail = ResourceAnalyzer().analyze_detail(resource)

    assert detail.resource_id == 1
    assert detail.resource_info.title == "Animales"
    assert detail.text_analysis.total_texts == 1
    assert detail.grammatical_correctness.total_sentences == 3
    assert detail.grammatical_correctness.percentage == 100
    assert detail.lexical_richness.total_tokens == 14
    assert detail.lexical_richness.unique_types == 11
    assert detail.lexical_richness.richness_level == "Media"
    # 100 * 0.6 + 78.57 * 0.4
    assert detail.quality_score == 91.43
    assert detail.quality_level == "Excelente"


def test_analyze_flat_metrics():
    """Test the flat per-resource metrics used by batches."""
    resource = ResourceRecord(
        id=2,
        type="escritura",
        content={"descripcion": "El gato come. El gato duerme.", "conectores": ["además"]},
    )
    analysis = ResourceAnalyzer().analyze(resource)

    assert analysis.resource_type == "escritura"
    assert analysis.total_texts == 2
    assert analysis.total_sentences == 3
    assert analysis.correct_sentences == 2
    assert analysis.total_tokens == 7
    assert analysis.unique_type_count == 5
    assert analysis.frequency_map["gato"] == 2
    assert "frequencyMap" not in analysis.to_json()
    assert "averageTTR" in analysis.to_json()


def test_text_previews_are_truncated():
    """Test long texts are shortened in previews."""
    long_text = "Palabra " * 30
    detail = ResourceAnalyzer().analyze_detail(
        {"id": 3, "type": "comprension", "content": {"texto": long_text}}
    )
    preview = detail.text_analysis.text_previews[0]
    assert preview.endswith("...")
    assert len(preview) == 103


def test_no_text_raises_content_processing_error():
    """Test null, malformed and empty content raise a typed error."""
    analyzer = ResourceAnalyzer()
    for content in [None, "{broken", {"texto": "   "}]:
        with pytest.raises(ContentProcessingError) as exc_info:
            analyzer.analyze({"id": 4, "type": "comprension", "content": content})
        assert exc_info.value.status_code == 422
        assert "4" in exc_info.value.message


def test_as_record_accepts_objects():
    """Test ORM-like objects are read through their attributes."""
    row = SimpleNamespace(
        id=5, type="oral", content={"descripcion": "Hola."}, owner_id=1, title=None, created_at=None
    )
    record = as_record(row)
    assert record.id == 5
    assert record.owner_id == 1

    camel = as_record({"id": 6, "type": "oral", "ownerId": 2})
    assert camel.owner_id == 2
