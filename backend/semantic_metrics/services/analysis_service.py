from typing import Any, Mapping, Optional, Tuple, Union
from semantic_metrics.core.config import DEFAULT_CONFIG, MetricsConfig
from semantic_metrics.core.errors import ContentProcessingError
from semantic_metrics.schemas.analysis import (
    ResourceAnalysis,
    ResourceAnalysisDetail,
    ResourceInfo,
    ResourceRecord,
    TextExtractionSummary,
)
from semantic_metrics.services import lexical_service
from semantic_metrics.services.grammar_service import GrammarChecker
from semantic_metrics.services.lexical_service import TokenTally
from semantic_metrics.services.quality_service import classify
from semantic_metrics.services.text_extractor import extract


def as_record(resource: Union[ResourceRecord, Mapping[str, Any], Any]) -> ResourceRecord:
    """Coerces a mapping or an ORM object into a ResourceRecord.

    Raises:
        pydantic.ValidationError: If required fields (id, type) are missing.
    """
    if isinstance(resource, ResourceRecord):
        return resource
    if isinstance(resource, Mapping):
        return ResourceRecord.model_validate(resource)
    return ResourceRecord.model_validate(resource, from_attributes=True)


class ResourceAnalyzer:
    """Runs extraction, grammar, lexical and quality metrics for one resource."""

    def __init__(
        self,
        config: MetricsConfig = DEFAULT_CONFIG,
        checker: Optional[GrammarChecker] = None,
    ):
        self.config = config
        self.checker = checker or GrammarChecker()

    def _run(self, record: ResourceRecord) -> Tuple[ResourceAnalysisDetail, TokenTally]:
        texts = extract(record)

        if not texts:
            raise ContentProcessingError(
                f"No se encontró contenido textual para analizar en el recurso {record.id}"
            )

        grammar = self.checker.check_texts(texts)
        lexical = lexical_service.measure(texts, self.config)
        quality = classify(grammar.percentage, lexical.ttr, self.config)

        preview_length = self.config.preview_length
        detail = ResourceAnalysisDetail(
            resource_id=record.id,
            resource_info=ResourceInfo(
                id=record.id,
                title=record.title,
                type=record.type,
                created_at=record.created_at,
            ),
            text_analysis=TextExtractionSummary(
                total_texts=len(texts),
                text_previews=[
                    text[:preview_length] + ("..." if len(text) > preview_length else "")
                    for text in texts[:3]
                ],
            ),
            grammatical_correctness=grammar,
            lexical_richness=lexical,
            quality_score=quality.combined_score,
            quality_level=quality.quality_level,
        )
        return detail, lexical_service.tally_units(texts)

    def analyze_detail(self, resource) -> ResourceAnalysisDetail:
        """Analyzes a resource and returns the full single-resource result.

        Args:
            resource: A ResourceRecord, a mapping, or an object with the same attributes.

        Returns:
            ResourceAnalysisDetail: Text, grammar, lexical and quality results.

        Raises:
            ContentProcessingError: If the content yields no text to analyze.
        """
        detail, _ = self._run(as_record(resource))
        return detail

    def analyze(self, resource) -> ResourceAnalysis:
        """Analyzes a resource and returns the flat metrics used for aggregation.

        Raises:
            ContentProcessingError: If the content yields no text to analyze.
        """
        record = as_record(resource)
        detail, pooled = self._run(record)
        grammar = detail.grammatical_correctness
        lexical = detail.lexical_richness

        return ResourceAnalysis(
            resource_id=record.id,
            resource_type=record.type,
            total_texts=detail.text_analysis.total_texts,
            total_sentences=grammar.total_sentences,
            correct_sentences=grammar.correct_sentences,
            grammatical_percentage=grammar.percentage,
            total_tokens=lexical.total_tokens,
            unique_type_count=lexical.unique_types,
            ttr=lexical.ttr,
            average_ttr=lexical.average_ttr,
            combined_score=detail.quality_score,
            quality_level=detail.quality_level,
            frequency_map=dict(pooled.frequencies),
        )
