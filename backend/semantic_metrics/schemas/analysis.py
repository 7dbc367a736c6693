"""
Pydantic schemas for resource input records and analysis results.

Results serialize with camelCase keys (see CamelModel); a few metric names
keep their conventional upper-case acronym (``averageTTR``, ``globalTTR``).
"""

from datetime import datetime, timezone
from pydantic import Field, field_validator
from typing import Any, Dict, List, Optional
from .common import CamelModel


def as_utc(value: datetime) -> datetime:
    # Naive timestamps are UTC; the resource store compares aware ones
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class ResourceRecord(CamelModel):
    """An educational resource as handed over by the resource store.

    Attributes:
        id (int): Resource identifier.
        type (str): Resource type (comprension, escritura, gramatica, oral, ...).
        content (Any): Type-dependent content, possibly null or malformed.
        owner_id (Optional[int]): Identifier of the owning user.
        title (Optional[str]): Resource title.
        created_at (Optional[datetime]): Creation timestamp.
    """

    id: int
    type: str
    content: Any = None
    owner_id: Optional[int] = None
    title: Optional[str] = None
    created_at: Optional[datetime] = None


class BatchFilters(CamelModel):
    """Filter descriptor used to select the input set of a batch."""

    type: Optional[str] = None
    owner_id: Optional[int] = None
    created_from: Optional[datetime] = None
    created_to: Optional[datetime] = None
    limit: Optional[int] = Field(default=None, ge=1)
    offset: int = Field(default=0, ge=0)

    @field_validator("created_from", "created_to")
    @classmethod
    def assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value) if value is not None else None


# Grammar


class SentenceRecord(CamelModel):
    """Outcome of checking a single sentence."""

    text: str
    is_correct: bool
    violated_rule: Optional[str] = None


class GrammarSummary(CamelModel):
    """Grammatical correctness over every sentence of a resource."""

    total_sentences: int = 0
    correct_sentences: int = 0
    incorrect_sentences: int = 0
    percentage: float = 0.0
    details: List[SentenceRecord] = Field(default_factory=list)


# Lexical richness


class TextUnitLexicalDetail(CamelModel):
    """Token statistics of one text unit."""

    text_index: int
    preview: str
    tokens: int
    types: int
    ttr: float


class VocabularyEntry(CamelModel):
    word: str
    frequency: int


class LexicalSummary(CamelModel):
    """Lexical richness of a resource.

    Attributes:
        total_tokens (int): Tokens across all text units.
        unique_types (int): Distinct tokens across all text units.
        ttr (float): Type-Token Ratio of the pooled tally.
        average_ttr (float): Mean TTR of the individual text units.
        richness_level (str): Display band of ``ttr`` (Alta/Media/Baja).
        details (List[TextUnitLexicalDetail]): Per text unit statistics.
        vocabulary (List[VocabularyEntry]): Most frequent tokens.
    """

    total_tokens: int = 0
    unique_types: int = 0
    ttr: float = 0.0
    average_ttr: float = Field(default=0.0, alias="averageTTR")
    richness_level: str = "Baja"
    details: List[TextUnitLexicalDetail] = Field(default_factory=list)
    vocabulary: List[VocabularyEntry] = Field(default_factory=list)


# Quality


class QualityScore(CamelModel):
    combined_score: float
    quality_level: str


# Single resource


class ResourceInfo(CamelModel):
    id: int
    title: Optional[str] = None
    type: str
    created_at: Optional[datetime] = None


class TextExtractionSummary(CamelModel):
    total_texts: int
    text_previews: List[str] = Field(default_factory=list)


class ResourceAnalysisDetail(CamelModel):
    """Full single-resource result exposed to the report layer."""

    resource_id: int
    resource_info: ResourceInfo
    text_analysis: TextExtractionSummary
    grammatical_correctness: GrammarSummary
    lexical_richness: LexicalSummary
    quality_score: float
    quality_level: str


class ResourceAnalysis(CamelModel):
    """Flat per-resource metrics consumed by the aggregation step.

    ``frequency_map`` carries the resource's token counts so batches can pool
    vocabularies; it is not serialized.
    """

    resource_id: int
    resource_type: str
    total_texts: int = 0
    total_sentences: int = 0
    correct_sentences: int = 0
    grammatical_percentage: float = Field(default=0.0, ge=0, le=100)
    total_tokens: int = 0
    unique_type_count: int = 0
    ttr: float = Field(default=0.0, ge=0, le=1)
    average_ttr: float = Field(default=0.0, alias="averageTTR")
    combined_score: float = 0.0
    quality_level: str
    frequency_map: Dict[str, int] = Field(default_factory=dict, exclude=True)


# Batch


class BatchSummary(CamelModel):
    avg_grammar: float = 0.0
    avg_ttr: float = Field(default=0.0, alias="avgTTR")
    combined_score: Optional[float] = None
    overall_quality: str


class AggregatedMetrics(CamelModel):
    """Corpus-level metrics computed from pooled counts."""

    total_texts: int = 0
    total_sentences: int = 0
    total_correct_sentences: int = 0
    total_tokens: int = 0
    total_unique_types: int = 0
    global_grammatical_percentage: float = 0.0
    global_ttr: float = Field(default=0.0, alias="globalTTR")


class TypeBreakdown(CamelModel):
    count: int = 0
    avg_grammar: float = 0.0
    avg_lexical: float = 0.0


class Recommendation(CamelModel):
    type: str
    priority: str
    message: str


class ProcessingError(CamelModel):
    """A resource that could not be analyzed inside a batch."""

    resource_id: Optional[int] = None
    error: str
    message: str


class BatchAnalysis(CamelModel):
    """Aggregated analysis of a set of resources."""

    total_resources_analyzed: int = 0
    summary: BatchSummary
    aggregated_metrics: AggregatedMetrics = Field(default_factory=AggregatedMetrics)
    resource_type_breakdown: Dict[str, TypeBreakdown] = Field(default_factory=dict)
    quality_distribution: Dict[str, int] = Field(default_factory=dict)
    recommendations: List[Recommendation] = Field(default_factory=list)
    failed_analyses: int = 0
    processing_errors: List[ProcessingError] = Field(default_factory=list)
    individual_analyses: List[ResourceAnalysis] = Field(default_factory=list)
    processing_time_ms: float = 0.0
    resource_type: Optional[str] = None
    note: Optional[str] = None
