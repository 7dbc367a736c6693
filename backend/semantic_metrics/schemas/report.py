"""
Pydantic schemas for per-user and corpus-wide reports.
"""

from datetime import datetime
from pydantic import Field
from typing import Dict, List, Optional
from .analysis import (
    AggregatedMetrics,
    BatchSummary,
    ProcessingError,
    Recommendation,
    ResourceAnalysis,
    TypeBreakdown,
)
from .common import CamelModel


class UserMetrics(CamelModel):
    average_grammar: float = 0.0
    average_ttr: float = Field(default=0.0, alias="averageTTR")
    overall_quality: str


class QualityBreakdown(CamelModel):
    """Resources per quality band, named the way the dashboard shows them."""

    excellent: int = 0
    good: int = 0
    regular: int = 0
    poor: int = 0


class UserReport(CamelModel):
    """Quality report over every resource owned by one user.

    Attributes:
        user (str): Display name of the user.
        user_id (int): Identifier of the user.
        total_resources (int): Resources owned by the user.
        analyzed_resources (int): Resources that produced an analysis.
        metrics (UserMetrics): Average grammar, average TTR and overall quality.
        breakdown (QualityBreakdown): Resources per quality band.
        type_distribution (Dict[str, int]): Analyzed resources per resource type.
        failed_analyses (int): Resources that could not be analyzed.
        processing_errors (List[ProcessingError]): Why each of them failed.
        note (Optional[str]): Set when the analysis was truncated.
    """

    user: str
    user_id: int
    total_resources: int = 0
    analyzed_resources: int = 0
    metrics: UserMetrics
    breakdown: QualityBreakdown = Field(default_factory=QualityBreakdown)
    type_distribution: Dict[str, int] = Field(default_factory=dict)
    failed_analyses: int = 0
    processing_errors: List[ProcessingError] = Field(default_factory=list)
    note: Optional[str] = None


class UserListItem(CamelModel):
    id: int
    name: str
    email: Optional[str] = None
    total_resources: int


class Insight(CamelModel):
    type: str
    category: str
    message: str


class TypeReport(CamelModel):
    """Batch summary of one resource type.

    ``resource_count`` counts every resource of the type in the period;
    ``note`` explains when the summary covers fewer of them.
    """

    resource_count: int
    summary: BatchSummary
    aggregated_metrics: AggregatedMetrics
    failed_analyses: int = 0
    processing_errors: List[ProcessingError] = Field(default_factory=list)
    note: Optional[str] = None
    examples: Optional[List[ResourceAnalysis]] = None


class ReportPeriod(CamelModel):
    created_from: Optional[datetime] = None
    created_to: Optional[datetime] = None


class CorpusReport(CamelModel):
    """Corpus-wide report grouped by resource type."""

    report_date: datetime
    period: ReportPeriod
    total_resources: int = 0
    global_summary: BatchSummary
    global_metrics: AggregatedMetrics = Field(default_factory=AggregatedMetrics)
    by_resource_type: Dict[str, TypeReport] = Field(default_factory=dict)
    insights: List[Insight] = Field(default_factory=list)
    failed_analyses: int = 0
    note: Optional[str] = None


# Metrics report and dashboard


class MetricInterpretation(CamelModel):
    average: float
    description: str
    interpretation: str


class PeriodMetrics(CamelModel):
    grammatical_correctness: MetricInterpretation
    lexical_richness: MetricInterpretation


class MetricsReport(CamelModel):
    """Interpreted metrics of a user's resources over a look-back period.

    Attributes:
        period (str): Human-readable period ("Últimos 30 días").
        generated_at (datetime): When the report was built.
        resource_count (int): Resources created in the period.
        summary (BatchSummary): Average grammar, average TTR and overall quality.
        metrics (Optional[PeriodMetrics]): Averages with their interpretation.
            None when nothing could be analyzed.
        by_resource_type (Dict[str, TypeBreakdown]): Averages per resource type.
        recommendations (List[Recommendation]): Advice derived from the summary.
        failed_analyses (int): Resources that could not be analyzed.
        note (Optional[str]): Set when the analysis was truncated.
    """

    period: str
    generated_at: datetime
    resource_count: int = 0
    summary: BatchSummary
    metrics: Optional[PeriodMetrics] = None
    by_resource_type: Dict[str, TypeBreakdown] = Field(default_factory=dict)
    recommendations: List[Recommendation] = Field(default_factory=list)
    failed_analyses: int = 0
    note: Optional[str] = None


class MetricLevel(CamelModel):
    value: float
    level: str
    color: str


class QualityLevel(CamelModel):
    level: str
    color: str


class DashboardMetrics(CamelModel):
    """Quick summary of a user's most recent resources."""

    has_data: bool
    message: Optional[str] = None
    resources_analyzed: int = 0
    grammatical_correctness: Optional[MetricLevel] = None
    lexical_richness: Optional[MetricLevel] = None
    overall_quality: Optional[QualityLevel] = None
    total_texts: int = 0
    total_words: int = 0
