import os
from typing import Dict, List, Optional, Tuple
from pydantic import BaseModel, Field
from dotenv import load_dotenv

load_dotenv()

# Sentinel quality levels for batches without analyzable content
NO_DATA_LEVEL = "Sin datos"
NO_RESOURCES_LEVEL = "Sin recursos"


class MetricsConfig(BaseModel):
    """Thresholds and bounds shared by the metrics engine.

    Attributes:
        grammar_weight (float): Weight of the grammar percentage in the combined score.
        lexical_weight (float): Weight of the TTR (as a percentage) in the combined score.
        quality_thresholds (List[Tuple[float, str]]): Inclusive lower bounds for each
            quality level, highest first.
        fallback_quality_level (str): Level assigned below the lowest threshold.
        richness_bands (List[Tuple[float, str]]): Inclusive lower TTR bounds for the
            display-only richness label, highest first.
        fallback_richness_band (str): Label below the lowest richness band.
        max_batch_resources (int): Hard cap on resources processed per batch.
        time_budget_seconds (Optional[float]): Soft time budget for a batch. None disables it.
        individual_analyses_limit (int): Per-resource results echoed in a batch response.
        vocabulary_size (int): Most frequent words reported per resource.
        preview_length (int): Characters kept in text previews.
        grammar_warning_below (float): Grammar % under which a grammar recommendation is made.
        vocabulary_warning_below (float): TTR under which a vocabulary recommendation is made.
        congratulate_grammar_from (float): Grammar % needed for congratulations.
        congratulate_ttr_from (float): TTR needed for congratulations.
        grammar_levels (List[Tuple[float, str, str]]): Dashboard level and color per
            inclusive lower grammar % bound, highest first.
        lexical_levels (List[Tuple[float, str, str]]): Dashboard level and color per
            inclusive lower TTR bound, highest first.
        fallback_metric_level (Tuple[str, str]): Level and color below the lowest bound.
        quality_colors (Dict[str, str]): Dashboard color per quality level.
        fallback_quality_color (str): Color of levels missing from quality_colors.
        grammar_interpretations (List[Tuple[float, str]]): Report text per inclusive
            lower grammar % bound, highest first.
        lexical_interpretations (List[Tuple[float, str]]): Report text per inclusive
            lower TTR bound, highest first.
        dashboard_resources (int): Most recent resources summarized by the dashboard.
        report_period_days (int): Default look-back window of the metrics report.
        report_resources (int): Most recent resources included in the metrics report.
    """

    grammar_weight: float = 0.6
    lexical_weight: float = 0.4

    quality_thresholds: List[Tuple[float, str]] = Field(
        default_factory=lambda: [
            (90.0, "Excelente"),
            (75.0, "Buena"),
            (60.0, "Regular"),
        ]
    )
    fallback_quality_level: str = "Deficiente"

    richness_bands: List[Tuple[float, str]] = Field(
        default_factory=lambda: [(0.8, "Alta"), (0.6, "Media")]
    )
    fallback_richness_band: str = "Baja"

    max_batch_resources: int = 50
    time_budget_seconds: Optional[float] = 10.0
    individual_analyses_limit: int = 10
    vocabulary_size: int = 20
    preview_length: int = 100

    grammar_warning_below: float = 70.0
    vocabulary_warning_below: float = 0.5
    congratulate_grammar_from: float = 85.0
    congratulate_ttr_from: float = 0.6

    grammar_levels: List[Tuple[float, str, str]] = Field(
        default_factory=lambda: [
            (85.0, "Excelente", "green"),
            (75.0, "Bueno", "blue"),
            (65.0, "Regular", "yellow"),
        ]
    )
    lexical_levels: List[Tuple[float, str, str]] = Field(
        default_factory=lambda: [
            (0.6, "Excelente", "green"),
            (0.5, "Bueno", "blue"),
            (0.4, "Regular", "yellow"),
        ]
    )
    fallback_metric_level: Tuple[str, str] = ("Mejorable", "red")
    quality_colors: Dict[str, str] = Field(
        default_factory=lambda: {
            "Excelente": "green",
            "Buena": "blue",
            "Regular": "yellow",
            "Deficiente": "orange",
        }
    )
    fallback_quality_color: str = "red"

    grammar_interpretations: List[Tuple[float, str]] = Field(
        default_factory=lambda: [
            (90.0, "Excelente: La mayoría de oraciones son gramaticalmente correctas"),
            (80.0, "Bueno: La gran mayoría de oraciones son correctas"),
            (70.0, "Regular: La mayoría de oraciones son correctas, hay margen de mejora"),
            (60.0, "Mejorable: Algunas oraciones necesitan revisión gramatical"),
        ]
    )
    fallback_grammar_interpretation: str = (
        "Necesita mejora: Se recomienda revisar la gramática del contenido"
    )
    lexical_interpretations: List[Tuple[float, str]] = Field(
        default_factory=lambda: [
            (0.7, "Excelente: Vocabulario muy variado y rico"),
            (0.6, "Bueno: Vocabulario variado con buena diversidad"),
            (0.5, "Regular: Vocabulario moderadamente variado"),
            (0.4, "Mejorable: Se podría incrementar la variedad de vocabulario"),
        ]
    )
    fallback_lexical_interpretation: str = (
        "Necesita mejora: Vocabulario limitado, se recomienda mayor diversidad"
    )

    dashboard_resources: int = 10
    report_period_days: int = 30
    report_resources: int = 100


def load_config() -> MetricsConfig:
    """Builds a MetricsConfig, applying overrides from environment variables.

    Recognized variables are METRICS_MAX_BATCH_RESOURCES and
    METRICS_TIME_BUDGET_SECONDS (an empty value or "0" disables the budget).

    Returns:
        MetricsConfig: The resolved configuration.
    """
    overrides = {}

    max_resources = os.environ.get("METRICS_MAX_BATCH_RESOURCES")
    if max_resources:
        overrides["max_batch_resources"] = int(max_resources)

    time_budget = os.environ.get("METRICS_TIME_BUDGET_SECONDS")
    if time_budget is not None:
        budget = float(time_budget) if time_budget.strip() else 0.0
        overrides["time_budget_seconds"] = budget if budget > 0 else None

    return MetricsConfig(**overrides)


DEFAULT_CONFIG = MetricsConfig()
