import time
from typing import (
    Any,
    Callable,
    Iterable,
    List,
    Mapping,
    NamedTuple,
    Optional,
    Sequence,
    Tuple,
)
from pydantic import ValidationError
from semantic_metrics.core.config import DEFAULT_CONFIG, MetricsConfig
from semantic_metrics.core.errors import AnalysisError, ContentProcessingError
from semantic_metrics.schemas.analysis import (
    BatchAnalysis,
    BatchFilters,
    ProcessingError,
    ResourceAnalysis,
    ResourceRecord,
    as_utc,
)
from semantic_metrics.services.aggregation_service import aggregate
from semantic_metrics.services.analysis_service import ResourceAnalyzer, as_record


def _raw_id(resource: Any) -> Optional[int]:
    raw = resource.get("id") if isinstance(resource, Mapping) else getattr(resource, "id", None)
    return raw if isinstance(raw, int) else None


def matches(record: ResourceRecord, filters: BatchFilters) -> bool:
    """Checks a record against the type, owner and creation date filters.

    Records without a creation date never match a date filter.
    """
    if filters.type and record.type != filters.type:
        return False
    if filters.owner_id is not None and record.owner_id != filters.owner_id:
        return False

    if filters.created_from or filters.created_to:
        if record.created_at is None:
            return False
        created = as_utc(record.created_at)
        if filters.created_from and created < as_utc(filters.created_from):
            return False
        if filters.created_to and created > as_utc(filters.created_to):
            return False

    return True


class BatchOutcome(NamedTuple):
    """Per-resource results of a batch, before aggregation."""

    analyses: List[ResourceAnalysis]
    errors: List[ProcessingError]
    notes: List[str]


class BatchOrchestrator:
    """Selects, analyzes and aggregates a set of resources.

    Attributes:
        config (MetricsConfig): Batch cap, time budget and metric thresholds.
        analyzer (ResourceAnalyzer): Per-resource analyzer.
    """

    def __init__(
        self,
        config: MetricsConfig = DEFAULT_CONFIG,
        analyzer: Optional[ResourceAnalyzer] = None,
    ):
        self.config = config
        self.analyzer = analyzer or ResourceAnalyzer(config)

    def coerce(
        self, resources: Iterable[Any]
    ) -> Tuple[List[ResourceRecord], List[ProcessingError]]:
        """Turns raw inputs into ResourceRecords, collecting the invalid ones."""
        records, errors = [], []
        for resource in resources:
            try:
                records.append(as_record(resource))
            except ValidationError as e:
                print(f"Skipping invalid resource record: {e.error_count()} validation error(s)")
                errors.append(
                    ProcessingError(
                        resource_id=_raw_id(resource),
                        error="invalid_record",
                        message="El registro del recurso no tiene id o tipo válidos",
                    )
                )
        return records, errors

    def select(
        self, records: Sequence[ResourceRecord], filters: BatchFilters
    ) -> Tuple[List[ResourceRecord], Optional[str]]:
        """Applies filters, offset, limit and the batch cap.

        Returns:
            Tuple[List[ResourceRecord], Optional[str]]: The working set and a
                note when the batch cap truncated it.
        """
        candidates = [r for r in records if matches(r, filters)]
        candidates = candidates[filters.offset :]
        if filters.limit is not None:
            candidates = candidates[: filters.limit]

        cap = self.config.max_batch_resources
        if len(candidates) > cap:
            return (
                candidates[:cap],
                f"Análisis limitado a {cap} recursos para optimizar rendimiento",
            )
        return candidates, None

    def collect(
        self,
        resources: Iterable[Any],
        filters: Optional[BatchFilters] = None,
        progress: Optional[Callable[[List[ResourceRecord]], Iterable[ResourceRecord]]] = None,
    ) -> BatchOutcome:
        """Selects and analyzes resources one by one, isolating failures.

        Args:
            resources (Iterable[Any]): Resource records, mappings or ORM objects.
            filters (Optional[BatchFilters]): Selection filters. None selects everything.
            progress (Optional[Callable]): Wraps the working set while it is
                iterated (e.g. ``tqdm``).

        Returns:
            BatchOutcome: Successful analyses, per-resource errors and notes.
        """
        filters = filters or BatchFilters()
        start = time.perf_counter()

        records, errors = self.coerce(resources)
        selected, cap_note = self.select(records, filters)
        notes = [cap_note] if cap_note else []

        print(f"Analyzing batch of {len(selected)} resources")

        budget = self.config.time_budget_seconds
        analyses: List[ResourceAnalysis] = []
        attempted = 0
        iterable = progress(selected) if progress else selected

        for record in iterable:
            attempted += 1
            try:
                analyses.append(self.analyzer.analyze(record))
            except AnalysisError as e:
                print(f"Error analyzing resource {record.id}: {e.message}")
                errors.append(
                    ProcessingError(resource_id=record.id, error=e.code, message=e.message)
                )
            except Exception as e:
                print(f"Unexpected error analyzing resource {record.id}: {e}")
                errors.append(
                    ProcessingError(
                        resource_id=record.id, error="unexpected_error", message=str(e)
                    )
                )

            elapsed = time.perf_counter() - start
            if budget is not None and elapsed > budget and attempted < len(selected):
                notes.append(
                    f"Tiempo límite de {budget:g} s alcanzado: se analizaron "
                    f"{attempted} de {len(selected)} recursos"
                )
                break

        # Every selected resource failed, or every input was an invalid record
        if not analyses and (attempted or (errors and not records)):
            raise ContentProcessingError(
                "No se pudo analizar ningún recurso del lote",
                details=[e.model_dump() for e in errors],
            )

        return BatchOutcome(analyses=analyses, errors=errors, notes=notes)

    def run(
        self,
        resources: Iterable[Any],
        filters: Optional[BatchFilters] = None,
        progress: Optional[Callable[[List[ResourceRecord]], Iterable[ResourceRecord]]] = None,
    ) -> BatchAnalysis:
        """Analyzes every selected resource and aggregates the results.

        Returns:
            BatchAnalysis: The aggregated result. A batch with no matching
                resources yields the "Sin datos" summary.

        Raises:
            ContentProcessingError: If resources were selected but none of them
                could be analyzed.
        """
        filters = filters or BatchFilters()
        start = time.perf_counter()

        outcome = self.collect(resources, filters, progress)

        result = aggregate(outcome.analyses, self.config)
        result.failed_analyses = len(outcome.errors)
        result.processing_errors = outcome.errors
        result.resource_type = filters.type
        result.note = " ".join(outcome.notes) or None
        result.processing_time_ms = round((time.perf_counter() - start) * 1000, 2)
        return result
