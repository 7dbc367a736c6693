from datetime import datetime, timedelta, timezone
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from sqlmodel import Session
from typing import Optional
from semantic_metrics.core.config import load_config
from semantic_metrics.core.database import get_session
from semantic_metrics.core.errors import AnalysisError, ResourceNotFound
from semantic_metrics.crud.crud import (
    get_resource,
    get_user,
    list_recent_resources,
    list_resources,
    list_users_with_resources,
)
from semantic_metrics.schemas.analysis import BatchFilters, ResourceRecord
from semantic_metrics.schemas.common import ApiResponse
from semantic_metrics.schemas.report import UserListItem
from semantic_metrics.services.analysis_service import ResourceAnalyzer
from semantic_metrics.services.batch_service import BatchOrchestrator
from semantic_metrics.services.report_service import (
    build_corpus_report,
    build_dashboard,
    build_metrics_report,
    build_user_report,
)

router = APIRouter(prefix="/semantics", tags=["semantics"])

config = load_config()
analyzer = ResourceAnalyzer(config)
orchestrator = BatchOrchestrator(config, analyzer)


async def analysis_error_handler(request: Request, exc: AnalysisError) -> JSONResponse:
    """Turns typed analysis errors into the structured failure envelope."""
    print(f"{exc.code} on {request.url.path}: {exc.message}")
    body = ApiResponse(success=False, message=exc.message, error=exc.code, data=None)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


@router.get("/resource/{resource_id}", response_model=ApiResponse)
def analyze_stored_resource(
    resource_id: int, session: Session = Depends(get_session)
) -> ApiResponse:
    """Analyzes a single stored resource.

    Args:
        resource_id (int): The ID of the resource.
        session (Session): Database session.

    Returns:
        ApiResponse: The single-resource analysis in ``data``.

    Raises:
        ResourceNotFound: If no resource has this ID.
        ContentProcessingError: If the resource has no analyzable text.
    """
    resource = get_resource(session, resource_id)
    if not resource:
        raise ResourceNotFound(f"Recurso {resource_id} no encontrado")

    detail = analyzer.analyze_detail(resource)
    return ApiResponse(success=True, data=detail.to_json())


@router.post("/analyze", response_model=ApiResponse)
def analyze_submitted_resource(record: ResourceRecord) -> ApiResponse:
    """Analyzes a resource record sent in the request body, without storing it."""
    detail = analyzer.analyze_detail(record)
    return ApiResponse(success=True, data=detail.to_json())


@router.get("/batch", response_model=ApiResponse)
def analyze_batch(
    type: Optional[str] = None,
    owner_id: Optional[int] = None,
    limit: Optional[int] = Query(default=None, ge=1),
    offset: int = Query(default=0, ge=0),
    created_from: Optional[datetime] = None,
    created_to: Optional[datetime] = None,
    session: Session = Depends(get_session),
) -> ApiResponse:
    """Analyzes the stored resources matching the filters and aggregates them.

    Returns:
        ApiResponse: The BatchAnalysis plus an echo of the filters in ``data``.
            An empty selection is still a success, with an explanatory message.
    """
    filters = BatchFilters(
        type=type,
        owner_id=owner_id,
        limit=limit,
        offset=offset,
        created_from=created_from,
        created_to=created_to,
    )

    resources = list_resources(session, filters)
    result = orchestrator.run(resources, filters)

    message = None
    if result.total_resources_analyzed == 0:
        message = "No se encontraron recursos que coincidan con los filtros"

    data = result.to_json()
    data["filters"] = filters.to_json()
    return ApiResponse(success=True, message=message, data=data)


@router.get("/report", response_model=ApiResponse)
def corpus_report(
    created_from: Optional[datetime] = None,
    created_to: Optional[datetime] = None,
    include_examples: bool = False,
    session: Session = Depends(get_session),
) -> ApiResponse:
    """Builds the corpus report grouped by resource type."""
    filters = BatchFilters(created_from=created_from, created_to=created_to)
    resources = list_resources(session, filters)

    report = build_corpus_report(
        resources,
        created_from=created_from,
        created_to=created_to,
        include_examples=include_examples,
        config=config,
    )

    message = None
    if report.total_resources == 0:
        message = "No se encontraron recursos en el período especificado"
    return ApiResponse(success=True, message=message, data=report.to_json())


@router.get("/user/{user_id}/report", response_model=ApiResponse)
def user_report(user_id: int, session: Session = Depends(get_session)) -> ApiResponse:
    """Builds the quality report of every resource owned by a user.

    Raises:
        ResourceNotFound: If the user does not exist.
    """
    user = get_user(session, user_id)
    if not user:
        raise ResourceNotFound(f"Usuario {user_id} no encontrado")

    resources = list_resources(session, BatchFilters(owner_id=user_id))
    report = build_user_report(user.id, user.name, resources, config)
    return ApiResponse(success=True, data=report.to_json())


@router.get("/user/{user_id}/metrics", response_model=ApiResponse)
def user_metrics_report(
    user_id: int,
    period_days: Optional[int] = Query(default=None, ge=1),
    type: Optional[str] = None,
    session: Session = Depends(get_session),
) -> ApiResponse:
    """Builds the interpreted metrics report of a user's recent resources.

    Args:
        user_id (int): Owner of the resources.
        period_days (Optional[int]): Look-back window in days, 30 by default.
        type (Optional[str]): Only resources of this type.
        session (Session): Database session.

    Raises:
        ResourceNotFound: If the user does not exist.
    """
    user = get_user(session, user_id)
    if not user:
        raise ResourceNotFound(f"Usuario {user_id} no encontrado")

    days = period_days or config.report_period_days
    since = datetime.now(timezone.utc) - timedelta(days=days)
    resources = list_recent_resources(
        session, user_id, limit=config.report_resources, since=since, resource_type=type
    )

    report = build_metrics_report(resources, days, config)

    message = None
    if not resources:
        message = "No se encontraron recursos en el período especificado"
    return ApiResponse(success=True, message=message, data=report.to_json())


@router.get("/user/{user_id}/dashboard", response_model=ApiResponse)
def user_dashboard(user_id: int, session: Session = Depends(get_session)) -> ApiResponse:
    """Quick metrics of a user's most recent resources.

    Raises:
        ResourceNotFound: If the user does not exist.
    """
    user = get_user(session, user_id)
    if not user:
        raise ResourceNotFound(f"Usuario {user_id} no encontrado")

    resources = list_recent_resources(session, user_id, limit=config.dashboard_resources)
    return ApiResponse(success=True, data=build_dashboard(resources, config).to_json())


@router.get("/users", response_model=ApiResponse)
def users_with_resources(session: Session = Depends(get_session)) -> ApiResponse:
    """Lists the users that own at least one resource, with their resource counts."""
    users = [
        UserListItem(id=user.id, name=user.name, email=user.email, total_resources=count)
        for user, count in list_users_with_resources(session)
    ]
    return ApiResponse(success=True, data=[u.to_json() for u in users])
