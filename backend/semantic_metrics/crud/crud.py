from datetime import datetime
from sqlmodel import Session, select, func
from semantic_metrics.models.models import Resource, User
from semantic_metrics.schemas.analysis import BatchFilters, as_utc
from typing import List, Optional, Tuple


def get_resource(session: Session, resource_id: int) -> Optional[Resource]:
    return session.get(Resource, resource_id)


def get_user(session: Session, user_id: int) -> Optional[User]:
    return session.get(User, user_id)


def list_resources(session: Session, filters: Optional[BatchFilters] = None) -> List[Resource]:
    """Retrieves resources matching the type, owner and creation date filters.

    Offset, limit and the batch cap are applied by the batch orchestrator, so
    they are not pushed into the query.

    Args:
        session (Session): The database session.
        filters (Optional[BatchFilters]): Selection filters. None returns every resource.

    Returns:
        List[Resource]: Matching resources ordered by id.
    """
    statement = select(Resource)

    if filters:
        if filters.type:
            statement = statement.where(Resource.type == filters.type)
        if filters.owner_id is not None:
            statement = statement.where(Resource.owner_id == filters.owner_id)
        if filters.created_from:
            statement = statement.where(Resource.created_at >= filters.created_from)
        if filters.created_to:
            statement = statement.where(Resource.created_at <= filters.created_to)

    statement = statement.order_by(Resource.id)
    return list(session.exec(statement).all())


def list_recent_resources(
    session: Session,
    owner_id: int,
    limit: int,
    since: Optional[datetime] = None,
    resource_type: Optional[str] = None,
) -> List[Resource]:
    """Retrieves a user's most recent resources, newest first.

    Args:
        session (Session): The database session.
        owner_id (int): Owner of the resources.
        limit (int): Maximum number of resources returned.
        since (Optional[datetime]): Only resources created at or after this time.
        resource_type (Optional[str]): Only resources of this type.

    Returns:
        List[Resource]: Up to ``limit`` resources ordered by creation date, descending.
    """
    statement = select(Resource).where(Resource.owner_id == owner_id)

    if since:
        statement = statement.where(Resource.created_at >= as_utc(since))
    if resource_type:
        statement = statement.where(Resource.type == resource_type)

    statement = statement.order_by(Resource.created_at.desc(), Resource.id.desc()).limit(limit)
    return list(session.exec(statement).all())


def list_users_with_resources(session: Session) -> List[Tuple[User, int]]:
    """Retrieves the users that own at least one resource.

    Returns:
        List[Tuple[User, int]]: Each user with its resource count, ordered by name.
    """
    statement = (
        select(User, func.count(Resource.id))
        .join(Resource, Resource.owner_id == User.id)
        .group_by(User.id)
        .order_by(User.name)
    )
    return [(user, count) for user, count in session.exec(statement).all()]
