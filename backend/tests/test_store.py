from datetime import datetime
from sqlmodel import Session, inspect
from semantic_metrics.core.database import create_db_and_tables, engine
from semantic_metrics.crud.crud import list_recent_resources, list_resources
from semantic_metrics.schemas.analysis import BatchFilters


def test_create_db_and_tables():
    """Test the resource store tables are created on the configured engine."""
    create_db_and_tables()

    tables = inspect(engine).get_table_names()
    assert "user" in tables
    assert "resource" in tables


def test_list_resources_with_naive_bounds(seeded_session: Session):
    """Test naive date bounds select resources stored with aware timestamps."""
    filters = BatchFilters(created_from=datetime(2024, 4, 1), created_to=datetime(2024, 5, 31))
    resources = list_resources(seeded_session, filters)

    assert [r.id for r in resources] == [2]


def test_list_resources_by_owner_and_type(seeded_session: Session):
    """Test owner and type filters, ordered by id."""
    assert [r.id for r in list_resources(seeded_session, BatchFilters(owner_id=1))] == [1, 2]
    assert [r.id for r in list_resources(seeded_session, BatchFilters(type="gramatica"))] == [3]
    assert [r.id for r in list_resources(seeded_session)] == [1, 2, 3]


def test_list_recent_resources(seeded_session: Session):
    """Test a user's resources come newest first, bounded and filtered."""
    assert [r.id for r in list_recent_resources(seeded_session, 1, limit=10)] == [2, 1]
    assert [r.id for r in list_recent_resources(seeded_session, 1, limit=1)] == [2]

    recent = list_recent_resources(
        seeded_session, 1, limit=10, since=datetime(2024, 4, 1), resource_type="escritura"
    )
    assert [r.id for r in recent] == [2]
    assert list_recent_resources(seeded_session, 3, limit=10) == []
