import pytest
from datetime import datetime, timezone
from typing import Generator
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel, create_engine
from sqlmodel.pool import StaticPool
import sys
import os

# Append sys.path to ensure the below imports work from tests folder
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Set environment variables for testing before importing the app
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ.pop("METRICS_MAX_BATCH_RESOURCES", None)
os.environ.pop("METRICS_TIME_BUDGET_SECONDS", None)

from semantic_metrics.main import app
from semantic_metrics.core.database import get_session
from semantic_metrics.models.models import Resource, User

# Create in-memory SQLite database for testing
TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    TEST_DATABASE_URL, connect_args={"check_same_thread": False}, poolclass=StaticPool
)

SCENARIO_A_TEXT = (
    "El gato subió al árbol. El perro ladró al gato. Los animales son interesantes."
)


@pytest.fixture(name="session")
def session_fixture() -> Generator[Session, None, None]:
    """Creates a fresh in-memory database session for each test.

    Yields:
        Session: The SQLModel session connected to the test database.
    """
    SQLModel.metadata.create_all(engine)

    with Session(engine) as session:
        yield session

    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="client")
def client_fixture(session: Session) -> Generator[TestClient, None, None]:
    """Creates a TestClient with the database dependency overridden.

    Args:
        session (Session): The test database session.

    Yields:
        TestClient: The FastAPI test client.
    """

    def get_session_override():
        return session

    app.dependency_overrides[get_session] = get_session_override

    client = TestClient(app)
    yield client

    app.dependency_overrides.clear()


@pytest.fixture(name="seeded_session")
def seeded_session_fixture(session: Session) -> Session:
    """Pre-populates the database with users and resources.

    Ana owns a reading comprehension and a writing resource, Bruno owns a
    grammar resource with null content, Carla owns nothing.

    Args:
        session (Session): The empty test database session.

    Returns:
        Session: The session with committed mock data.
    """
    ana = User(name="Ana", email="ana@example.com")
    bruno = User(name="Bruno", email="bruno@example.com")
    carla = User(name="Carla", email="carla@example.com")
    session.add(ana)
    session.add(bruno)
    session.add(carla)
    session.commit()

    session.add(
        Resource(
            owner_id=ana.id,
            type="comprension",
            title="El gato y el perro",
            created_at=datetime(2024, 3, 1, 10, 0, tzinfo=timezone.utc),
            content={
                "texto": SCENARIO_A_TEXT,
                "preguntas": [
                    {
                        "pregunta": "¿Quién subió al árbol?",
                        "opciones": ["El gato", "El perro"],
                        "respuesta": "El gato",
                    }
                ],
            },
        )
    )
    session.add(
        Resource(
            owner_id=ana.id,
            type="escritura",
            title="Mi familia",
            created_at=datetime(2024, 5, 15, 9, 30, tzinfo=timezone.utc),
            content={
                "descripcion": "Escribe un texto breve sobre tu familia.",
                "instrucciones": "Usa oraciones completas. Revisa la ortografía al final.",
                "conectores": ["además", "también", "por eso"],
            },
        )
    )
    session.add(
        Resource(
            owner_id=bruno.id,
            type="gramatica",
            title="Sin contenido",
            created_at=datetime(2024, 6, 1, 8, 0, tzinfo=timezone.utc),
            content=None,
        )
    )

    session.commit()
    return session
