from typing import Any, List, Optional
from sqlmodel import JSON, Column, DateTime, SQLModel, Field, Relationship
from datetime import datetime, timezone


class User(SQLModel, table=True):
    """An educator who owns educational resources."""

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    email: Optional[str] = Field(default=None, index=True, unique=True)

    resources: List["Resource"] = Relationship(back_populates="owner")


class Resource(SQLModel, table=True):
    """An educational resource with type-dependent JSON content."""

    id: Optional[int] = Field(default=None, primary_key=True)
    owner_id: Optional[int] = Field(default=None, foreign_key="user.id", index=True)
    type: str = Field(index=True)  # comprension, escritura, gramatica, oral, ...
    title: Optional[str] = Field(default=None)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        sa_type=DateTime(timezone=True),
        index=True,
    )

    # Null or malformed content is tolerated and reported at analysis time
    content: Optional[Any] = Field(default=None, sa_column=Column(JSON))

    owner: Optional[User] = Relationship(back_populates="resources")
