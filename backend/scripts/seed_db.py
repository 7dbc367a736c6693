"""
Resource Store Seeding
Creates the user and resource tables and loads an exported JSON snapshot
({"users": [...], "resources": [...]}) into an empty database.
"""

import os
import sys
import json
import argparse
from typing import Any, Dict, List, Tuple

# Project paths
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, PROJECT_ROOT)

from sqlmodel import Session, select
from semantic_metrics.core.database import engine, create_db_and_tables
from semantic_metrics.models.models import Resource, User
from semantic_metrics.schemas.analysis import ResourceRecord, as_utc


def seed_store(
    session: Session, users: List[Dict[str, Any]], resources: List[Dict[str, Any]]
) -> Tuple[int, int]:
    """Inserts users and resources unless the store already has resources.

    Resource entries are validated as ResourceRecords first, so camelCase keys
    and ISO date strings are accepted.

    Args:
        session (Session): The database session.
        users (List[Dict[str, Any]]): User entries with id, name and email.
        resources (List[Dict[str, Any]]): Resource records.

    Returns:
        Tuple[int, int]: Users and resources inserted.
    """
    existing = session.exec(select(Resource)).first()
    if existing:
        print("Database already has resources. Skipping seed.")
        return 0, 0

    for entry in users:
        session.add(User(id=entry.get("id"), name=entry["name"], email=entry.get("email")))
    session.commit()

    count = 0
    for entry in resources:
        record = ResourceRecord.model_validate(entry)
        fields = record.model_dump(exclude_none=True)
        if record.created_at:
            fields["created_at"] = as_utc(record.created_at)
        session.add(Resource(**fields))
        count += 1

    session.commit()
    return len(users), count


def main():
    parser = argparse.ArgumentParser(description="Seed the resource store from a JSON export")
    parser.add_argument("input", help='JSON file with "users" and "resources" lists')
    args = parser.parse_args()

    print("Creating tables...")
    create_db_and_tables()

    try:
        with open(args.input, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        print(f"Error: Data file not found at {args.input}")
        sys.exit(1)

    with Session(engine) as session:
        users, resources = seed_store(
            session, data.get("users", []), data.get("resources", [])
        )

    print(f"Inserted {users} users and {resources} resources.")


if __name__ == "__main__":
    main()
