"""Create the schema and seed demo users and entries.

Usage: python scripts/seed_data.py [--schema-only]

The bundled app/data/us_cities.json covers the larger US cities only. For
complete feed coverage point CITY_DATA_PATH at a full city list with the same
fields (city, state_id, state_name, lat, lng, population).
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.database import SessionLocal, engine, Base
import app.models  # noqa: F401 - registers all models

from app.models.user import User
from app.schemas.entry import EntryCreate
from app.schemas.tag import TagBase
from app.services import entry_service

DEMO_USERS = [
    {"username": "alice", "first_name": "Alice", "last_name": "Liddell", "email": "alice@example.com"},
    {"username": "bob", "first_name": "Bob", "last_name": "Builder", "email": "bob@example.com"},
]

DEMO_ENTRIES = [
    EntryCreate(
        title="Coffee Shop",
        address="1 Market St, San Francisco, CA",
        longitude=-122.42,
        latitude=37.77,
        description="Espresso and pastries near the Embarcadero.",
        tags=[TagBase(name="food", classification="category")],
    ),
    EntryCreate(
        title="Dolores Park",
        address="Dolores St & 19th St, San Francisco, CA",
        longitude=-122.4276,
        latitude=37.7596,
        description="Sunny hillside park with a view of downtown.",
        tags=[TagBase(name="park", classification="category")],
    ),
]


def seed(schema_only: bool = False):
    Base.metadata.create_all(bind=engine)
    print("Database tables created.")
    if schema_only:
        return

    db = SessionLocal()
    try:
        if db.query(User).count() > 0:
            print("Database already seeded. Skipping.")
            return

        users = [User(**row) for row in DEMO_USERS]
        db.add_all(users)
        db.commit()

        for data in DEMO_ENTRIES:
            created = entry_service.create_entry(db, data, users[0])
            print(f"Created entry {created['entry_id']}: {data.title}")
        print("Seed complete.")
    finally:
        db.close()


if __name__ == "__main__":
    seed(schema_only="--schema-only" in sys.argv[1:])
