import json
import sys
from urllib.parse import urlparse

import psycopg2
from sqlalchemy import create_engine

from freight_pricing.core.config import settings
from freight_pricing.models import country_distance, pricing_config, transport_rate  # noqa: F401 registers tables
from freight_pricing.models.base import Base
from freight_pricing.services.distance import DEFAULT_COUNTRY_DISTANCES
from freight_pricing.services.pricing_config import DEFAULT_PRICING_CONFIG

SYNC_DATABASE_URL = settings.DATABASE_URL.replace("postgresql+asyncpg://", "postgresql+psycopg2://")


def pricing_config_seed_row() -> dict:
    """Default configuration as column values, JSON maps keyed by enum name."""
    row = {}
    for field, value in DEFAULT_PRICING_CONFIG.items():
        if isinstance(value, dict):
            row[field] = {str(key): item for key, item in value.items()}
        else:
            row[field] = value
    return row


def country_distance_seed_rows() -> list:
    return [
        (origin, destination, float(km))
        for origin, destinations in DEFAULT_COUNTRY_DISTANCES.items()
        for destination, km in destinations.items()
    ]


def _connect():
    db_url = urlparse(settings.DATABASE_URL.replace("postgresql+asyncpg://", "postgresql://"))
    return psycopg2.connect(
        host=db_url.hostname or "localhost",
        port=db_url.port or 5432,
        user=db_url.username or "postgres",
        password=db_url.password or "postgres",
        database=db_url.path.lstrip("/") or "postgres"
    )


def create_tables() -> None:
    engine = create_engine(SYNC_DATABASE_URL)
    Base.metadata.create_all(engine)
    engine.dispose()


def seed_pricing_config(cursor) -> str:
    row = pricing_config_seed_row()
    columns = list(row)
    values = [json.dumps(row[c]) if isinstance(row[c], dict) else row[c] for c in columns]

    cursor.execute("SELECT id FROM pricing_config ORDER BY created_at DESC, id DESC LIMIT 1")
    existing = cursor.fetchone()

    if existing:
        assignments = ", ".join(f"{c} = %s" for c in columns)
        cursor.execute(
            f"UPDATE pricing_config SET {assignments}, updated_at = now() WHERE id = %s",
            values + [existing[0]]
        )
        return f"Pricing config {existing[0]} reset to defaults"

    placeholders = ", ".join(["%s"] * len(columns))
    cursor.execute(
        f"INSERT INTO pricing_config ({', '.join(columns)}) VALUES ({placeholders}) RETURNING id",
        values
    )
    return f"Pricing config {cursor.fetchone()[0]} created"


def seed_country_distances(cursor) -> int:
    rows = country_distance_seed_rows()
    for origin, destination, km in rows:
        cursor.execute(
            "INSERT INTO country_distances (origin_country, destination_country, distance_km) "
            "VALUES (%s, %s, %s) "
            "ON CONFLICT (origin_country, destination_country) DO UPDATE SET distance_km = EXCLUDED.distance_km",
            (origin, destination, km)
        )
    return len(rows)


def main():
    with_distances = "--with-distances" in sys.argv[1:]

    try:
        create_tables()
        conn = _connect()
        cursor = conn.cursor()

        print(seed_pricing_config(cursor))
        if with_distances:
            print(f"Country distances seeded: {seed_country_distances(cursor)}")

        conn.commit()
        cursor.close()
        conn.close()
    except Exception as e:
        print(f"Error seeding pricing data: {str(e)}")
        sys.exit(1)


if __name__ == "__main__":
    main()
