"""Database layer: ORM models and initialization."""
