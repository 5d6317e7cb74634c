"""PostgreSQL persistence adapter (SQLAlchemy async + asyncpg)."""
