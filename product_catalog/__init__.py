"""Product catalog service: CRUD over a PostgreSQL products table."""

__version__ = "1.0.0"
