"""Database engine, session factory and column helpers."""
