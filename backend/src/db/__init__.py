"""Database connection configuration and URL helpers."""
