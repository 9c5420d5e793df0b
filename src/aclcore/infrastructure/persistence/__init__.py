"""Persistence layer: database, models and repositories."""
