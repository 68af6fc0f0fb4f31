"""
Core domain layer.

Ranking, recommendation, retrieval and ingestion logic. Depends on the
record store abstraction only, never on a concrete database.
"""
