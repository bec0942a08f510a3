"""Data stores for persistence and caching.

Stores handle:
- Relational store: one async SQLAlchemy engine per division
- Redis: caching with TTL policies

No business logic in stores - that belongs in services.
"""
