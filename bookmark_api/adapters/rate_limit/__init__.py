"""Rate limit counter storage.

Counters live behind an abstract store so the in-memory implementation can be
replaced by a shared backend (e.g., Redis) without touching the limiter.
"""
