"""
Cache package for the repos service.

Provides the cache gateway backends that store repository counts with a
per-key TTL: a Redis-backed cache for deployments and a process-local
in-memory cache for local runs and tests. Both fail open.
"""
