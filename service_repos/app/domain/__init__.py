"""
Domain layer for the repos service: lookup models, the cache-aside
lookup composition and response rendering.
"""
