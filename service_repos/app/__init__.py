"""
Repos service package.

Answers "how many public repositories does GitHub user X have?" with a
cache-aside lookup. It provides:

- app.main: API surface (``GET /repos/{username}``) and service wiring.
- app.domain: Lookup models, the cache-aside composition and rendering.
- app.cache: Redis and in-memory cache gateways with per-key TTL.
- app.adapters: The GitHub REST client used on cache misses.

Guidelines:
- The service is stateless; the only shared state is the cache store.
- The cache never blocks a response: reads fail open, writes are best-effort.
- One upstream attempt per request, no retries.
"""
