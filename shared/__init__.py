"""
Shared utilities for the repos service.

This package aggregates the common building blocks of a service:

- config: Service configuration via pydantic-settings
- logging: Structured logging with request correlation
- metrics: Prometheus metrics helpers
- errors: Canonical error types and responses
- base_service: FastAPI application shell (health, metrics, error handlers)

Do not import from service_* packages into shared/.
"""
