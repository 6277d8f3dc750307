"""
Adapters for external services consumed by the repos service.
"""
