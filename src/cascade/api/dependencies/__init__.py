"""
FastAPI dependencies for request processing.

Dependencies hand app-owned resources (model manager, settings, rate
limiter) to endpoints so tests can override them.
"""
