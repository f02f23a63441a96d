"""
FastAPI application layer for the cascade pipeline.

This package exposes the multi-model chat pipeline over HTTP: one chat
endpoint plus health and root endpoints.
"""
