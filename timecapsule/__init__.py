"""
Backend package for the time capsule API.

This package provides a FastAPI application with object storage, label
detection, capsule persistence and result cache abstractions. Each external
collaborator has an in-memory implementation for tests and local runs.
"""
