# app/routers/dependencies.py
"""Shared FastAPI dependencies of the registry routers."""

from fastapi import Request

from app.services.change_publisher import ChangePublisher


def get_publisher(request: Request) -> ChangePublisher:
    """Change publisher attached to the application at startup."""
    return request.app.state.publisher
