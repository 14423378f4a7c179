"""FastAPI dependency implementations."""

from fastapi import Request

from .coordinator import UserWriteCoordinator


def get_coordinator(request: Request) -> UserWriteCoordinator:
    """The coordinator built by the app lifespan."""
    return request.app.state.coordinator
