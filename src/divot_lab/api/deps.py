"""FastAPI dependency injection."""
from __future__ import annotations

from fastapi import HTTPException, Request, status

from ..pipeline import LabState, LoadCycleResult


def get_state(request: Request) -> LabState:
    return request.app.state.lab_state


def get_latest(request: Request) -> LoadCycleResult:
    """The most recently published load cycle; 503 until the first one lands."""
    result = get_state(request).latest
    if result is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Lab data has not been loaded yet",
        )
    return result
