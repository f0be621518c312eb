"""Liveness endpoints."""

from fastapi import APIRouter

from .models import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/")
async def root() -> dict[str, str]:
    return {"status": "OK", "message": "API is working properly"}


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse()
