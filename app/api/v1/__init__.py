"""API v1 router aggregation."""

from fastapi import APIRouter

from app.api.v1.endpoints import (
    categories,
    exercises,
    health,
    progress,
    students,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(students.router, prefix="/students", tags=["students"])
api_router.include_router(exercises.router, prefix="/exercises", tags=["exercises"])
api_router.include_router(categories.router, prefix="/categories", tags=["categories"])
api_router.include_router(progress.router, prefix="/progress", tags=["progress"])
