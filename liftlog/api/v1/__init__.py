"""API v1 router aggregation."""

from fastapi import APIRouter

from liftlog.api.v1.endpoints import data, exercises, health, records, workouts

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(workouts.router, prefix="/workouts", tags=["workouts"])
api_router.include_router(records.router, prefix="/records", tags=["records"])
api_router.include_router(exercises.router, prefix="/exercises", tags=["exercises"])
api_router.include_router(data.router, prefix="/data", tags=["data"])
