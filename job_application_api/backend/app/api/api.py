# File: backend/app/api/api.py
from fastapi import APIRouter

from app.api.endpoints import applications, health

api_router = APIRouter(prefix="/api")
api_router.include_router(health.router, tags=["health"])
api_router.include_router(applications.router, tags=["applications"])
