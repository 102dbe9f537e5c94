from __future__ import annotations

from fastapi import APIRouter

from src.api.departments import router as departments_router
from src.api.directory import router as directory_router
from src.api.employees import router as employees_router
from src.api.firing_worksheet import router as firing_worksheet_router
from src.api.health import router as health_router


api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(employees_router)
api_router.include_router(departments_router)
api_router.include_router(directory_router)
api_router.include_router(firing_worksheet_router)
