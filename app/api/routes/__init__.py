"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from app.api.routes.auth_routes import router as auth_router
from app.api.routes.alumni_routes import router as alumni_router
from app.api.routes.job_routes import router as job_router
from app.api.routes.file_routes import router as file_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(alumni_router)
api_router.include_router(job_router)
api_router.include_router(file_router)
