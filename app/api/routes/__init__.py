"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from app.api.routes.ai_routes import router as ai_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(ai_router)
