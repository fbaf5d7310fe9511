"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from app.api.routes.auth_routes import router as auth_router
from app.api.routes.users_routes import router as users_router
from app.api.routes.job_routes import router as job_router
from app.api.routes.application_routes import router as application_router
from app.api.routes.bookmark_routes import router as bookmark_router
from app.api.routes.notification_routes import router as notification_router
from app.api.routes.conversation_routes import router as conversation_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(users_router)
api_router.include_router(job_router)
api_router.include_router(application_router)
api_router.include_router(bookmark_router)
api_router.include_router(notification_router)
api_router.include_router(conversation_router)
