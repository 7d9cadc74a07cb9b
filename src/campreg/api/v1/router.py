"""API v1 Router - Aggregates all v1 endpoints"""

from fastapi import APIRouter

from campreg.api.v1.admin import router as admin_router
from campreg.api.v1.auth import router as auth_router
from campreg.api.v1.campers import router as campers_router
from campreg.api.v1.registrations import router as registrations_router
from campreg.api.v1.roles import router as roles_router
from campreg.api.v1.users import router as users_router

# Create the main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router, prefix="/auth", tags=["Authentication"])
api_router.include_router(users_router, prefix="/users", tags=["Users"])
api_router.include_router(roles_router, prefix="/roles", tags=["Roles"])
api_router.include_router(campers_router, prefix="/campers", tags=["Campers"])
api_router.include_router(
    registrations_router, prefix="/registrations", tags=["Registrations"]
)
api_router.include_router(admin_router, prefix="/admin", tags=["Administration"])
