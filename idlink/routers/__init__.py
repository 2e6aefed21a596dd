from fastapi import APIRouter
from idlink.routers.auth import auth_router
from idlink.routers.application import application_router
from idlink.routers.mail import mail_router

# Create API router with prefix
api_router = APIRouter(prefix="/api")

# Include all routers
api_router.include_router(auth_router)
api_router.include_router(application_router)
api_router.include_router(mail_router)
