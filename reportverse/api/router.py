from fastapi import APIRouter
from reportverse.api.endpoints import auth, mentee, mentor, health

api_router = APIRouter()

api_router.include_router(health.router)
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(mentee.router, prefix="/mentee", tags=["Mentee"])
api_router.include_router(mentor.router, prefix="/mentor", tags=["Mentor"])
