from fastapi import APIRouter

from app.api.themes import router as themes_router
from app.api.users import router as users_router

api_router = APIRouter()
api_router.include_router(users_router)
api_router.include_router(themes_router)
