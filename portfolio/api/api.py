from fastapi import APIRouter

from .endpoints import auth, themes

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])
api_router.include_router(themes.router, prefix="/themes", tags=["themes"])
