from fastapi import APIRouter

from northstar.api.v1.endpoints import progress

api_router = APIRouter()

api_router.include_router(progress.router, prefix="/progress", tags=["progress"])
