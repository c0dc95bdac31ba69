from api.endpoints import trips
from fastapi import APIRouter

api_router = APIRouter()
api_router.include_router(trips.router, prefix="/trips", tags=["Trip Scan"])
