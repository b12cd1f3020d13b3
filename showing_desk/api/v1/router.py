from fastapi import APIRouter
from showing_desk.api.v1.endpoints import appointments

api_router = APIRouter()
api_router.include_router(appointments.router, prefix="/appointments", tags=["appointments"])
