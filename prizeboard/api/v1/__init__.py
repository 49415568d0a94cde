"""
API v1 routes aggregation
"""
from fastapi import APIRouter
from prizeboard.api.v1 import auth, competitions, prizes, settings, winners

api_router = APIRouter()

# Admin authentication
api_router.include_router(auth.router, prefix="/admin", tags=["admin"])

# Public prize page
api_router.include_router(prizes.router)

# Competitions, participants and finalization
api_router.include_router(competitions.router)

# Winner state machine
api_router.include_router(winners.router)

# Key/value settings
api_router.include_router(settings.router)
