"""
API routes for the deal analysis engine.
"""

from fastapi import APIRouter

from dealkit.api import calculations

router = APIRouter()

router.include_router(calculations.router, prefix="/calculate", tags=["calculations"])
