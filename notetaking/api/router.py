"""API router aggregation."""

from fastapi import APIRouter

from notetaking.api import auth, notes

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(notes.router, prefix="/notes", tags=["Notes"])
