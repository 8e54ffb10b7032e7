# api/v1/router.py
from fastapi import APIRouter

from . import drafts, profiles

api_router = APIRouter()

api_router.include_router(profiles.router, prefix="/profiles", tags=["Profiles"])

# edit sessions hang off /profiles/{user_id}/drafts and /drafts/{session_id}
api_router.include_router(drafts.router, tags=["Drafts"])
