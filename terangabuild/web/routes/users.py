"""User lookup API routes."""

from fastapi import APIRouter, Depends, Query

from terangabuild.services import DatabaseService
from terangabuild.web.dependencies import get_service

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/search")
async def search_users(q: str = Query(""), db: DatabaseService = Depends(get_service)):
    """Profiles matching ``q`` on name, email or company (at most 10)."""
    return await db.search_users(q)
