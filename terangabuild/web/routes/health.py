"""Health check API routes.

Reports which persistence mode the facade is running in.
"""

from fastapi import APIRouter, Depends, status

from terangabuild.services import DatabaseService
from terangabuild.web.dependencies import get_service

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("", status_code=status.HTTP_200_OK)
async def health_check(db: DatabaseService = Depends(get_service)):
    return {"status": "ok", "mode": db.mode, "backend": db.backend.name}
