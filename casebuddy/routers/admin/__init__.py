"""Admin routes module."""

from fastapi import APIRouter, Depends

from casebuddy.routers.admin import indexing
from casebuddy.security import verify_security_admin

router = APIRouter(prefix="/admin", dependencies=[Depends(verify_security_admin)])

router.include_router(indexing.router, prefix="/index", tags=["admin-indexing"])
