"""Content type admin API routes"""

from fastapi import APIRouter
from . import content_types, entries

router = APIRouter()

router.include_router(content_types.router, tags=["Content Types"])
router.include_router(entries.router, tags=["Content Entries"])
