"""FastAPI dependencies exposing the bootstrapped content engine"""

from fastapi import Depends, HTTPException, Request, status

from services.bootstrap_service import ContentEngine
from services.content_type_registry import ContentTypeRegistry
from services.entity_service import EntityService


def get_content_engine(request: Request) -> ContentEngine:
    content_engine = getattr(request.app.state, "content_engine", None)
    if content_engine is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Content engine is not ready",
        )
    return content_engine


def get_registry(content_engine: ContentEngine = Depends(get_content_engine)) -> ContentTypeRegistry:
    return content_engine.registry


def get_entity_service(content_engine: ContentEngine = Depends(get_content_engine)) -> EntityService:
    return content_engine.entity_service
