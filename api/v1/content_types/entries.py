"""Entry API endpoints - CRUD and publishing for entries of any content type"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from api.dependencies import get_entity_service
from schemas.content_type_read import EntityList
from schemas.entity import EntityRead, EntitySubmission
from schemas.input_spec import InputSpec
from services.entity_service import EntityService

router = APIRouter()


@router.get("/{content_type}/entries/", response_model=EntityList)
def list_entries(
    content_type: str,
    status_filter: Optional[str] = Query(None, alias="status"),
    limit: Optional[int] = Query(None, ge=1, le=500),
    offset: int = Query(0, ge=0),
    entity_service: EntityService = Depends(get_entity_service),
):
    entities = entity_service.list_entries(content_type, status=status_filter, limit=limit, offset=offset)
    return EntityList(
        items=[entity_service.to_read(entity) for entity in entities],
        total=entity_service.count(content_type, status=status_filter),
        limit=limit,
        offset=offset,
    )


@router.post("/{content_type}/entries/", response_model=EntityRead, status_code=status.HTTP_201_CREATED)
def create_entry(
    content_type: str,
    submission: EntitySubmission,
    entity_service: EntityService = Depends(get_entity_service),
):
    """
    Create an entry.

    Without an explicit slug one is generated from the title field; taken
    slugs get a numeric suffix. Entries submitted as ``published`` must have
    every required field filled.
    """
    entity = entity_service.create(content_type, submission)
    return entity_service.to_read(entity)


@router.get("/{content_type}/entries/{entry_id}/", response_model=EntityRead)
def get_entry(
    content_type: str,
    entry_id: int,
    entity_service: EntityService = Depends(get_entity_service),
):
    return entity_service.to_read(entity_service.get(content_type, entry_id))


@router.get("/{content_type}/entries/{entry_id}/form/", response_model=list[InputSpec])
def get_entry_form(
    content_type: str,
    entry_id: int,
    entity_service: EntityService = Depends(get_entity_service),
):
    """Input specs for the edit form, pre-filled with the entry's values"""
    entity = entity_service.get(content_type, entry_id)
    return entity_service.describe_form(content_type, entity)


@router.patch("/{content_type}/entries/{entry_id}/", response_model=EntityRead)
def update_entry(
    content_type: str,
    entry_id: int,
    submission: EntitySubmission,
    entity_service: EntityService = Depends(get_entity_service),
):
    """Update the submitted fields of an entry; nothing is saved if any field is invalid"""
    entity = entity_service.update(content_type, entry_id, submission)
    return entity_service.to_read(entity)


@router.post("/{content_type}/entries/{entry_id}/publish/", response_model=EntityRead)
def publish_entry(
    content_type: str,
    entry_id: int,
    entity_service: EntityService = Depends(get_entity_service),
):
    return entity_service.to_read(entity_service.publish(content_type, entry_id))


@router.post("/{content_type}/entries/{entry_id}/archive/", response_model=EntityRead)
def archive_entry(
    content_type: str,
    entry_id: int,
    entity_service: EntityService = Depends(get_entity_service),
):
    return entity_service.to_read(entity_service.archive(content_type, entry_id))


@router.delete("/{content_type}/entries/{entry_id}/", status_code=status.HTTP_204_NO_CONTENT)
def delete_entry(
    content_type: str,
    entry_id: int,
    entity_service: EntityService = Depends(get_entity_service),
):
    entity_service.delete(content_type, entry_id)
