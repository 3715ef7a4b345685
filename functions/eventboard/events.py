"""
HTTP routes for events.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from google.cloud.firestore_v1 import SERVER_TIMESTAMP

from eventboard.config import Settings, get_settings
from eventboard.db import DocumentDbClient
from eventboard.dependencies import get_db_client, require_identity
from eventboard.errors import ForbiddenError, NotFoundError, ValidationError
from eventboard.identity import Identity
from eventboard.records import EventRecord
from eventboard.schemas import (
    CreateEventRequest,
    CreateEventResponse,
    EventDocument,
    ListEventsResponse,
    OkMessageResponse,
    UpdateEventRequest,
)
from eventboard.validation import (
    clean_optional_string,
    is_non_empty_string,
    owner_display_name,
    parse_limit,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/events", tags=["events"])


def _list_events(
    db: DocumentDbClient,
    settings: Settings,
    limit: Optional[str],
    owner_uid: Optional[str] = None,
) -> ListEventsResponse:
    capped = parse_limit(limit, settings.default_list_limit, settings.max_list_limit)
    where = ("ownerUid", owner_uid) if owner_uid is not None else None
    docs = db.query(
        settings.events_collection,
        order_by="createdAt",
        descending=True,
        limit=capped,
        where=where,
    )
    events = [EventRecord.from_document(doc_id, data).as_dict() for doc_id, data in docs]
    return ListEventsResponse(count=len(events), events=events, limit=capped)


def _load_owned_event(
    db: DocumentDbClient, settings: Settings, event_id: str, identity: Identity
) -> EventRecord:
    data = db.get(settings.events_collection, event_id)
    if data is None:
        raise NotFoundError("Event not found")
    event = EventRecord.from_document(event_id, data)
    if not event.is_owned_by(identity.uid):
        logger.warning("User %s denied access to event %s", identity.uid, event_id)
        raise ForbiddenError("Not your event")
    return event


@router.get("", response_model=ListEventsResponse)
def list_events(
    limit: Optional[str] = Query(None),
    db: DocumentDbClient = Depends(get_db_client),
    settings: Settings = Depends(get_settings),
):
    return _list_events(db, settings, limit)


# Declared before /{event_id} so "mine" is not captured as an id.
@router.get("/mine", response_model=ListEventsResponse)
def list_my_events(
    limit: Optional[str] = Query(None),
    identity: Identity = Depends(require_identity),
    db: DocumentDbClient = Depends(get_db_client),
    settings: Settings = Depends(get_settings),
):
    return _list_events(db, settings, limit, owner_uid=identity.uid)


@router.get("/{event_id}", response_model=EventDocument)
def get_event(
    event_id: str,
    db: DocumentDbClient = Depends(get_db_client),
    settings: Settings = Depends(get_settings),
):
    data = db.get(settings.events_collection, event_id)
    if data is None:
        raise NotFoundError("Event not found")
    return EventRecord.from_document(event_id, data).as_dict()


@router.post("", response_model=CreateEventResponse, status_code=201)
def create_event(
    payload: CreateEventRequest,
    identity: Identity = Depends(require_identity),
    db: DocumentDbClient = Depends(get_db_client),
    settings: Settings = Depends(get_settings),
):
    """
    Create an event owned by the caller.

    Owner name and email are copied onto the event at creation time and are
    not kept in sync with later profile changes.
    """
    if not is_non_empty_string(payload.title):
        raise ValidationError("title is required")

    profile = db.get(settings.users_collection, identity.uid) or {}
    owner_email = clean_optional_string(identity.email) or clean_optional_string(
        profile.get("email")
    )
    document = {
        "title": payload.title.strip(),
        "location": clean_optional_string(payload.location),
        "description": clean_optional_string(payload.description),
        "imageUrl": clean_optional_string(payload.imageUrl),
        "imageDeleteUrl": clean_optional_string(payload.imageDeleteUrl),
        "ownerUid": identity.uid,
        "ownerName": owner_display_name(
            profile.get("name"), identity.name, owner_email
        ),
        "ownerEmail": owner_email,
        "createdAt": SERVER_TIMESTAMP,
    }
    event_id = db.add(settings.events_collection, document)
    logger.info("User %s created event %s", identity.uid, event_id)
    return CreateEventResponse(id=event_id)


@router.put("/{event_id}", response_model=OkMessageResponse)
def update_event(
    event_id: str,
    payload: UpdateEventRequest,
    identity: Identity = Depends(require_identity),
    db: DocumentDbClient = Depends(get_db_client),
    settings: Settings = Depends(get_settings),
):
    """
    Overwrite the editable fields of an event owned by the caller.

    Location and image fields missing from the request are reset to null
    rather than kept from the stored document.
    """
    if not is_non_empty_string(payload.title):
        raise ValidationError("title is required")

    _load_owned_event(db, settings, event_id, identity)
    db.update(
        settings.events_collection,
        event_id,
        {
            "title": payload.title.strip(),
            "location": clean_optional_string(payload.location),
            "imageUrl": clean_optional_string(payload.imageUrl),
            "imageDeleteUrl": clean_optional_string(payload.imageDeleteUrl),
            "updatedAt": SERVER_TIMESTAMP,
        },
    )
    logger.info("User %s updated event %s", identity.uid, event_id)
    return OkMessageResponse(msg="Event updated")


@router.delete("/{event_id}", response_model=OkMessageResponse)
def delete_event(
    event_id: str,
    identity: Identity = Depends(require_identity),
    db: DocumentDbClient = Depends(get_db_client),
    settings: Settings = Depends(get_settings),
):
    _load_owned_event(db, settings, event_id, identity)
    db.delete(settings.events_collection, event_id)
    logger.info("User %s deleted event %s", identity.uid, event_id)
    return OkMessageResponse(msg="Event deleted")
