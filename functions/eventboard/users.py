"""
HTTP routes for user profiles.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from google.cloud.firestore_v1 import SERVER_TIMESTAMP

from eventboard.config import Settings, get_settings
from eventboard.db import DocumentDbClient
from eventboard.dependencies import get_auth_client, get_db_client, require_identity
from eventboard.errors import ConflictError, NotFoundError, ValidationError
from eventboard.identity import AuthClient, EmailAlreadyExistsError, Identity
from eventboard.records import UserRecord
from eventboard.schemas import (
    ListUsersResponse,
    OkMessageResponse,
    RegisterRequest,
    RegisterResponse,
    UpdateProfileRequest,
    UserDocument,
)
from eventboard.validation import (
    is_non_empty_string,
    is_valid_email,
    is_valid_password,
    parse_limit,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])

NAME_REQUIRED = "name is required (non-empty string)"


@router.get("", response_model=ListUsersResponse)
def list_users(
    limit: Optional[str] = Query(None),
    db: DocumentDbClient = Depends(get_db_client),
    settings: Settings = Depends(get_settings),
):
    capped = parse_limit(limit, settings.default_list_limit, settings.max_list_limit)
    docs = db.query(settings.users_collection, order_by="name", limit=capped)
    users = [UserRecord.from_document(doc_id, data).as_dict() for doc_id, data in docs]
    return ListUsersResponse(count=len(users), users=users, limit=capped)


@router.get("/me", response_model=UserDocument)
def get_my_profile(
    identity: Identity = Depends(require_identity),
    db: DocumentDbClient = Depends(get_db_client),
    settings: Settings = Depends(get_settings),
):
    data = db.get(settings.users_collection, identity.uid)
    if data is None:
        raise NotFoundError("User profile not found")
    return UserRecord.from_document(identity.uid, data).as_dict()


@router.post("/register", response_model=RegisterResponse, status_code=201)
def register_user(
    payload: RegisterRequest,
    db: DocumentDbClient = Depends(get_db_client),
    auth_client: AuthClient = Depends(get_auth_client),
    settings: Settings = Depends(get_settings),
):
    """
    Create the auth account, then the profile document keyed by its uid.

    The two writes are not transactional: if the profile write fails the
    account is left without a profile.
    """
    if not is_non_empty_string(payload.name):
        raise ValidationError(NAME_REQUIRED)
    if not is_valid_email(payload.email):
        raise ValidationError("valid email is required")
    if not is_valid_password(payload.password):
        raise ValidationError("password must be at least 6 characters")

    name = payload.name.strip()
    email = payload.email.strip()
    try:
        uid = auth_client.create_user(email, payload.password, name)
    except EmailAlreadyExistsError as e:
        raise ConflictError("Email already exists") from e

    db.set(
        settings.users_collection,
        uid,
        {"name": name, "email": email, "createdAt": SERVER_TIMESTAMP},
    )
    logger.info("Registered user %s", uid)
    return RegisterResponse(uid=uid)


@router.put("/me", response_model=OkMessageResponse)
def update_my_profile(
    payload: UpdateProfileRequest,
    identity: Identity = Depends(require_identity),
    db: DocumentDbClient = Depends(get_db_client),
    auth_client: AuthClient = Depends(get_auth_client),
    settings: Settings = Depends(get_settings),
):
    if not is_non_empty_string(payload.name):
        raise ValidationError(NAME_REQUIRED)

    name = payload.name.strip()
    db.update(
        settings.users_collection,
        identity.uid,
        {"name": name, "updatedAt": SERVER_TIMESTAMP},
    )
    try:
        auth_client.update_display_name(identity.uid, name)
    except Exception:
        logger.warning(
            "Could not sync display name for %s", identity.uid, exc_info=True
        )
    return OkMessageResponse(msg="Profile updated")
