"""
Pydantic schemas for the eventboard API.

Request fields are typed loosely on purpose: presence and type checks live in
``eventboard.validation`` so that failures produce field-specific 400s.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel


class RegisterRequest(BaseModel):
    name: Any = None
    email: Any = None
    password: Any = None


class UpdateProfileRequest(BaseModel):
    name: Any = None


class CreateEventRequest(BaseModel):
    title: Any = None
    location: Any = None
    description: Any = None
    imageUrl: Any = None
    imageDeleteUrl: Any = None


class UpdateEventRequest(BaseModel):
    title: Any = None
    location: Any = None
    imageUrl: Any = None
    imageDeleteUrl: Any = None


class DeleteImageRequest(BaseModel):
    delete_url: Any = None


class UserDocument(BaseModel):
    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None


class EventDocument(BaseModel):
    id: str
    title: str
    location: Optional[str] = None
    description: Optional[str] = None
    imageUrl: Optional[str] = None
    imageDeleteUrl: Optional[str] = None
    ownerUid: str
    ownerName: Optional[str] = None
    ownerEmail: Optional[str] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None


class ListUsersResponse(BaseModel):
    count: int
    users: list[UserDocument]
    limit: int


class ListEventsResponse(BaseModel):
    count: int
    events: list[EventDocument]
    limit: int


class RegisterResponse(BaseModel):
    ok: bool = True
    uid: str


class CreateEventResponse(BaseModel):
    ok: bool = True
    id: str


class OkMessageResponse(BaseModel):
    ok: bool = True
    msg: str


class UploadImageResponse(BaseModel):
    url: str
    delete_url: Optional[str] = None


class OkResponse(BaseModel):
    ok: bool = True
