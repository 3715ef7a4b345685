"""
Structured views of the documents stored in the users and events collections.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class UserRecord:
    uid: str
    name: Optional[str] = None
    email: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, doc_id: str, data: dict) -> "UserRecord":
        return cls(
            uid=doc_id,
            name=data.get("name"),
            email=data.get("email"),
            created_at=data.get("createdAt"),
            updated_at=data.get("updatedAt"),
        )

    def as_dict(self) -> dict:
        return {
            "id": self.uid,
            "name": self.name,
            "email": self.email,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


@dataclass
class EventRecord:
    id: str
    title: str
    owner_uid: str
    location: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    image_delete_url: Optional[str] = None
    owner_name: Optional[str] = None
    owner_email: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, doc_id: str, data: dict) -> "EventRecord":
        return cls(
            id=doc_id,
            title=data.get("title") or "",
            owner_uid=data.get("ownerUid") or "",
            location=data.get("location"),
            description=data.get("description"),
            image_url=data.get("imageUrl"),
            image_delete_url=data.get("imageDeleteUrl"),
            owner_name=data.get("ownerName"),
            owner_email=data.get("ownerEmail"),
            created_at=data.get("createdAt"),
            updated_at=data.get("updatedAt"),
        )

    def is_owned_by(self, uid: str) -> bool:
        return self.owner_uid == uid

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "location": self.location,
            "description": self.description,
            "imageUrl": self.image_url,
            "imageDeleteUrl": self.image_delete_url,
            "ownerUid": self.owner_uid,
            "ownerName": self.owner_name,
            "ownerEmail": self.owner_email,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
