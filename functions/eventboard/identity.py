"""
Identity provider abstraction for Firebase Authentication and an in-memory test implementation.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Dict, Optional, Protocol

import firebase_admin
from firebase_admin import auth, credentials
from firebase_admin import exceptions as firebase_exceptions

logger = logging.getLogger(__name__)


class InvalidTokenError(Exception):
    """The bearer token could not be verified."""


class EmailAlreadyExistsError(Exception):
    """An account with the requested email already exists."""


@dataclass
class Identity:
    """Verified subject of a bearer token."""

    uid: str
    name: Optional[str] = None
    email: Optional[str] = None


class AuthClient(Protocol):
    """Operations the API needs from the identity provider."""

    def verify_id_token(self, token: str) -> Identity:
        ...

    def create_user(self, email: str, password: str, display_name: str) -> str:
        ...

    def update_display_name(self, uid: str, display_name: str) -> None:
        ...


def initialize_firebase_app(
    credentials_path: Optional[str] = None, project_id: Optional[str] = None
) -> firebase_admin.App:
    """
    Initialize the default Firebase app once per process.

    Uses the service-account file when a path is given, otherwise the
    application-default credentials of the environment.
    """
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass
    credential = credentials.Certificate(credentials_path) if credentials_path else None
    options = {"projectId": project_id} if project_id else None
    logger.info(
        "Initializing Firebase app (%s)",
        "service account" if credentials_path else "default credentials",
    )
    return firebase_admin.initialize_app(credential, options)


class FirebaseAuthClient:
    """Wraps ``firebase_admin.auth`` for a given app."""

    def __init__(self, app: Optional[firebase_admin.App] = None):
        self._app = app

    def verify_id_token(self, token: str) -> Identity:
        try:
            claims = auth.verify_id_token(token, app=self._app)
        except (ValueError, firebase_exceptions.FirebaseError) as e:
            raise InvalidTokenError(str(e)) from e
        return Identity(
            uid=claims["uid"],
            name=claims.get("name"),
            email=claims.get("email"),
        )

    def create_user(self, email: str, password: str, display_name: str) -> str:
        try:
            record = auth.create_user(
                email=email,
                password=password,
                display_name=display_name,
                app=self._app,
            )
        except auth.EmailAlreadyExistsError as e:
            raise EmailAlreadyExistsError(str(e)) from e
        return record.uid

    def update_display_name(self, uid: str, display_name: str) -> None:
        auth.update_user(uid, display_name=display_name, app=self._app)


@dataclass
class _Account:
    uid: str
    email: str
    password: str
    display_name: Optional[str] = None


@dataclass
class InMemoryAuthClient:
    """Test double for the identity provider."""

    accounts: Dict[str, _Account] = field(default_factory=dict)
    tokens: Dict[str, str] = field(default_factory=dict)

    def reset(self) -> None:
        self.accounts.clear()
        self.tokens.clear()

    def issue_token(self, uid: str) -> str:
        """Mint an opaque token that verifies as ``uid``."""
        token = f"token-{uuid.uuid4().hex}"
        self.tokens[token] = uid
        return token

    def verify_id_token(self, token: str) -> Identity:
        uid = self.tokens.get(token)
        if uid is None:
            raise InvalidTokenError("Token is not recognized")
        account = self.accounts.get(uid)
        if account is None:
            return Identity(uid=uid)
        return Identity(uid=uid, name=account.display_name, email=account.email)

    def create_user(self, email: str, password: str, display_name: str) -> str:
        normalized = email.lower()
        if any(a.email.lower() == normalized for a in self.accounts.values()):
            raise EmailAlreadyExistsError(
                "The user with the provided email already exists"
            )
        uid = uuid.uuid4().hex[:28]
        self.accounts[uid] = _Account(
            uid=uid, email=email, password=password, display_name=display_name
        )
        return uid

    def update_display_name(self, uid: str, display_name: str) -> None:
        account = self.accounts.get(uid)
        if account is None:
            raise KeyError(f"No user record found for uid {uid}")
        account.display_name = display_name
